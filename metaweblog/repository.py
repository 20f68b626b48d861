"""Where stories live between requests.

A repository is a unit of work: add_story(), delete_story(), and changes made
to a Story returned by get_story() are only staged. Nothing reaches the store
until save_all(). Make a new repository per request.
"""
import logging

from pymongo import DESCENDING, ReturnDocument
from tornado import gen

from metaweblog.models import Story


class StoryNotFound(KeyError):
    pass


def split_categories(values):
    labels = set()
    for value in values:
        labels.update(label for label in value.split(',') if label)
    return labels


class StoryRepository(object):
    """Bookkeeping shared by the concrete repositories.

    Subclasses implement _find(), _find_recent(), _all_categories() and
    _flush().
    """
    def __init__(self):
        self._reset()

    def _reset(self):
        self._added = []
        # Stories handed out by get_story, written back on save_all.
        self._loaded = {}
        self._deleted = set()

    def add_story(self, story):
        self._added.append(story)

    @gen.coroutine
    def get_story(self, story_id):
        if story_id in self._deleted:
            raise StoryNotFound(story_id)
        if story_id in self._loaded:
            return self._loaded[story_id]

        doc = yield self._find(story_id)
        if not doc:
            raise StoryNotFound(story_id)

        story = Story.from_python(doc)
        self._loaded[story_id] = story
        return story

    @gen.coroutine
    def get_stories(self, max_count):
        """Up to max_count stories, most recently published first."""
        if max_count < 1:
            return []

        docs = yield self._find_recent(max_count)
        return [Story.from_python(doc) for doc in docs]

    @gen.coroutine
    def delete_story(self, story_id):
        if story_id in self._deleted:
            raise StoryNotFound(story_id)

        doc = yield self._find(story_id)
        if not doc:
            raise StoryNotFound(story_id)

        self._loaded.pop(story_id, None)
        self._deleted.add(story_id)
        return True

    @gen.coroutine
    def get_categories(self):
        """Distinct, non-empty category labels of all stored stories."""
        values = yield self._all_categories()
        return split_categories(values)

    @gen.coroutine
    def save_all(self):
        added = self._added
        loaded = list(self._loaded.values())
        deleted = self._deleted
        self._reset()
        yield self._flush(added, loaded, deleted)
        logging.debug(
            'Saved stories: %d added, %d updated, %d deleted',
            len(added), len(loaded), len(deleted))


class MemoryStore(object):
    """Stories kept in this process, lost on restart."""
    def __init__(self):
        self.stories = {}
        self.last_id = 0


class MemoryStoryRepository(StoryRepository):
    def __init__(self, store):
        super(MemoryStoryRepository, self).__init__()
        self.store = store

    @gen.coroutine
    def _find(self, story_id):
        return self.store.stories.get(story_id)

    @gen.coroutine
    def _find_recent(self, max_count):
        docs = sorted(
            self.store.stories.values(),
            key=lambda doc: (doc['date_published'], doc['_id']),
            reverse=True)

        return docs[:max_count]

    @gen.coroutine
    def _all_categories(self):
        return [doc['categories'] for doc in self.store.stories.values()]

    @gen.coroutine
    def _flush(self, added, loaded, deleted):
        # Build the new state completely, then swap it in.
        stories = dict(self.store.stories)
        last_id = self.store.last_id
        for story in added:
            last_id += 1
            story.id = last_id
            stories[story.id] = story.to_python()

        for story in loaded:
            stories[story.id] = story.to_python()

        for story_id in deleted:
            stories.pop(story_id, None)

        self.store.stories = stories
        self.store.last_id = last_id


class MotorStoryRepository(StoryRepository):
    """Stories in the 'stories' collection, with integer _ids drawn from the
    'counters' collection.
    """
    def __init__(self, db):
        super(MotorStoryRepository, self).__init__()
        self.db = db

    def _find(self, story_id):
        return self.db.stories.find_one({'_id': story_id})

    def _find_recent(self, max_count):
        cursor = self.db.stories.find()
        cursor.sort([('date_published', DESCENDING), ('_id', DESCENDING)])
        return cursor.to_list(length=max_count)

    def _all_categories(self):
        return self.db.stories.distinct('categories')

    @gen.coroutine
    def _next_id(self):
        counter = yield self.db.counters.find_one_and_update(
            {'_id': 'stories'},
            {'$inc': {'seq': 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER)

        return counter['seq']

    @gen.coroutine
    def _flush(self, added, loaded, deleted):
        # Not a transaction: a failure part way leaves earlier writes done.
        for story in added:
            story.id = yield self._next_id()
            yield self.db.stories.insert_one(story.to_python())

        for story in loaded:
            yield self.db.stories.replace_one(
                {'_id': story.id}, story.to_python())

        for story_id in deleted:
            yield self.db.stories.delete_one({'_id': story_id})
