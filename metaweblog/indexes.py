import logging

from tornado import gen


@gen.coroutine
def ensure_indexes(db, drop=False):
    if drop:
        logging.info('Dropping indexes...')
        yield db.stories.drop_indexes()

    logging.info('Ensuring indexes...')

    # getRecentPosts.
    yield db.stories.create_index([('date_published', -1), ('_id', -1)])
    yield db.stories.create_index([('slug', 1)])

    logging.info('    done.')
