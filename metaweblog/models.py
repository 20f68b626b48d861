import datetime
import xmlrpc.client
from typing import Optional

import pytz
from pydantic import BaseModel, Field
from tornado.options import options as opts

from metaweblog.text import link, slugify

utc_tz = pytz.timezone('UTC')


def local_now():
    """Naive datetime in the blog's timezone.

    Stories' dates are naive and mean local time, like the dateCreated
    editing clients send.
    """
    tz = pytz.timezone(opts.timezone)
    return datetime.datetime.now(tz).replace(tzinfo=None)


def from_xmlrpc_date(value):
    if isinstance(value, xmlrpc.client.DateTime):
        return datetime.datetime.strptime(value.value, "%Y%m%dT%H:%M:%S")
    return value


class Story(BaseModel):
    """A blog post.

    `categories` holds the post's labels joined with commas; a label that
    itself contains a comma doesn't survive the round trip.
    """
    id: Optional[int] = None
    slug: str = ''
    # Set once, when the story is created.
    unique_id: str = ''
    title: str = ''
    body: str = ''
    date_published: datetime.datetime = Field(default_factory=local_now)
    categories: str = ''
    is_published: bool = False

    @classmethod
    def from_metaweblog(cls, struct, publish):
        """Receive a metaWeblog 'post' struct and initialize a Story."""
        story = cls()
        story.update_from_metaweblog(struct, publish)
        story.unique_id = story.slug
        return story

    def update_from_metaweblog(self, struct, publish):
        """Overwrite this story's fields from a metaWeblog 'post' struct.

        The slug is always derived from the new title; a 'wp_slug' sent by
        the client is ignored.
        """
        # Convert everything before assigning, so a bad struct leaves the
        # story unchanged.
        title = struct.get('title', '')
        body = struct.get('description', '')
        date_published = (
            from_xmlrpc_date(struct.get('dateCreated')) or local_now())
        categories = ','.join(struct.get('categories') or [])

        self.title = title
        self.body = body
        self.date_published = date_published
        self.categories = categories
        self.is_published = bool(publish)
        self.slug = self.story_url()

    def story_url(self):
        return slugify.slugify(self.title)

    def to_metaweblog(self):
        url = link.story_link(self.slug)
        return {
            'postid': str(self.id),
            'userid': opts.author_id,
            'title': self.title,
            'description': self.body,
            'dateCreated': self.date_published,
            'date_created_gmt': self.date_created_gmt,
            # Naive split, empty labels are kept.
            'categories': self.categories.split(','),
            'link': url,
            'permaLink': url,
            'wp_slug': self.slug,
            'post_status': 'publish' if self.is_published else 'draft',
        }

    @property
    def date_created_gmt(self):
        """date_published, read in the blog's timezone, converted to UTC."""
        dp = self.date_published
        if dp.tzinfo is None:
            dp = pytz.timezone(opts.timezone).localize(dp)
        return dp.astimezone(utc_tz).replace(tzinfo=None)

    def to_python(self):
        dct = self.model_dump()
        dct['_id'] = dct.pop('id')
        return dct

    @classmethod
    def from_python(cls, doc):
        dct = dict(doc)
        dct['id'] = dct.pop('_id', None)
        return cls(**dct)


def category_to_metaweblog(label):
    return {
        'categoryid': label,
        'title': label,
        'description': label,
        'htmlUrl': link.category_link(label),
        'rssUrl': '',
    }


def blog_info():
    """The one blog this server hosts."""
    return {
        'blogid': opts.blog_id,
        'blogName': opts.blog_name,
        'url': opts.blog_url,
        'xmlrpc': link.api_link(),
        'isAdmin': True,
    }


def user_info():
    """The one author of the blog."""
    return {
        'userid': opts.author_id,
        'firstname': opts.author_first_name,
        'lastname': opts.author_last_name,
        'email': opts.author_email,
        'url': opts.author_url,
    }
