import os
import re

import tornado.web
from tornado.web import StaticFileHandler

from metaweblog.api.handlers import APIHandler, RSDHandler
from metaweblog.media import MediaStore


def get_url_spec(base_url):
    class U(tornado.web.URLSpec):
        def __init__(self, pattern, *args, **kwargs):
            """Include base_url in pattern"""
            super(U, self).__init__(
                '/' + base_url.strip('/') + '/' + pattern.lstrip('/'),
                *args, **kwargs
            )

    return U


def get_application(root_dir, option_parser, repository_factory, credentials):
    """Make the Tornado application.

    :Parameters:
      - `root_dir`: directory a relative content_root is resolved against
      - `option_parser`: parsed tornado.options
      - `repository_factory`: returns a new story repository for each request
      - `credentials`: a credential store
    """
    U = get_url_spec(option_parser.base_url)
    media_store = MediaStore(
        option_parser.media_path,
        os.path.join(root_dir, option_parser.content_root))

    media_prefix = media_store.storage_path.rstrip('/')
    urls = [
        # XML-RPC API
        U(r"/rsd", RSDHandler, name='rsd'),
        U(r"/api", APIHandler, name='api'),

        # Uploaded files, outside base_url like the URLs MediaStore returns.
        tornado.web.URLSpec(
            re.escape(media_prefix) + r"/(.+)",
            StaticFileHandler, {"path": media_store.media_dir}, name='media'),
    ]

    return tornado.web.Application(
        urls,
        repository_factory=repository_factory,
        credentials=credentials,
        media_store=media_store,
        autoreload=option_parser.autoreload,
    )
