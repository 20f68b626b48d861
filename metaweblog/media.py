"""Store uploaded media files on disk.

Files go to content_root/storage_path/filename and are published at the URL
storage_path/filename. An existing file is never overwritten: the upload gets
a random name with the same extension instead. The check and the write aren't
atomic, so two simultaneous uploads of one name can still collide.
"""
import logging
import os
import posixpath
import re
import uuid
from urllib.parse import quote

from tornado import gen
from tornado.ioloop import IOLoop

_separators = re.compile(r'[/\\]')


def filename_only(name):
    """Last component of a client-supplied path, '' if there's none."""
    filename = _separators.split(name or '')[-1]
    if filename in ('.', '..'):
        return ''
    return filename


def non_colliding_name(filename):
    extension = os.path.splitext(filename)[1]
    return uuid.uuid4().hex + extension


def ensure_directory(path):
    """Create path and any missing parents; fine if they exist."""
    os.makedirs(path, exist_ok=True)


def write_file(path, content):
    with open(path, 'wb') as f:
        f.write(content)


class MediaStore(object):
    def __init__(self, storage_path, content_root):
        if not storage_path:
            raise ValueError(
                "MediaStore needs a storage path, like '/media', that tells"
                " it where to put uploaded files")

        self.storage_path = '/' + storage_path.strip('/')
        self.content_root = content_root

    @property
    def media_dir(self):
        return os.path.join(self.content_root, self.storage_path.lstrip('/'))

    def filesystem_path(self, filename):
        return os.path.join(self.media_dir, filename)

    def public_path(self, filename):
        return posixpath.join(self.storage_path, filename)

    @gen.coroutine
    def store(self, name, content):
        """Write content and return its URL, relative to the site root.

        The write runs on the IOLoop's default executor.
        """
        filename = filename_only(name)
        path = self.filesystem_path(filename)
        ensure_directory(os.path.dirname(path))

        if not filename or os.path.exists(path):
            filename = non_colliding_name(filename)
            path = self.filesystem_path(filename)

        yield IOLoop.current().run_in_executor(None, write_file, path, content)
        logging.info('Stored %d bytes in %s', len(content), path)
        return quote(self.public_path(filename))
