import os
import re
import shutil
import tempfile
import threading

import mock
from tornado.options import options as tornado_options
from tornado.testing import AsyncTestCase, gen_test

from metaweblog import media
from metaweblog.media import MediaStore, ensure_directory, filename_only
from metaweblog.media import write_file as media_write_file
import test  # metaweblog project's test/__init__.py.

# Not a whole PNG, just its signature.
png_bits = b'\x89PNG\r\n\x1a\n' + b'\x00' * 8
random_png = re.compile(r'^/media/[0-9a-f]{32}\.png$')


class MediaStoreTest(AsyncTestCase):
    def setUp(self):
        super(MediaStoreTest, self).setUp()
        self.content_root = tempfile.mkdtemp()
        self.store = MediaStore('/media', self.content_root)

    def tearDown(self):
        shutil.rmtree(self.content_root)
        super(MediaStoreTest, self).tearDown()

    def path(self, *parts):
        return os.path.join(self.content_root, *parts)

    def read(self, url):
        with open(self.path(url.lstrip('/')), 'rb') as f:
            return f.read()

    @gen_test
    def test_store(self):
        url = yield self.store.store('photo.png', png_bits)
        self.assertEqual('/media/photo.png', url)
        self.assertEqual(png_bits, self.read(url))

    @gen_test
    def test_write_runs_off_the_ioloop_thread(self):
        threads = []

        def write_file(path, content):
            threads.append(threading.current_thread())
            media_write_file(path, content)

        with mock.patch.object(media, 'write_file', write_file):
            url = yield self.store.store('photo.png', png_bits)

        self.assertEqual(1, len(threads))
        self.assertIsNot(threading.current_thread(), threads[0])
        self.assertEqual(png_bits, self.read(url))

    @gen_test
    def test_collision(self):
        first = yield self.store.store('photo.png', b'first')
        second = yield self.store.store('photo.png', b'second')
        self.assertEqual('/media/photo.png', first)
        self.assertRegex(second, random_png)
        self.assertEqual(b'first', self.read(first))
        self.assertEqual(b'second', self.read(second))

        third = yield self.store.store('photo.png', b'third')
        self.assertNotEqual(second, third)
        self.assertEqual(
            3, len(os.listdir(self.path('media'))))

    @gen_test
    def test_collision_without_extension(self):
        yield self.store.store('README', b'one')
        url = yield self.store.store('README', b'two')
        self.assertRegex(url, r'^/media/[0-9a-f]{32}$')

    @gen_test
    def test_nested_storage_path(self):
        store = MediaStore('/uploads/2014/01/', self.content_root)
        self.assertFalse(os.path.exists(self.path('uploads')))
        url = yield store.store('a.txt', b'a')
        self.assertEqual('/uploads/2014/01/a.txt', url)
        self.assertTrue(os.path.isdir(self.path('uploads', '2014', '01')))

        # Directories exist now, no error.
        url = yield store.store('b.txt', b'b')
        self.assertEqual('/uploads/2014/01/b.txt', url)

    def test_ensure_directory(self):
        path = self.path('x', 'y', 'z')
        ensure_directory(path)
        ensure_directory(path)
        self.assertTrue(os.path.isdir(path))

    @gen_test
    def test_empty_payload(self):
        url = yield self.store.store('empty.bin', b'')
        self.assertEqual(0, os.path.getsize(self.path(url.lstrip('/'))))

    @gen_test
    def test_client_paths_are_dropped(self):
        for name in (
                '../../evil.png',
                '/etc/evil.png',
                'C:\\Users\\me\\evil.png'):
            yield self.store.store(name, b'evil')

        self.assertEqual(['evil.png'], sorted(
            f for f in os.listdir(self.path('media'))
            if not random_png.match('/media/' + f)))

        self.assertEqual(['media'], os.listdir(self.content_root))

    def test_filename_only(self):
        self.assertEqual('b.png', filename_only('a/b.png'))
        self.assertEqual('b.png', filename_only('a\\b.png'))
        self.assertEqual('', filename_only('a/'))
        self.assertEqual('', filename_only('..'))
        self.assertEqual('', filename_only(None))

    @gen_test
    def test_no_filename(self):
        url = yield self.store.store('dir/', b'x')
        self.assertRegex(url, r'^/media/[0-9a-f]{32}$')
        self.assertEqual(b'x', self.read(url))

    @gen_test
    def test_url_quoting(self):
        url = yield self.store.store('a / b % 2.png', png_bits)
        self.assertEqual('/media/%20b%20%25%202.png', url)
        self.assertTrue(os.path.exists(self.path('media', ' b % 2.png')))

    def test_storage_path_required(self):
        self.assertRaises(ValueError, MediaStore, '', self.content_root)
        self.assertRaises(ValueError, MediaStore, None, self.content_root)

    @gen_test
    def test_concurrent_uploads_can_collide(self):
        # Known limitation: nothing stops two uploads that both see no
        # existing file from writing to the same path.
        with mock.patch.object(media.os.path, 'exists', return_value=False):
            first = yield self.store.store('photo.png', b'first')
            second = yield self.store.store('photo.png', b'second')

        self.assertEqual(first, second)
        self.assertEqual(b'second', self.read(first))


class MediaRPCTest(test.MetaWeblogTest):
    def upload(self, name, bits, content_type='image/png'):
        return self.fetch_rpc(
            'metaWeblog.newMediaObject',
            (
                '1',  # Blog id, ignored.
                tornado_options.user,
                tornado_options.password,
                {'name': name, 'bits': bits, 'type': content_type}))

    def test_upload(self):
        filename = 'a / b % 2.png'  # Test escaping weird chars.
        response = self.upload(filename, png_bits)
        self.assertEqual('/media/%20b%20%25%202.png', response['url'])
        self.assertEqual(' b % 2.png', response['file'])
        self.assertEqual('image/png', response['type'])

        # Make sure we can now fetch the image.
        response = self.fetch(response['url'])
        self.assertEqual(200, response.code)
        self.assertEqual('image/png', response.headers['Content-Type'])
        self.assertEqual(png_bits, response.body)

    def test_upload_twice(self):
        first = self.upload('photo.png', b'first')['url']
        second = self.upload('photo.png', b'second')['url']
        self.assertEqual('/media/photo.png', first)
        self.assertRegex(second, random_png)
        self.assertEqual(b'first', self.fetch(first).body)
        self.assertEqual(b'second', self.fetch(second).body)

    def test_filesystem_error(self):
        # A file where the media directory should be.
        with open(os.path.join(self.content_root, 'media'), 'wb') as f:
            f.write(b'in the way')

        with mock.patch('logging.exception'):
            self.assert_fault(
                500, 'Internal error.', 'metaWeblog.newMediaObject', (
                    '1',
                    tornado_options.user,
                    tornado_options.password,
                    {'name': 'photo.png', 'bits': png_bits}))
