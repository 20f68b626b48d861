import shutil
import tempfile
import xmlrpc.client
from functools import partial

import mock
from tornado.options import options as tornado_options
from tornado.testing import AsyncHTTPTestCase

from metaweblog import application, credentials, repository
from metaweblog.options import define_options

define_options(tornado_options)


class MetaWeblogTest(AsyncHTTPTestCase):
    def setUp(self):
        self.content_root = tempfile.mkdtemp()
        self.store = repository.MemoryStore()
        self.patchers = []
        self.set_option('host', 'localhost')
        self.set_option('blog_name', 'My Test Blog')
        self.set_option('base_url', 'test-blog')
        self.set_option('author_id', 'test-author')
        self.set_option('author_first_name', 'Test')
        self.set_option('author_last_name', 'Author')
        self.set_option('author_email', 't.j.author@example.com')
        self.set_option('user', 'admin')
        self.set_option('password', 'password')
        self.set_option('media_path', '/media')
        self.set_option('content_root', self.content_root)

        # Sets self.__port, and sets self.app = self.get_app().
        super(MetaWeblogTest, self).setUp()

    def tearDown(self):
        for patcher in reversed(self.patchers):
            patcher.stop()

        super(MetaWeblogTest, self).tearDown()
        shutil.rmtree(self.content_root, ignore_errors=True)

    def set_option(self, name, value):
        patcher = mock.patch.object(tornado_options.mockable(), name, value)
        patcher.start()

        # So we can reverse it in tearDown.
        self.patchers.append(patcher)

    def get_app(self):
        return application.get_application(
            '.',
            tornado_options,
            partial(repository.MemoryStoryRepository, self.store),
            credentials.OptionsCredentialStore())

    def reverse_url(self, name, *args):
        return self._app.reverse_url(name, *args)

    def fetch_rpc(self, method_name, args):
        """Call a method in our XML-RPC API, return the response.

        Raises xmlrpc.client.Fault if the server returns a fault.
        """
        body = xmlrpc.client.dumps(args, method_name, allow_none=True)
        api_url = self.reverse_url('api')
        response = self.fetch(api_url, method='POST', body=body)
        self.assertEqual(200, response.code)
        (data,), _ = xmlrpc.client.loads(
            response.body, use_builtin_types=True)
        return data

    def assert_fault(self, code, message, method_name, args):
        with self.assertRaises(xmlrpc.client.Fault) as context:
            self.fetch_rpc(method_name, args)

        self.assertEqual(code, context.exception.faultCode)
        self.assertEqual(message, context.exception.faultString)

    def new_post(
            self,
            title='the title',
            body='the body',
            categories=('a category', 'another category'),
            created=None,
            publish=True):
        """Create a post and return its id"""
        payload = {
            'title': title,
            'description': body,
            'categories': list(categories)}

        if created:
            payload['dateCreated'] = created

        return self.fetch_rpc('metaWeblog.newPost', (
            '1',  # Blog id, ignored.
            tornado_options.user,
            tornado_options.password,
            payload,
            publish))

    def edit_post(
            self,
            post_id,
            title='the title',
            body='the body',
            categories=('a category', 'another category'),
            created=None,
            publish=True):
        payload = {
            'title': title,
            'description': body,
            'categories': list(categories)}

        if created:
            payload['dateCreated'] = created

        return self.fetch_rpc('metaWeblog.editPost', (
            post_id,
            tornado_options.user,
            tornado_options.password,
            payload,
            publish))

    def get_post(self, post_id):
        return self.fetch_rpc('metaWeblog.getPost', (
            post_id,
            tornado_options.user,
            tornado_options.password))

    def delete_post(self, post_id):
        return self.fetch_rpc('blogger.deletePost', (
            'appkey',
            post_id,
            tornado_options.user,
            tornado_options.password,
            True))
