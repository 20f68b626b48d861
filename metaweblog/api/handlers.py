"""Implementation of the metaWeblog XML-RPC interface. Only the methods
   desktop blog editors need to post, edit, delete and upload media.

   See http://xmlrpc.scripting.com/metaWeblogApi.html
"""

import logging
import xmlrpc.client
from xml.parsers.expat import ExpatError

import tornado.web
from tornado import gen

from metaweblog.api import categories, posts, media, users
from metaweblog.api.rsd import RSDHandler


__all__ = ('APIHandler', 'RSDHandler')


def method_attribute(method_name):
    """Map names like 'metaWeblog.getRecentPosts' to metaWeblog_getRecentPosts.
    """
    return method_name.replace('.', '_')


class APIHandler(
        tornado.web.RequestHandler, categories.Categories, posts.Posts,
        media.Media, users.Users):
    def prepare(self):
        # One unit of work per call.
        self.repository = self.settings['repository_factory']()

    @gen.coroutine
    def post(self):
        try:
            params, method_name = xmlrpc.client.loads(
                self.request.body, use_builtin_types=True)
        except (ExpatError, xmlrpc.client.Error):
            raise tornado.web.HTTPError(400, 'Malformed XML-RPC request')

        try:
            result = yield self.dispatch(method_name, params)
            response = xmlrpc.client.dumps(
                (result,), methodresponse=True, allow_none=True)
        except xmlrpc.client.Fault as f:
            response = xmlrpc.client.dumps(f, allow_none=True)

        self.set_header('Content-Type', 'text/xml')
        self.write(response)

    @gen.coroutine
    def dispatch(self, method_name, params):
        method = getattr(self, method_attribute(method_name or ''), None)
        if not getattr(method, 'rpc_method', False):
            raise xmlrpc.client.Fault(
                404, 'Method %s not supported.' % method_name)

        try:
            result = yield method(*params)
        except xmlrpc.client.Fault:
            raise
        except Exception:
            logging.exception('XML-RPC call "%s"' % method_name)
            raise xmlrpc.client.Fault(500, 'Internal error.')

        return result
