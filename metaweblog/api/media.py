import posixpath
import xmlrpc.client
from urllib.parse import unquote

from metaweblog.api import rpc


class Media(object):
    """Handle XML-RPC calls related to images and other media.

    Mixin for metaweblog.api.handlers.APIHandler.
    """
    @rpc
    def metaWeblog_newMediaObject(self, blogid, user, password, struct):
        name = struct['name']
        content = struct['bits']
        if isinstance(content, xmlrpc.client.Binary):
            content = content.data

        # Errors writing the file aren't caught here.
        url = yield self.settings['media_store'].store(name, content)
        rv = {'url': url, 'file': unquote(posixpath.basename(url))}
        if 'type' in struct:
            rv['type'] = struct['type']

        return rv
