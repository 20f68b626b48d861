from metaweblog.api import rpc
from metaweblog.models import blog_info, user_info


class Users(object):
    """Mixin for metaweblog.api.handlers.APIHandler, deals with XML-RPC calls
       related to users
    """
    @rpc
    def blogger_getUsersBlogs(self, appkey, user, password):
        return [blog_info()]

    @rpc
    def blogger_getUserInfo(self, appkey, user, password):
        return user_info()
