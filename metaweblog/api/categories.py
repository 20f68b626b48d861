from metaweblog.api import rpc
from metaweblog.models import category_to_metaweblog


class Categories(object):
    """Handle XML-RPC calls related to categories.

    Mixin for metaweblog.api.handlers.APIHandler.
    """
    @rpc
    def metaWeblog_getCategories(self, blogid, user, password):
        labels = yield self.repository.get_categories()
        return [category_to_metaweblog(label) for label in sorted(labels)]
