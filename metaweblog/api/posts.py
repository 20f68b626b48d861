"""XML-RPC API for posts
"""
import logging

from metaweblog.api import fault, rpc
from metaweblog.models import Story


class Posts(object):
    """Handle XML-RPC calls related to blog posts.

    Mixin for metaweblog.api.handlers.APIHandler.
    """
    @rpc
    def metaWeblog_getRecentPosts(self, blogid, user, password, num_posts):
        stories = yield self.repository.get_stories(int(num_posts))
        return [story.to_metaweblog() for story in stories]

    @rpc
    @fault('Failed to save the post.')
    def metaWeblog_newPost(self, blogid, user, password, struct, publish):
        story = Story.from_metaweblog(struct, publish)
        self.repository.add_story(story)
        yield self.repository.save_all()
        return str(story.id)

    @rpc
    @fault('Failed to save the post.')
    def metaWeblog_editPost(self, postid, user, password, struct, publish):
        story = yield self.repository.get_story(int(postid))
        story.update_from_metaweblog(struct, publish)
        yield self.repository.save_all()
        return True

    @rpc
    @fault('Failed to get the post.')
    def metaWeblog_getPost(self, postid, user, password):
        story = yield self.repository.get_story(int(postid))
        return story.to_metaweblog()

    @rpc
    def blogger_deletePost(self, appkey, postid, user, password, publish=False):
        # Clients expect a boolean here, not a fault.
        try:
            yield self.repository.delete_story(int(postid))
            yield self.repository.save_all()
        except Exception:
            logging.debug('Deleting post %r', postid, exc_info=True)
            return False

        return True
