import posixpath
from urllib.parse import quote

from tornado.options import options as opts


def absolute(relative):
    debug = opts.debug
    if debug:
        prefix = 'http://%s:%s' % (opts.host, opts.port)
    else:
        prefix = 'http://%s' % opts.host
    return posixpath.join(prefix, relative.lstrip('/'))


def story_link(slug):
    return absolute(posixpath.join(opts.base_url, slug))


def category_link(label):
    prefix = opts.category_url or absolute(
        posixpath.join(opts.base_url, 'tag'))
    return prefix.rstrip('/') + '/' + quote(label, safe='')


def api_link():
    return absolute(posixpath.join(opts.base_url, 'api'))
