import tornado.template
import tornado.web
from tornado.options import options as opts

from metaweblog.text.link import api_link


class RSDHandler(tornado.web.RequestHandler):
    """Blog editors use RSD to find the blog's XML-RPC endpoint. Link to
       this URL from your base template's <head>, e.g.:

       <link rel="EditURI" type="application/rsd+xml" title="RSD" href="/{{ reverse_url('rsd') }}" />

       http://en.wikipedia.org/wiki/Really_Simple_Discovery
    """
    def get(self):
        self.set_header('Content-Type', 'text/xml')
        t = tornado.template.Template(rsd_template)
        self.write(t.generate(
            blog_id=opts.blog_id,
            blog_url=opts.blog_url,
            api_link=api_link()))


rsd_template = """<?xml version="1.0" encoding="UTF-8"?>
<rsd version="1.0" xmlns="http://archipelago.phrasewise.com/rsd">
    <service>
        <engineName>metaweblog</engineName>
        <homePageLink>{{ blog_url }}</homePageLink>
        <apis>
            <api name="MetaWeblog" blogID="{{ blog_id }}" preferred="true"
                 apiLink="{{ api_link }}" />
            <api name="Blogger" blogID="{{ blog_id }}" preferred="false"
                 apiLink="{{ api_link }}" />
        </apis>
    </service>
</rsd>"""
