# -*- coding: utf-8 -*-
import re

from unidecode import unidecode

# From http://flask.pocoo.org/snippets/5/, updated to mostly duplicate
# Wordpress's slugs.
_punct_re = re.compile(r'[\t !"#$%&\'()*\-/<=>?@\[\\\]^_`{|},:.+]+')


def slugify(text, delim='-'):
    """Generates an ASCII-only slug."""
    result = []
    for word in _punct_re.split(text.lower()):
        result.extend(unidecode(word).split())
    return delim.join(result)
