import functools
import tornado.options


def define_options(option_parser):
    # Debugging
    option_parser.define(
        'debug', default=False, type=bool,
        help="Turn on autoreload and log to stderr",
        callback=functools.partial(enable_debug, option_parser),
        group='Debugging')

    def config_callback(path):
        option_parser.parse_config_file(path, final=False)

    option_parser.define(
        "config", type=str, help="Path to config file",
        callback=config_callback, group='Config file')

    # Application
    option_parser.define(
        'autoreload', type=bool, default=False, group='Application')

    option_parser.define('port', default=8888, type=int, help=(
        "Server port"), group='Application')
    option_parser.define(
        'mongo_uri', default='mongodb://localhost:27017/metaweblog',
        type=str, help="MongoDB connection string, including the database",
        group='Application')
    option_parser.define(
        'repository', default='mongo', type=str,
        help="Where stories live: 'mongo' or 'memory'", group='Application')
    option_parser.define(
        'credentials', default='options', type=str,
        help=(
            "Where users live: 'options' (the --user and --password"
            " options) or 'mongo' (see tools/add_user.py)"),
        group='Application')

    # Startup
    option_parser.define('ensure_indexes', default=False, type=bool, help=(
        "Ensure collection indexes before starting"), group='Startup')
    option_parser.define('rebuild_indexes', default=False, type=bool, help=(
        "Drop all indexes and recreate before starting"), group='Startup')

    # Identity
    option_parser.define('host', default='localhost', type=str, help=(
        "Server hostname"), group='Identity')
    option_parser.define('base_url', default='blog', type=str, help=(
        "Base url, e.g. 'blog'"), group='Identity')
    option_parser.define('blog_id', default='1', type=str, help=(
        "Blog id reported to editing clients"), group='Identity')
    option_parser.define('blog_name', type=str, help=(
        "Display name for the site"), group='Identity')
    option_parser.define('blog_url', default='/', type=str, help=(
        "Home page of the blog"), group='Identity')
    option_parser.define('author_id', default='admin', type=str, help=(
        "User id reported to editing clients"), group='Identity')
    option_parser.define('author_first_name', default='', type=str,
                         group='Identity')
    option_parser.define('author_last_name', default='', type=str,
                         group='Identity')
    option_parser.define('author_email', default='', type=str, help=(
        "Author email reported to editing clients"), group='Identity')
    option_parser.define('author_url', default='', type=str, help=(
        "Author's home page"), group='Identity')
    option_parser.define(
        'timezone', type=str, default='America/New_York',
        help="Timezone of the dates editing clients send", group='Identity')

    # Admin
    option_parser.define('user', type=str, group='Admin')
    option_parser.define('password', type=str, group='Admin')

    # Media
    option_parser.define('media_path', type=str, help=(
        "Where uploads go, relative to content_root, and the URL"
        " prefix they are served from, e.g. '/media'"), group='Media')
    option_parser.define('content_root', default='wwwroot', type=str, help=(
        "Directory of publicly served files"), group='Media')

    # Links
    option_parser.define('category_url', default='', type=str, help=(
        "URL prefix for browsing a category, the default is"
        " <base_url>/tag/"), group='Links')

    option_parser.add_parse_callback(
        functools.partial(check_required_options, option_parser))


def check_required_options(option_parser):
    for required_option_name in (
        'host', 'port', 'blog_name', 'base_url', 'media_path', 'content_root',
    ):
        if not getattr(option_parser, required_option_name, None):
            message = (
                '%s required. (Did you forget to pass'
                ' --config=CONFIG_FILE?)' % (
                    required_option_name))

            raise tornado.options.Error(message)

    for name, choices in (
        ('repository', ('mongo', 'memory')),
        ('credentials', ('options', 'mongo')),
    ):
        value = getattr(option_parser, name)
        if value not in choices:
            raise tornado.options.Error(
                '%s must be one of %s, not %r' % (
                    name, ', '.join(choices), value))

    if option_parser.credentials == 'options' and not (
            option_parser.user and option_parser.password):
        raise tornado.options.Error(
            'user and password required with --credentials=options')


def enable_debug(option_parser, debug):
    if debug:
        option_parser.log_to_stderr = True
        option_parser.autoreload = True
