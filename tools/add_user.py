"""Create a user who may post through the XML-RPC API, or reset their
password. For servers started with --credentials=mongo.
"""
import getpass
from functools import partial

import motor.motor_tornado
import tornado.ioloop
from tornado.options import define, options as opts

from metaweblog.credentials import MongoCredentialStore


if __name__ == '__main__':
    define('mongo_uri', default='mongodb://localhost:27017/metaweblog',
           type=str, help="MongoDB connection string, including the database")
    define('name', type=str, help="User name")
    opts.parse_command_line()
    if not opts.name:
        raise SystemExit('--name required')

    password = getpass.getpass('Password for %s: ' % opts.name)
    db = motor.motor_tornado.MotorClient(opts.mongo_uri).get_default_database()
    store = MongoCredentialStore(db)
    tornado.ioloop.IOLoop.current().run_sync(
        partial(store.add_user, opts.name, password))

    print('Saved user %s' % opts.name)
