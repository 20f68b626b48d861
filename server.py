#!/usr/bin/env python
from functools import partial
import logging
import os

import motor.motor_tornado
import tornado.ioloop
from tornado.options import options as opts
from tornado import httpserver

from metaweblog.options import define_options
from metaweblog import application, credentials, indexes, repository


def get_db():
    client = motor.motor_tornado.MotorClient(opts.mongo_uri)
    return client.get_default_database()


if __name__ == "__main__":
    define_options(opts)
    opts.parse_command_line()
    for handler in logging.getLogger().handlers:
        if hasattr(handler, 'baseFilename'):
            print('Logging to', handler.baseFilename)
            break

    loop = tornado.ioloop.IOLoop.current()
    db = None
    if opts.repository == 'mongo' or opts.credentials == 'mongo':
        db = get_db()

    if opts.repository == 'mongo':
        if opts.rebuild_indexes or opts.ensure_indexes:
            ensure_indexes = partial(indexes.ensure_indexes,
                                     db,
                                     drop=opts.rebuild_indexes)

            loop.run_sync(ensure_indexes)

        repository_factory = partial(repository.MotorStoryRepository, db)
    else:
        logging.warning('Stories are kept in memory, lost on restart')
        repository_factory = partial(
            repository.MemoryStoryRepository, repository.MemoryStore())

    if opts.credentials == 'mongo':
        credential_store = credentials.MongoCredentialStore(db)
    else:
        credential_store = credentials.OptionsCredentialStore()

    this_dir = os.path.dirname(os.path.abspath(__file__))
    app = application.get_application(
        this_dir, opts, repository_factory, credential_store)

    http_server = httpserver.HTTPServer(app, xheaders=True)
    http_server.listen(opts.port)
    msg = 'Listening on port %s' % opts.port
    print(msg)
    logging.info(msg)
    loop.start()
