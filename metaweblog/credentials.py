"""Credential stores: find a user by name, then check a password.

Both methods of a store are coroutines.
"""
import hashlib
import hmac
import os

from tornado import gen
from tornado.options import options as opts

PBKDF2_ITERATIONS = 100000


def hash_password(password, salt):
    return hashlib.pbkdf2_hmac(
        'sha256', password.encode('utf-8'), salt, PBKDF2_ITERATIONS).hex()


def _same(a, b):
    return hmac.compare_digest(a.encode('utf-8'), b.encode('utf-8'))


class OptionsCredentialStore(object):
    """The single user configured with the 'user' and 'password' options."""
    @gen.coroutine
    def find_by_username(self, name):
        if opts.user and _same(str(name), opts.user):
            return opts.user
        return None

    @gen.coroutine
    def check_password(self, principal, password):
        return bool(opts.password) and _same(str(password), opts.password)


class MongoCredentialStore(object):
    """Users in the 'users' collection, keyed by name, with salted PBKDF2
    password hashes.
    """
    def __init__(self, db):
        self.db = db

    def find_by_username(self, name):
        return self.db.users.find_one({'_id': str(name)})

    @gen.coroutine
    def check_password(self, principal, password):
        salt = bytes.fromhex(principal['salt'])
        return _same(
            hash_password(str(password), salt), principal['password_hash'])

    @gen.coroutine
    def add_user(self, name, password):
        """Create the user, or reset the password of an existing one."""
        salt = os.urandom(16)
        yield self.db.users.replace_one(
            {'_id': name},
            {
                '_id': name,
                'salt': salt.hex(),
                'password_hash': hash_password(password, salt),
            },
            upsert=True)
