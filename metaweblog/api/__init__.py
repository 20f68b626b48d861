import functools
import inspect
import logging
import xmlrpc.client

from tornado import gen


class AuthenticationFailure(xmlrpc.client.Fault):
    """Unknown user or wrong password, deliberately not saying which."""
    def __init__(self):
        super(AuthenticationFailure, self).__init__(
            403, 'Authentication failed.')


class OperationFailure(xmlrpc.client.Fault):
    def __init__(self, message):
        super(OperationFailure, self).__init__(500, message)


@gen.coroutine
def authenticate(store, username, password):
    """Raise AuthenticationFailure unless store knows username and password.
    """
    principal = yield store.find_by_username(username)
    if principal is not None:
        if (yield store.check_password(principal, password)):
            return

    logging.warning('XML-RPC login failed for user %r', username)
    raise AuthenticationFailure()


def coroutine(fn):
    """Like gen.coroutine, but leave coroutines alone."""
    if gen.is_coroutine_function(fn):
        return fn
    return gen.coroutine(fn)


def auth(fn):
    """Verify an XML-RPC method is authorized.

    Check the 'user' and 'password' arguments against the application's
    credential store. If unmatched, raise AuthenticationFailure before the
    wrapped method runs, else call it.
    """
    signature = inspect.signature(fn)
    assert 'user' in signature.parameters
    assert 'password' in signature.parameters
    fn = coroutine(fn)

    @functools.wraps(fn)
    @gen.coroutine
    def _auth(self, *args, **kwargs):
        arguments = signature.bind(self, *args, **kwargs).arguments
        yield authenticate(
            self.settings['credentials'],
            arguments['user'],
            arguments['password'])

        result = yield fn(self, *args, **kwargs)
        return result

    return _auth


def fault(message):
    """Convert exceptions thrown by a coroutine to an OperationFailure.

    Every failure gets the same message; the original error is dropped.
    """
    def wrap(fn):
        fn = coroutine(fn)

        @functools.wraps(fn)
        @gen.coroutine
        def _fault(self, *args, **kwargs):
            try:
                result = yield fn(self, *args, **kwargs)
            except xmlrpc.client.Fault:
                raise
            except Exception:
                logging.debug(
                    'XML-RPC call "%s"', fn.__name__, exc_info=True)
                raise OperationFailure(message)

            return result

        return _fault

    return wrap


def rpc(fn):
    """Decorate a method with auth and publish it to XML-RPC clients."""
    wrapped = auth(fn)
    wrapped.rpc_method = True
    return wrapped
