# -*- coding: utf-8 -*-

from .deferred import Deferred
from .util import is_thenable


def wrap_deferred(f):
    """Decorator who converts the result in a Deferred object.

    If the function decorated returns a thenable, it's transmitted as is.
    Else, a new Deferred is created with the returned value as result. If the
    function raises an exception, the Deferred is rejected with it.
    """
    def wrapper(*args, **kwargs):
        try:
            result = f(*args, **kwargs)
        except Exception as error:
            return Deferred.reject(error)
        if is_thenable(result):
            return result
        return Deferred.resolve(result)

    return wrapper
