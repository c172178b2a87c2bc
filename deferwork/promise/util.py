# -*- coding: utf-8 -*-

import types


def is_thenable(value):
    """Check if an object can be chained, like a Deferred, or is a "result".

    The promise module uses this function to differentiate "chainable" objects
    and direct return values, when using a callback who can returns both.

    Returns:
        boolean: True if the value has an attribute 'then' who is callable.
            False if not.
    """
    return hasattr(getattr(value, 'then', None), '__call__')


def is_error(value):
    """Check if a value returned by a continuation signals a failure.

    Returns:
        boolean: True if the value is an instance of `Exception`.
    """
    return isinstance(value, Exception)


class dualmethod(object):
    """Method with a different implementation when called from the class.

    Called from an instance, the decorated function is used as a regular
    method. Called from the class itself, the function set with
    `for_class()` is used instead, as a classmethod.

    Example:

        >>> class A(object):
        ...     @dualmethod
        ...     def name(self):
        ...         return 'instance'
        ...
        ...     @name.for_class
        ...     def name(cls):
        ...         return 'class'
        >>> A.name(), A().name()
        ('class', 'instance')
    """

    def __init__(self, instance_method):
        self._instance_method = instance_method
        self._class_method = None
        self.__doc__ = instance_method.__doc__

    def for_class(self, class_method):
        self._class_method = class_method
        return self

    def __get__(self, instance, owner):
        if instance is None:
            if self._class_method is None:
                raise AttributeError('%s is only available on instances' %
                                     self._instance_method.__name__)
            return types.MethodType(self._class_method, owner)
        return types.MethodType(self._instance_method, instance)
