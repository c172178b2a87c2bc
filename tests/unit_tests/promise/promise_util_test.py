# -*- coding: utf-8 -*-

import pytest

from deferwork.promise import Deferred, is_error, is_thenable
from deferwork.promise.util import dualmethod


class TestUtil(object):

    def test_is_thenable(self, loop):
        assert is_thenable(Deferred())
        assert not is_thenable(3)
        assert not is_thenable(None)

        class NotCallable(object):
            then = 'then'

        assert not is_thenable(NotCallable())

    def test_is_error(self):
        assert is_error(ValueError())
        assert not is_error(ValueError)
        assert not is_error('boom')
        assert not is_error(None)

    def test_dualmethod(self):
        class A(object):
            @dualmethod
            def name(self):
                return 'instance'

            @name.for_class
            def name(cls):
                return cls.__name__

        assert A.name() == 'A'
        assert A().name() == 'instance'

    def test_dualmethod_without_class_method(self):
        class A(object):
            @dualmethod
            def name(self):
                return 'instance'

        assert A().name() == 'instance'
        with pytest.raises(AttributeError):
            A.name
