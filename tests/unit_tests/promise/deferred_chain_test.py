# -*- coding: utf-8 -*-

import logging

from deferwork.promise import Deferred, UnhandledRejectionError


class MyException(Exception):
    pass


class TestChainMethod(object):

    def test_chain_creates_new_deferred(self, loop):
        df = Deferred.resolve(2)
        child = df.chain(lambda v: v * 3)
        assert child is not df
        assert isinstance(child, Deferred)
        loop.run()
        assert child.status == Deferred.FULFILLED
        assert child.value == 6

    def test_chain_sees_final_value_of_parent(self, loop):
        """The child gets the result of the whole fold of the parent."""
        child_results = []

        df = Deferred.resolve(1)
        df.then(lambda v: v + 1)
        df.chain(lambda v: v * 10).then(child_results.append)
        df.then(lambda v: v + 1)
        loop.run()

        assert child_results == [30]
        assert df.value == 3

    def test_independent_links(self, loop):
        """Each link has its own continuations and failure handler."""
        results = []
        failures = []

        df = Deferred.resolve('v')
        link1 = df.chain(lambda v: v + '1')
        link2 = df.chain(lambda v: v + '2')
        link1.then(results.append)
        link2.then(results.append)
        link1.catch(failures.append)
        link2.catch(failures.append)
        loop.run()

        assert sorted(results) == ['v1', 'v2']
        assert failures == []

    def test_chain_callback_raising(self, loop):
        failures = []

        def fail(value):
            raise MyException(value)

        child = Deferred.resolve(1).chain(fail)
        child.catch(failures.append)
        loop.run()

        assert len(failures) == 1
        assert isinstance(failures[0], MyException)
        assert child.status == Deferred.REJECTED

    def test_chain_forward_error(self, loop):
        """Without on_failure, the error is transferred as is."""
        calls = []
        failures = []
        error = MyException()

        child = Deferred.reject(error).chain(calls.append)
        child.catch(failures.append)
        loop.run()

        assert calls == []
        assert failures == [error]

    def test_chain_forward_value(self, loop):
        results = []

        Deferred.resolve(4).chain(None, lambda e: 0).then(results.append)
        loop.run()

        assert results == [4]

    def test_chain_recover_from_error(self, loop):
        results = []

        child = Deferred.reject('boom').chain(None, lambda e: 'recovered')
        child.then(results.append)
        loop.run()

        assert results == ['recovered']
        assert child.status == Deferred.FULFILLED
        assert loop.errors == []

    def test_chain_returning_deferred(self, loop):
        """The child takes the settlement of a returned Deferred."""
        results = []

        def later(value):
            return Deferred(lambda resolve, reject:
                            loop.call_later(1, resolve, value * 2))

        Deferred.resolve(21).chain(later).then(results.append)
        loop.run()

        assert results == [42]
        assert loop.clock.now() == 1

    def test_chain_returning_rejected_deferred(self, loop):
        failures = []

        child = Deferred.resolve(1).chain(lambda v: Deferred.reject('no'))
        child.catch(failures.append)
        loop.run()

        assert failures == ['no']

    def test_chain_on_drained_deferred(self, loop):
        results = []
        failures = []

        fulfilled = Deferred.resolve(3)
        rejected = Deferred.reject('boom')
        rejected.catch(lambda e: None)
        loop.run()

        fulfilled.chain(lambda v: v + 1).then(results.append)
        rejected.chain(results.append).catch(failures.append)
        loop.run()

        assert results == [4]
        assert failures == ['boom']

    def test_chain_name(self, loop):
        def double(value):
            return value * 2

        df = Deferred(name='source')
        assert df.chain(double).name == 'source -> double'

    def test_chain_returning_deferred_keeps_its_continuations(self, loop):
        """A Deferred returned by the callback is not altered by the child."""
        seen = []
        inner = Deferred(name='inner')

        child = Deferred.resolve(1).chain(lambda v: inner)
        loop.run_until_idle()
        inner.then(seen.append)
        inner.then(lambda v: 'folded')
        inner.resolve(5)
        loop.run()

        assert seen == [5]
        assert inner.value == 'folded'
        assert child.value == 'folded'
        assert loop.errors == []

    def test_chain_returned_deferred_keeps_its_catch(self, loop):
        failures = []
        child_failures = []
        inner = Deferred(name='inner')

        child = Deferred.resolve(1).chain(lambda v: inner)
        child.catch(child_failures.append)
        loop.run_until_idle()
        inner.catch(failures.append)
        inner.reject('no')
        loop.run()

        assert failures == ['no']
        assert child_failures == ['no']
        assert child.status == Deferred.REJECTED

    def test_parent_diverted_after_chain(self, loop, caplog):
        """A parent rejected by a later continuation rejects the child."""
        failures = []

        parent = Deferred()
        child = parent.chain(lambda v: v)
        child.catch(failures.append)
        parent.then(lambda v: ValueError('late'))
        with caplog.at_level(logging.WARNING):
            parent.resolve(1)
            loop.run()

        assert parent.status == Deferred.REJECTED
        assert child.status == Deferred.REJECTED
        assert len(failures) == 1
        assert isinstance(failures[0], ValueError)
        assert failures[0] is parent.error
        assert 'already settled' not in caplog.text
        assert loop.errors == []

    def test_chain_keeps_failure_continuation(self, loop):
        """The failure continuation of the parent is not replaced."""
        parent_failures = []
        child_failures = []

        parent = Deferred()
        parent.catch(parent_failures.append)
        parent.chain(lambda v: v).catch(child_failures.append)
        parent.reject('boom')
        loop.run()

        assert parent_failures == ['boom']
        assert child_failures == ['boom']

    def test_chained_child_unhandled_reported_once(self, loop):
        """The rejection is reported on the child, not on the parent."""
        parent = Deferred.reject('boom')
        child = parent.chain(lambda v: v)
        loop.run()

        assert len(loop.errors) == 1
        error = loop.errors[0]
        assert isinstance(error, UnhandledRejectionError)
        assert error.deferred is child
        assert error.error == 'boom'
