# -*- coding: utf-8 -*-

import logging

from ..common.log import HIDEBUG
from ..loop import get_event_loop
from .errors import UnhandledRejectionError
from .util import dualmethod, is_error, is_thenable

_logger = logging.getLogger(__name__)


class Deferred(object):
    """It represents the eventual result of an asynchronous operation.

    The Deferred is created pending. It's settled by a call to `resolve()` or
    `reject()`; the settlement itself is not immediate, but is scheduled as a
    microtask of the event loop. When the microtask runs, the continuations
    registered at this moment are drained:

    - on fulfillment, the value is folded through the success continuations,
      in registration order: each one receives the value returned by the
      previous one. If a continuation returns an error (an `Exception`
      instance) or raises one, the remaining continuations are skipped and the
      error is given to the failure continuation.
    - on rejection, the error is given to the failure continuation.

    All calls to `then()` register on the same Deferred, and return it: the
    chain `d.then(f1).then(f2)` is a single Deferred with two continuations.
    There is only one failure continuation; each registration replaces the
    previous one. Use `chain()` to build independent links instead.

    A Deferred is not thread-safe: it must be used from the thread running the
    event loop. Other threads should use `EventLoop.register_io()`.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    def __init__(self, executor=None, loop=None, name=None):
        """Constructor of the Deferred.

        If an executor is given, it's called before the constructor returns.
        If the executor raises an exception, the exception is caught and the
        Deferred is rejected with it.

        Args:
            executor (callable, optional): Takes 2 callable arguments,
                `resolve(value)` and `reject(error)`, bound to this Deferred.
            loop (EventLoop, optional): loop used to schedule the settlement.
                Default to the process-wide loop.
            name (str, optional): if set, name used when converted to text.
        """
        self._loop = loop or get_event_loop()
        self._name = name or getattr(executor, '__name__', '???')

        self._status = self.PENDING
        self._value = None
        self._error = None
        self._claimed = False
        self._drained = False

        self._continuations = []
        self._failure_continuation = None
        self._subscribers = []

        if executor is not None:
            try:
                executor(self.resolve, self.reject)
            except Exception as error:
                _logger.debug('Executor of %r has raised %r', self, error)
                self.reject(error)

    @property
    def status(self):
        """str: one of PENDING, FULFILLED or REJECTED."""
        return self._status

    @property
    def value(self):
        """Result of the fold, once fulfilled. None otherwise."""
        return self._value

    @property
    def error(self):
        """Rejection error, once rejected. None otherwise."""
        return self._error

    @property
    def name(self):
        return self._name

    @property
    def loop(self):
        return self._loop

    @dualmethod
    def resolve(self, value):
        """Schedule the fulfillment of the Deferred.

        Only the first call to `resolve()` or `reject()` is effective. Later
        calls are ignored, with a warning.

        Args:
            value: value given to the first success continuation.
        Returns:
            Deferred: self, to continue the chain.
        """
        if self._claim('fulfill', value):
            self._loop.queue_microtask(self._drain_fulfilled, value)
        return self

    @resolve.for_class
    def resolve(cls, value, loop=None):
        """Create a Deferred, and resolve it with the value.

        Args:
            value: value of the Deferred.
            loop (EventLoop, optional): loop used to schedule the settlement.
        Returns:
            Deferred: new Deferred, whose fulfillment is already scheduled.
        """
        return cls(loop=loop, name='RESOLVE').resolve(value)

    @dualmethod
    def reject(self, error):
        """Schedule the rejection of the Deferred.

        Only the first call to `resolve()` or `reject()` is effective. Later
        calls are ignored, with a warning.

        Args:
            error: rejection reason. It should be an instance of `Exception`,
                but any value is accepted.
        Returns:
            Deferred: self.
        """
        if self._claim('reject', error):
            self._loop.queue_microtask(self._drain_rejected, error)
        return self

    @reject.for_class
    def reject(cls, error, loop=None):
        """Create a Deferred, and reject it with the error.

        Args:
            error: rejection reason.
            loop (EventLoop, optional): loop used to schedule the settlement.
        Returns:
            Deferred: new Deferred, whose rejection is already scheduled.
        """
        return cls(loop=loop, name='REJECT').reject(error)

    def then(self, on_success, on_failure=None):
        """Register continuations called when the Deferred is settled.

        `on_success` is appended to the success continuations. If set,
        `on_failure` replaces the failure continuation.

        Args:
            on_success (callable, optional): receives the current value of the
                fold, and returns the next one.
            on_failure (callable, optional): receives the rejection error.
        Returns:
            Deferred: self. No new Deferred is created.
        """
        if self._drained:
            _logger.warning('Continuations added to Deferred %r already '
                            'drained. They will never be called.', self)
            return self

        if on_success is not None:
            self._continuations.append(on_success)
        if on_failure is not None:
            self._failure_continuation = on_failure
        return self

    def catch(self, on_failure):
        """Set the failure continuation, replacing the previous one.

        Args:
            on_failure (callable): receives the rejection error.
        """
        self.then(None, on_failure)

    def chain(self, on_success=None, on_failure=None):
        """Create a new Deferred depending of the settlement of self.

        Unlike `then()`, each call returns a distinct Deferred. Once self is
        drained, the callback matching its final state is called, and its
        result defines the state of the new Deferred:
        - if the callback raises an exception, the new Deferred is rejected.
        - if it returns a thenable (like a Deferred), the new Deferred takes
          its settlement.
        - otherwise, the new Deferred is resolved with the returned value.
        If the callback is not defined, the value (or error) of self is
        transferred as is.

        The new Deferred sees the result of the whole fold of self, including
        continuations registered after the call to `chain()`. Neither the
        continuations nor the failure continuation of self are modified.

        Args:
            on_success (callable, optional)
            on_failure (callable, optional)
        Returns:
            Deferred: new Deferred, on the same loop.
        """
        child = Deferred(loop=self._loop, name='%s -> %s' % (
            self._name, getattr(on_success or on_failure, '__name__', '???')))

        def forward(callback, settle, value):
            if callback is None:
                settle(value)
                return
            try:
                result = callback(value)
            except Exception as error:
                child.reject(error)
                return
            if isinstance(result, Deferred):
                result._subscribe(child.resolve, child.reject)
            elif is_thenable(result):
                result.then(child.resolve, child.reject)
            else:
                child.resolve(result)

        def forward_value(value):
            forward(on_success, child.resolve, value)

        def forward_error(error):
            forward(on_failure, child.reject, error)

        self._subscribe(forward_value, forward_error)
        return child

    def __repr__(self):
        if self._status == self.REJECTED:
            state = 'R'
        elif self._status == self.FULFILLED:
            state = 'F'
        else:
            state = 'P'
        return 'Deferred(%s %s)' % (self._name, state)

    def _claim(self, action, value):
        if self._claimed:
            _logger.warning('Try to %s Deferred %r already settled. '
                            'New value will be ignored: %r',
                            action, self, value)
            return False
        self._claimed = True
        _logger.log(HIDEBUG, 'Settle %r (%s): %r', self, action, value)
        return True

    def _subscribe(self, on_fulfilled, on_rejected):
        """Be notified of the final settlement, after the fold.

        Subscribers don't take part in the fold: they receive its result. A
        rejection with at least one subscriber is not reported as unhandled;
        the subscribers are responsible of it.
        """
        if not self._drained:
            self._subscribers.append((on_fulfilled, on_rejected))
        elif self._status == self.FULFILLED:
            self._loop.queue_microtask(on_fulfilled, self._value)
        else:
            self._loop.queue_microtask(on_rejected, self._error)

    def _drain_fulfilled(self, value):
        result = value
        for continuation in self._continuations:
            if is_error(result):
                break
            try:
                result = continuation(result)
            except Exception as error:
                _logger.debug('Continuation %s of %r has raised %r',
                              getattr(continuation, '__name__', '???'),
                              self, error)
                result = error
        self._drained = True
        self._continuations = None

        if is_error(result):
            self._drain_rejected(result)
            return

        self._value = result
        self._status = self.FULFILLED
        subscribers, self._subscribers = self._subscribers, None
        for on_fulfilled, _ in subscribers:
            on_fulfilled(result)

    def _drain_rejected(self, error):
        self._drained = True
        self._continuations = None
        self._error = error
        self._status = self.REJECTED

        subscribers, self._subscribers = self._subscribers, None
        for _, on_rejected in subscribers:
            on_rejected(error)

        if self._failure_continuation is not None:
            self._failure_continuation(error)
        elif not subscribers:
            if isinstance(error, BaseException):
                raise UnhandledRejectionError(self, error) from error
            raise UnhandledRejectionError(self, error)
