# -*- coding: utf-8 -*-


class DeferredError(Exception):
    """Base class for errors raised by the promise module."""
    pass


class UnhandledRejectionError(DeferredError):
    """A Deferred has been rejected with no failure continuation registered.

    It's raised from the deferred work draining the rejection, and so is
    reported by the exception handler of the event loop.

    Attributes:
        deferred (Deferred): the Deferred rejected.
        error: the rejection value, transmitted as is (it can be a
            non-exception value).
    """

    def __init__(self, deferred, error):
        DeferredError.__init__(self, deferred, error)
        self.deferred = deferred
        self.error = error

    def __str__(self):
        return 'Unhandled rejection of %r: %r' % (self.deferred, self.error)
