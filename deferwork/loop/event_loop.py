# -*- coding: utf-8 -*-

from collections import deque
import heapq
import itertools
import logging
from threading import Condition

from .clock import MonotonicClock

_logger = logging.getLogger(__name__)


class IOHandle(object):
    """Pending completion of an operation running outside of the loop.

    It's created by `EventLoop.register_io()` before the operation starts,
    and the loop keeps running as long as the handle has not been posted.
    `post()` is the only method safe to call from another thread.
    """

    def __init__(self, loop):
        self._loop = loop
        self._posted = False

    def post(self, callback, *args):
        """Give the completion callback to the loop thread.

        The callback runs on the loop thread, in the low-priority tier (like
        a timer), then the microtask queue is drained.

        Args:
            callback (callable): called with `*args` on the loop thread.
        Raises:
            RuntimeError: if the handle has already been posted.
        """
        self._loop._post_io(self, callback, args)


class EventLoop(object):
    """Single-threaded scheduler with two tiers of deferred work.

    - the microtask tier (`queue_microtask()`) is a FIFO queue fully drained
      after the current unit of work, and after every timer or I/O callback.
      Microtasks queued during the drain run in the same drain.
    - the low-priority tier contains timers (`call_later()`) and
      completions posted by external threads (`IOHandle.post()`). Only one
      of these callbacks runs between two drains.

    Every mutation of the queues but `IOHandle.post()` must happen on the
    thread calling `run()`.
    """

    def __init__(self, clock=None):
        self.clock = clock or MonotonicClock()

        self._microtasks = deque()
        self._timers = []
        self._timer_seq = itertools.count()
        self._condition = Condition()
        self._io_done = deque()  # must be acceded only with self._condition
        self._io_pending = 0  # must be acceded only with self._condition
        self._stopping = False
        self._exception_handler = None

    def queue_microtask(self, callback, *args):
        """Schedule `callback(*args)` in the high-priority tier."""
        self._microtasks.append((callback, args))

    def call_later(self, delay, callback, *args):
        """Schedule `callback(*args)` in the timer tier, after `delay` seconds.

        Timers sharing the same deadline run in registration order.

        Args:
            delay (float): delay in seconds. Negative values are set to 0.
            callback (callable)
        """
        when = self.clock.now() + max(delay, 0)
        heapq.heappush(self._timers,
                       (when, next(self._timer_seq), callback, args))

    def register_io(self):
        """Announce an external operation whose completion will be posted.

        Returns:
            IOHandle: handle to post the completion callback, from any thread.
        """
        with self._condition:
            self._io_pending += 1
        return IOHandle(self)

    def _post_io(self, handle, callback, args):
        with self._condition:
            if handle._posted:
                raise RuntimeError('IOHandle has already been posted.')
            handle._posted = True
            self._io_pending -= 1
            self._io_done.append((callback, args))
            self._condition.notify_all()

    def stop(self):
        """Stop the loop after the current unit of work."""
        self._stopping = True
        with self._condition:
            self._condition.notify_all()

    def has_pending_work(self):
        with self._condition:
            io_work = self._io_pending or self._io_done
        return bool(self._microtasks or self._timers or io_work)

    def run(self, until=None):
        """Run deferred work until there is nothing left to do.

        Args:
            until (callable, optional): predicate checked after each unit of
                work; the loop returns as soon as it returns True.
        """
        self._stopping = False
        _logger.debug('Start event loop')

        def must_stop():
            return self._stopping or (until is not None and until())

        self._drain_microtasks()
        while not must_stop():
            unit = self._next_unit()
            if unit is None:
                break
            callback, args = unit
            self._run_unit(callback, args)
            self._drain_microtasks()

        _logger.debug('Event loop stopped')

    def run_until_idle(self):
        """Run microtasks and already-due timers, without waiting."""
        self._drain_microtasks()
        now = self.clock.now()
        while self._timers and self._timers[0][0] <= now:
            _when, _seq, callback, args = heapq.heappop(self._timers)
            self._run_unit(callback, args)
            self._drain_microtasks()

    def _next_unit(self):
        """Wait for the next low-priority unit of work.

        I/O completions already posted are preferred over timers not due
        yet; among due timers and posted completions, timers go first.

        Returns:
            tuple: (callback, args), or None if there is no work left.
        """
        with self._condition:
            while not self._stopping:
                if self._timers and self._timers[0][0] <= self.clock.now():
                    _when, _seq, callback, args = heapq.heappop(self._timers)
                    return callback, args
                if self._io_done:
                    return self._io_done.popleft()
                if not self._timers and not self._io_pending:
                    return None

                timeout = None
                if self._timers:
                    timeout = max(self._timers[0][0] - self.clock.now(), 0)
                self.clock.wait(self._condition, timeout)
        return None

    def _drain_microtasks(self):
        while self._microtasks:
            callback, args = self._microtasks.popleft()
            self._run_unit(callback, args)

    def _run_unit(self, callback, args):
        try:
            callback(*args)
        except Exception as error:
            self.call_exception_handler({
                'message': 'Exception in deferred work %s' %
                           getattr(callback, '__name__', repr(callback)),
                'exception': error,
                'callback': callback
            })

    def set_exception_handler(self, handler):
        """Set the handler of errors escaping a unit of work.

        Args:
            handler (callable, optional): called with the loop and a context
                dict with keys 'message', 'exception' and 'callback'. If None,
                the default handler (logging the error) is restored.
        """
        self._exception_handler = handler

    def call_exception_handler(self, context):
        if self._exception_handler is None:
            self.default_exception_handler(context)
            return
        try:
            self._exception_handler(self, context)
        except Exception:
            _logger.exception('Exception handler of the event loop has '
                              'raised an exception!')
            self.default_exception_handler(context)

    def default_exception_handler(self, context):
        error = context.get('exception')
        exc_info = None
        if error is not None:
            exc_info = (type(error), error, error.__traceback__)
        _logger.error(context.get('message', 'Unhandled error in event loop'),
                      exc_info=exc_info)


_default_loop = None


def get_event_loop():
    """Return the process-wide default loop, created on first use."""
    global _default_loop

    if _default_loop is None:
        _default_loop = EventLoop()
    return _default_loop


def set_event_loop(loop):
    """Replace the process-wide default loop.

    Args:
        loop (EventLoop, optional): new default loop. If None, a new loop
            will be created on the next call to `get_event_loop()`.
    """
    global _default_loop

    _default_loop = loop
