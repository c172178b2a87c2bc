# -*- coding: utf-8 -*-

import time


class MonotonicClock(object):
    """Wall clock used by the event loop in normal conditions."""

    def now(self):
        return time.monotonic()

    def wait(self, condition, timeout=None):
        """Block on the loop condition until notified or until `timeout`.

        Args:
            condition (threading.Condition): the loop condition, already
                acquired by the caller.
            timeout (float, optional): maximum time to wait, in seconds. If
                None, wait until notified.
        """
        condition.wait(timeout)


class VirtualClock(object):
    """Clock whose time only moves when the loop (or the user) moves it.

    Waiting for a timer deadline costs no real time: the clock jumps
    directly to the deadline. It's the clock to use in tests, where timers
    of several seconds must fire instantly and in a reproducible order.

    Waiting without timeout (only external I/O is pending) still blocks on
    the condition, as no amount of virtual time will make a thread finish.
    """

    def __init__(self, start=0.0):
        self._now = start

    def now(self):
        return self._now

    def advance(self, seconds):
        if seconds > 0:
            self._now += seconds

    def wait(self, condition, timeout=None):
        if timeout is None:
            condition.wait()
        else:
            self.advance(timeout)
