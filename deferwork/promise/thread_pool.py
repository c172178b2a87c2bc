# -*- coding: utf-8 -*-

from concurrent.futures import ThreadPoolExecutor as Executor
import logging

from ..loop import get_event_loop
from .deferred import Deferred

_logger = logging.getLogger(__name__)


class ThreadPoolExecutor(object):
    """Execute callables asynchronously on demand, in another threads.

    The Deferreds returned are settled on the thread running the event loop,
    not in the worker threads.
    """

    def __init__(self, max_workers, loop=None):
        """Initialize the thread pool

        Args:
            max_workers: The maximum number of threads that can be used to
                execute the given calls.
            loop (EventLoop, optional): loop receiving the results. Default to
                the process-wide loop, resolved at each call to `submit()`.
        """
        self._executor = Executor(max_workers)
        self._loop = loop

    def submit(self, callback, *args, **kwargs):
        """Schedule the callable to be executed and return a Deferred.

        Args:
            callback (callable): callback who will run in another thread.
            *args: argument passed to callback.
            **kwargs: keywords arguments passed to callback.
        Returns:
            Deferred: Deferred who resolve after the callback has been
                executed. It's fulfilled with the value returned by the
                callback. If the callback raise an exception, the Deferred is
                rejected with this exception.
        """
        loop = self._loop or get_event_loop()
        df = Deferred(loop=loop,
                      name='THREAD %s' % getattr(callback, '__name__', '???'))
        handle = loop.register_io()

        def on_future_done(f):
            try:
                result = f.result()
            except BaseException as error:
                handle.post(df.reject, error)
            else:
                handle.post(df.resolve, result)

        try:
            f = self._executor.submit(callback, *args, **kwargs)
        except RuntimeError as error:
            _logger.warning('Unable to submit %s to the thread pool: %s',
                            callback, error)
            handle.post(df.reject, error)
            return df

        f.add_done_callback(on_future_done)
        return df

    def shutdown(self, wait=True):
        """Free the threads once the pending calls are done."""
        self._executor.shutdown(wait)
