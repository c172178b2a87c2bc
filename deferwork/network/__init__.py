# -*- coding: utf-8 -*-
"""Network module

This module performs HTTP requests in worker threads, and gives the result as
a Deferred settled on the event loop.

The thread pool and the HTTP session are shared by all requests; they are
created by the ``Context``, which must be started before any call to
``fetch()`` (unless both a session and an executor are passed explicitly).

Examples:

    >>> from deferwork.loop import get_event_loop
    >>> with Context():
    ...     df = fetch('https://itunes.apple.com/us/rss/topalbums/json')
    ...     df.then(print).catch(print)
    ...     get_event_loop().run()
"""

import logging

import requests

from ..common import config
from ..promise import ThreadPoolExecutor
from . import errors  # noqa
from .send_request import json_request

_logger = logging.getLogger(__name__)

_session = None
_executor = None


class Context(object):
    """Create (and release) the resources shared by the requests."""

    def __init__(self, max_workers=None, loop=None):
        """
        Args:
            max_workers (int, optional): number of threads sending the
                requests. Default to the 'fetch_workers' config entry.
            loop (EventLoop, optional): loop receiving the responses.
        """
        self._max_workers = max_workers or config.get('fetch_workers')
        self._loop = loop

    def start(self):
        global _session, _executor

        _logger.debug('Start network context (%s workers)',
                      self._max_workers)
        _session = requests.Session()
        _executor = ThreadPoolExecutor(self._max_workers, loop=self._loop)

    def stop(self):
        global _session, _executor

        if _executor:
            _executor.shutdown()
        if _session:
            _session.close()

        _session = None
        _executor = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()


def fetch(url, method='GET', session=None, executor=None, **params):
    """Send an HTTP request, and returns a Deferred of the JSON response.

    Args:
        url (str)
        method (str, optional): HTTP verb. Default to 'GET'.
        session (requests.Session, optional): session used to send the
            request. Default to the session of the started Context.
        executor (ThreadPoolExecutor, optional): thread pool sending the
            request. Default to the thread pool of the started Context.
        **params: passed to ``requests.Session.request()``. The 'timeout'
            parameter default to the 'request_timeout' config entry.
    Returns:
        Deferred: resolved with the decoded JSON body if the status code is
            lower than 400. Otherwise, rejected with a NetworkError.
    Raises:
        RuntimeError: if no Context is started and no session and executor
            are given.
    """
    session = session or _session
    executor = executor or _executor
    if session is None or executor is None:
        raise RuntimeError('The network context is not started.')

    params.setdefault('timeout', config.get('request_timeout'))
    _logger.debug('Fetch %s %s', method, url)
    return executor.submit(json_request, session, method, url, **params)
