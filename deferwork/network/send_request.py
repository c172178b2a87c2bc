# -*- coding: utf-8 -*-

import logging

from ..common.log import HIDEBUG
from . import errors

_logger = logging.getLogger(__name__)


@errors.handler
def json_request(session, verb, url, **params):
    """Performs a json HTTP requests, then returns the decoded content.

    It's a blocking call, executed in a worker thread.

    Args:
        session (requests.Session)
        verb (str): HTTP method
        url (str)
        **params: passed as is to ``session.request()``.
    Returns:
        the JSON response, or None if the response is empty.
    Raises:
        NetworkError: if the request fails, or if the HTTP status code is an
            error (400 or more).
    """
    response = session.request(method=verb, url=url, **params)

    _logger.log(HIDEBUG, 'request %s %s -> %s', verb, url,
                response.status_code)

    response.raise_for_status()

    if not response.content:
        return None
    return response.json()
