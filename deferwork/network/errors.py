# -*- coding: utf-8 -*-
"""This module defines all errors which can occur in the network module.

requests exceptions can be converted to deferwork.network errors using the
``handler`` decorator.

Errors have a human-readable message. They are also more verbose when
displayed using 'repr()`.
"""

import requests.exceptions


class NetworkError(Exception):
    """Base class for deferwork.network errors.

    Attributes:
        message (str): Human readable message, describing the error.
        reason (Exception): internal exception which've produced this error.
            Can be None.
    """

    def __init__(self, reason=None, message=None):
        """
        Args:
            reason (Exception, optional): base error
            message (str, optional): User-friendly message.
        """
        self.reason = reason
        self.message = message or 'Request failed, check your preference'
        Exception.__init__(self, self.message)

    def __repr__(self):
        return '%s("%s")' % (self.__class__.__name__, self.message)

    def __str__(self):
        return self.message


class ConnectionError(NetworkError):
    def __init__(self, error):
        NetworkError.__init__(self, error, 'Unable to connect to the server.')


class TimeoutError(NetworkError):
    def __init__(self, error):
        NetworkError.__init__(self, error,
                              'The server did not respond on time.')


class HTTPError(NetworkError):
    """Base class for HTTP errors.

    Attributes:
        code (int): HTTP status code
        status_text (str): HTTP status text
        request (str): representation of the request.
        response (dict or text): If the response content was in json, the
            corresponding dict, else the content as text.
    """

    def __init__(self, error):
        """
        Args:
            error (requests.exceptions.HTTPError): base error.
        """
        self.code = error.response.status_code
        self.status_text = error.response.reason
        self.request = '%s %s' % (error.request.method, error.request.url)

        NetworkError.__init__(self, error,
                              'Status %s, Request failed' % self.code)

        try:
            self.response = error.response.json()
        except ValueError:
            self.response = error.response.text

    def __repr__(self):
        return '\n'.join(("HTTP Error: %s %s" % (self.code, self.status_text),
                          "\tRequest: %s" % self.request,
                          "\tResponse: %s" % self.response))


class HTTPClientError(HTTPError):
    """The server has refused the request (status 4xx)."""
    pass


class HTTPServerError(HTTPError):
    """The server has failed to process the request (status 5xx)."""
    pass


def handler(func):
    """Decorator who handles errors of the requests.

    Converts requests.exceptions.* into deferwork.network.errors.
    """

    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except requests.exceptions.ConnectionError as error:
            raise ConnectionError(error)
        except requests.exceptions.Timeout as error:
            raise TimeoutError(error)
        except requests.exceptions.HTTPError as error:
            if error.response.status_code >= 500:
                raise HTTPServerError(error)
            raise HTTPClientError(error)
        except requests.exceptions.RequestException as error:
            raise NetworkError(error)

    return wrapper
