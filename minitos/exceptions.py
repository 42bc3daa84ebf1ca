# -*- coding: utf-8 -*-
"""
minitos.exceptions
~~~~~~~~~~~~~~~~~~

Errors raised by minitos.
"""

import requests


class TOSError(requests.HTTPError):
    """
    The service answered with a non-2xx status.

    Attributes:
        action (str): What was attempted, e.g. ``"upload to TOS"``
        status_code (int): HTTP status of the response
        body (str): Response body text
    """

    def __init__(self, action, status_code, body, response=None):
        self.action = action
        self.status_code = status_code
        self.body = body
        super(TOSError, self).__init__(
            "Failed to {0}: {1} {2}".format(action, status_code, body),
            response=response,
        )


class ConfigError(ValueError):
    """Raised when the client configuration is incomplete."""
