# -*- coding: utf-8 -*-
"""
minitos.operations
~~~~~~~~~~~~~~~~~~

Base class for TOS request implementations.
"""

import logging

import requests

from ..exceptions import TOSError
from ..util import stringify, uri_encode

logger = logging.getLogger(__name__)


def build_query_string(params):
    """
    Build a canonical query string from ``params``.

    Parameters are sorted by name and both names and values are
    percent-encoded, so the result can be used in the URL and signed
    verbatim. ``None`` values are dropped.

    Args:
        params (dict): Query parameters

    Returns:
        str: Query string without the leading ``?``
    """
    return "&".join(
        "{0}={1}".format(uri_encode(name), uri_encode(str(value)))
        for name, value in sorted(params.items())
        if value is not None
    )


class TOSRequest(object):
    """
    Base class for all TOS requests.

    Handles URL generation, authentication and error handling that all
    TOS operations share.

    Args:
        conn: The TOS connection object
        params (dict, optional): Query parameters to add to the request URL
    """

    #: Used in error messages, e.g. "Failed to upload to TOS: 403 ..."
    action = "call TOS"

    def __init__(self, conn, params=None):
        self.auth = conn.auth
        self.tls = conn.tls
        self.endpoint = conn.endpoint
        self.verify = conn.verify
        self.params = params or {}

    def bucket_url(self, key, bucket):
        """
        Generate the complete URL for a TOS request.

        Constructs URLs in the format: protocol://bucket.endpoint/key?params.
        The key is encoded exactly as the signer canonicalizes it.

        Args:
            key (str): The object key (empty for bucket operations)
            bucket (str): The bucket name

        Returns:
            str: Complete URL for the request

        Examples:
            >>> request.bucket_url('my file.txt', 'my-bucket')
            'https://my-bucket.tos-cn-beijing.volces.com/my%20file.txt'
            >>> request.bucket_url('', 'my-bucket')  # Bucket operation
            'https://my-bucket.tos-cn-beijing.volces.com/'
        """
        protocol = "https" if self.tls else "http"
        key = stringify(key) or ""
        bucket = stringify(bucket) or ""

        url = "{0}://{1}.{2}/{3}".format(
            protocol, bucket, self.endpoint, uri_encode(key, encode_slash=False)
        )

        query_string = self.query_string()
        if query_string:
            url += "?" + query_string

        return url

    def query_string(self):
        return build_query_string(self.params)

    def adapter(self):
        """
        Get the HTTP adapter for making requests.

        Returns the requests module by default, but can be overridden
        for testing with mock adapters.

        Returns:
            module: The requests module or a mock adapter
        """
        return requests

    def run(self):
        """
        Execute the TOS request.

        Raises:
            NotImplementedError: If not implemented by subclass
        """
        raise NotImplementedError("Subclasses must implement the run() method")

    def _make_request(self, method, url, **kwargs):
        """
        Make an HTTP request with the connection's auth and TLS settings.

        Args:
            method (str): HTTP method ('GET', 'PUT', 'DELETE', 'HEAD')
            url (str): Request URL
            **kwargs: Additional arguments to pass to requests

        Returns:
            Response: The HTTP response object

        Raises:
            TOSError: If the service answers with a non-2xx status
        """
        kwargs.setdefault("auth", self.auth)
        kwargs.setdefault("verify", self.verify)

        logger.debug("%s %s", method, url)
        adapter = self.adapter()
        response = getattr(adapter, method.lower())(url, **kwargs)

        if not response.ok:
            raise TOSError(
                self.action, response.status_code, response.text, response=response
            )

        return response
