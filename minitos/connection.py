# -*- coding: utf-8 -*-
"""
minitos.connection
~~~~~~~~~~~~~~~~~~

The user-facing client: holds credentials and settings and runs requests.
"""

import os

from .auth import TOSAuth
from .exceptions import ConfigError
from .operations.listing_requests import ListAllRequest, ListRequest
from .operations.object_requests import (
    CopyRequest,
    DeleteRequest,
    ExistsRequest,
    GetRequest,
    HeadRequest,
    UpdateMetadataRequest,
    UploadRequest,
)

ENV_REGION = "TOS_REGION"
ENV_ENDPOINT = "TOS_ENDPOINT"
ENV_ACCESS_KEY_ID = "TOS_ACCESS_KEY_ID"
ENV_ACCESS_KEY_SECRET = "TOS_ACCESS_KEY_SECRET"
ENV_BUCKET = "TOS_BUCKET"

REQUIRED_ENV = (ENV_REGION, ENV_ENDPOINT, ENV_ACCESS_KEY_ID, ENV_ACCESS_KEY_SECRET)


class Base(object):
    """
    Settings shared by every request: credentials, region, endpoint,
    default bucket and transport options.

    Args:
        access_key (str): TOS access key ID
        secret_key (str): TOS secret access key
        region (str): Region identifier, e.g. ``cn-beijing``
        endpoint (str): Service host suffix, e.g. ``tos-cn-beijing.volces.com``
        default_bucket (str, optional): Bucket used when a call names none
        tls (bool): Use https
        verify (bool or str): TLS verification, as for ``requests``
        debug (bool): Log the intermediate signing strings
    """

    def __init__(
        self,
        access_key,
        secret_key,
        region,
        endpoint,
        default_bucket=None,
        tls=True,
        verify=True,
        debug=False,
    ):
        self.region = region
        self.endpoint = endpoint
        self.default_bucket = default_bucket
        self.tls = tls
        self.verify = verify
        self.debug = debug
        self.auth = TOSAuth(access_key, secret_key, region, endpoint, debug=debug)

    def __repr__(self):
        return "<{0} region={1!r} endpoint={2!r} bucket={3!r}>".format(
            type(self).__name__, self.region, self.endpoint, self.default_bucket
        )

    @classmethod
    def from_env(cls, environ=None, **kwargs):
        """
        Build a connection from ``TOS_*`` environment variables.

        ``TOS_REGION``, ``TOS_ENDPOINT``, ``TOS_ACCESS_KEY_ID`` and
        ``TOS_ACCESS_KEY_SECRET`` are required; ``TOS_BUCKET`` sets the
        default bucket.

        Raises:
            ConfigError: Listing every missing variable
        """
        environ = os.environ if environ is None else environ
        missing = [name for name in REQUIRED_ENV if not environ.get(name)]
        if missing:
            raise ConfigError(
                "Missing required environment variables: {0}".format(", ".join(missing))
            )
        kwargs.setdefault("default_bucket", environ.get(ENV_BUCKET) or None)
        return cls(
            environ[ENV_ACCESS_KEY_ID],
            environ[ENV_ACCESS_KEY_SECRET],
            environ[ENV_REGION],
            environ[ENV_ENDPOINT],
            **kwargs
        )

    def bucket(self, bucket):
        """
        Resolve the bucket for a call.

        Raises:
            ValueError: If neither ``bucket`` nor a default bucket is set
        """
        bucket = bucket or self.default_bucket
        if not bucket:
            raise ValueError("You must specify a bucket")
        return bucket

    def _handle_request(self, request):
        raise NotImplementedError

    def upload(self, key, data, bucket=None, headers=None, **kwargs):
        """
        Upload ``data`` to ``key``.

        Keyword arguments are passed to :class:`UploadRequest`
        (``content_type``, ``cache_control``, ``metadata``, ...).
        """
        request = UploadRequest(
            self, key, data, self.bucket(bucket), extra_headers=headers, **kwargs
        )
        return self._handle_request(request)

    def download(self, key, bucket=None, headers=None):
        request = GetRequest(self, key, self.bucket(bucket), headers=headers)
        return self._handle_request(request)

    get = download

    def delete(self, key, bucket=None):
        return self._handle_request(DeleteRequest(self, key, self.bucket(bucket)))

    def head(self, key, bucket=None, headers=None):
        request = HeadRequest(self, key, self.bucket(bucket), headers=headers)
        return self._handle_request(request)

    def exists(self, key, bucket=None):
        """Whether ``key`` exists; errors of any kind count as absent."""
        return self._handle_request(ExistsRequest(self, key, self.bucket(bucket)))

    def copy(self, from_key, from_bucket, to_key, to_bucket=None, headers=None, **kwargs):
        """
        Copy ``from_bucket/from_key`` to ``to_bucket/to_key``.

        ``to_bucket`` defaults to the connection's default bucket. Keyword
        arguments are passed to :class:`CopyRequest`.
        """
        request = CopyRequest(
            self,
            from_key,
            from_bucket,
            to_key,
            self.bucket(to_bucket),
            extra_headers=headers,
            **kwargs
        )
        return self._handle_request(request)

    def update_metadata(self, key, bucket=None, headers=None, **kwargs):
        """Replace the metadata of ``key`` by copying it onto itself."""
        request = UpdateMetadataRequest(
            self, key, self.bucket(bucket), extra_headers=headers, **kwargs
        )
        return self._handle_request(request)

    def list(self, bucket=None, **kwargs):
        """
        List one page of objects.

        Returns:
            ListObjectsResult: objects, common prefixes and pagination info
        """
        return self._handle_request(ListRequest(self, self.bucket(bucket), **kwargs))

    def list_all(self, bucket=None, prefix=None, delimiter=None, max_keys=1000):
        """Iterate over every object under ``prefix``, following continuation tokens."""
        request = ListAllRequest(
            self, self.bucket(bucket), prefix=prefix, delimiter=delimiter, max_keys=max_keys
        )
        return self._handle_request(request)


class Connection(Base):
    """
    A connection to TOS that runs each request right away.

    Example:
        >>> conn = Connection('AK', 'SK', 'cn-beijing', 'tos-cn-beijing.volces.com')
        >>> conn.upload('path/to/file.txt', b'hello', bucket='my-bucket')
        >>> conn.exists('path/to/file.txt', bucket='my-bucket')
        True
    """

    def _handle_request(self, request):
        return self.run(request)

    def run(self, request):
        return request.run()
