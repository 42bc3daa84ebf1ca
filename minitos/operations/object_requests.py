# -*- coding: utf-8 -*-
"""
minitos.operations.object_requests
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

TOS object-level operations (upload, download, delete, copy, etc.)
"""

import datetime
import mimetypes
from email.utils import format_datetime

import requests

from ..datetime_utils import to_utc
from ..signatures import UNSIGNED_PAYLOAD
from ..util import read_payload, sha256_hex, stringify, uri_encode
from . import TOSRequest

METADATA_PREFIX = "x-tos-meta-"
METADATA_DIRECTIVES = ("COPY", "REPLACE")


def metadata_headers(metadata):
    """Turn user metadata into ``x-tos-meta-*`` headers."""
    return dict(
        (METADATA_PREFIX + name, value) for name, value in (metadata or {}).items()
    )


def http_date(value):
    """RFC 1123 date for an ``Expires`` header; strings pass through untouched."""
    if isinstance(value, datetime.datetime):
        return format_datetime(to_utc(value), usegmt=True)
    return value


class GetRequest(TOSRequest):
    """
    Download an object.

    Args:
        conn: TOS connection object
        key (str): Object key to download
        bucket (str): Bucket name
        headers (dict, optional): Additional HTTP headers
    """

    action = "download from TOS"

    def __init__(self, conn, key, bucket, headers=None):
        super(GetRequest, self).__init__(conn)
        self.key = key
        self.bucket = bucket
        self.headers = headers or {}

    def run(self):
        """
        Execute the download request.

        Returns:
            Response: HTTP response containing the object data
        """
        headers = dict(self.headers)
        headers["X-Tos-Content-Sha256"] = UNSIGNED_PAYLOAD
        url = self.bucket_url(self.key, self.bucket)
        return self._make_request("GET", url, headers=headers)


class UploadRequest(TOSRequest):
    """
    Upload an object.

    The body is read into memory so its SHA-256 can be signed.

    Args:
        conn: TOS connection object
        key (str): Object key for the upload
        data: bytes, str or a readable file-like object
        bucket (str): Bucket name
        content_type (str, optional): MIME type; guessed from the key if omitted
        cache_control (str, optional): Cache-Control header value
        content_disposition (str, optional): Content-Disposition header value
        content_encoding (str, optional): Content-Encoding header value
        content_language (str, optional): Content-Language header value
        expires (datetime or str, optional): Expires header value
        metadata (dict, optional): User metadata, sent as x-tos-meta-* headers
        extra_headers (dict, optional): Additional HTTP headers
    """

    action = "upload to TOS"

    def __init__(
        self,
        conn,
        key,
        data,
        bucket,
        content_type=None,
        cache_control=None,
        content_disposition=None,
        content_encoding=None,
        content_language=None,
        expires=None,
        metadata=None,
        extra_headers=None,
    ):
        super(UploadRequest, self).__init__(conn)
        self.key = key
        self.data = data
        self.bucket = bucket
        self.content_type = content_type
        self.cache_control = cache_control
        self.content_disposition = content_disposition
        self.content_encoding = content_encoding
        self.content_language = content_language
        self.expires = expires
        self.metadata = metadata
        self.extra_headers = extra_headers or {}

    def run(self):
        """
        Execute the upload request.

        Returns:
            Response: HTTP response from the upload operation
        """
        body = read_payload(self.data)
        headers = self._build_headers()
        headers["X-Tos-Content-Sha256"] = sha256_hex(body)

        url = self.bucket_url(self.key, self.bucket)
        return self._make_request("PUT", url, data=body, headers=headers)

    def _build_headers(self):
        headers = dict(self.extra_headers)

        optional = (
            ("Cache-Control", self.cache_control),
            ("Content-Disposition", self.content_disposition),
            ("Content-Encoding", self.content_encoding),
            ("Content-Language", self.content_language),
            ("Expires", http_date(self.expires)),
        )
        for name, value in optional:
            if value:
                headers[name] = value

        headers.update(metadata_headers(self.metadata))
        headers["Content-Type"] = self._determine_content_type()
        return headers

    def _determine_content_type(self):
        """
        Determine the content type for the upload.

        Returns:
            str: MIME content type
        """
        if self.content_type:
            return self.content_type
        guessed_type, _ = mimetypes.guess_type(stringify(self.key))
        return guessed_type or "application/octet-stream"


class DeleteRequest(TOSRequest):
    """
    Delete an object.

    Args:
        conn: TOS connection object
        key (str): Object key to delete
        bucket (str): Bucket name
    """

    action = "delete from TOS"

    def __init__(self, conn, key, bucket):
        super(DeleteRequest, self).__init__(conn)
        self.key = key
        self.bucket = bucket

    def run(self):
        url = self.bucket_url(self.key, self.bucket)
        return self._make_request(
            "DELETE", url, headers={"X-Tos-Content-Sha256": UNSIGNED_PAYLOAD}
        )


class HeadRequest(TOSRequest):
    """
    Fetch the metadata of an object without its content.

    Args:
        conn: TOS connection object
        key (str): Object key
        bucket (str): Bucket name
        headers (dict, optional): Additional HTTP headers
    """

    action = "check object in TOS"

    def __init__(self, conn, key, bucket, headers=None):
        super(HeadRequest, self).__init__(conn)
        self.key = key
        self.bucket = bucket
        self.headers = headers or {}

    def run(self):
        headers = dict(self.headers)
        headers["X-Tos-Content-Sha256"] = UNSIGNED_PAYLOAD
        url = self.bucket_url(self.key, self.bucket)
        return self._make_request("HEAD", url, headers=headers)


class ExistsRequest(HeadRequest):
    """HEAD an object and report whether it is there."""

    def run(self):
        """
        Returns:
            bool: True on a 2xx answer, False on any error status or
            transport failure
        """
        try:
            super(ExistsRequest, self).run()
        except requests.RequestException:
            return False
        return True


class CopyRequest(TOSRequest):
    """
    Copy an object within TOS or between buckets.

    Args:
        conn: TOS connection object
        from_key (str): Source object key
        from_bucket (str): Source bucket name
        to_key (str): Destination object key
        to_bucket (str): Destination bucket name
        content_type (str, optional): Content-Type of the copy
        cache_control (str, optional): Cache-Control of the copy
        content_disposition (str, optional): Content-Disposition of the copy
        metadata (dict, optional): User metadata for the copy
        metadata_directive (str, optional): ``COPY`` or ``REPLACE``
        extra_headers (dict, optional): Additional HTTP headers
    """

    action = "copy object in TOS"

    def __init__(
        self,
        conn,
        from_key,
        from_bucket,
        to_key,
        to_bucket,
        content_type=None,
        cache_control=None,
        content_disposition=None,
        metadata=None,
        metadata_directive=None,
        extra_headers=None,
    ):
        super(CopyRequest, self).__init__(conn)

        if metadata_directive is not None and metadata_directive not in METADATA_DIRECTIVES:
            raise ValueError(
                "metadata_directive must be one of {0}, got {1!r}".format(
                    ", ".join(METADATA_DIRECTIVES), metadata_directive
                )
            )

        self.from_key = stringify(from_key)
        self.from_bucket = stringify(from_bucket)
        self.to_key = stringify(to_key)
        self.to_bucket = stringify(to_bucket)
        self.content_type = content_type
        self.cache_control = cache_control
        self.content_disposition = content_disposition
        self.metadata = metadata
        self.metadata_directive = metadata_directive
        self.extra_headers = extra_headers or {}

    def run(self):
        headers = self._build_copy_headers()
        url = self.bucket_url(self.to_key, self.to_bucket)
        return self._make_request("PUT", url, headers=headers)

    def _build_copy_headers(self):
        """
        Build headers for the copy request.

        Returns:
            dict: Headers for the copy operation
        """
        headers = dict(self.extra_headers)
        headers["x-tos-copy-source"] = "/{0}/{1}".format(
            self.from_bucket, uri_encode(self.from_key, encode_slash=False)
        )

        if self.metadata_directive:
            headers["x-tos-metadata-directive"] = self.metadata_directive
        if self.cache_control:
            headers["Cache-Control"] = self.cache_control
        if self.content_disposition:
            headers["Content-Disposition"] = self.content_disposition

        headers.update(metadata_headers(self.metadata))
        headers["Content-Type"] = self.content_type or "application/octet-stream"
        headers["X-Tos-Content-Sha256"] = UNSIGNED_PAYLOAD
        return headers


class UpdateMetadataRequest(CopyRequest):
    """
    Replace the metadata of an existing object.

    Implemented as a copy of the object onto itself with the ``REPLACE``
    metadata directive.

    Args:
        conn: TOS connection object
        key (str): Object key to update
        bucket (str): Bucket name
        **kwargs: ``content_type``, ``cache_control``, ``content_disposition``,
            ``metadata`` and ``extra_headers`` as for :class:`CopyRequest`
    """

    action = "update object metadata in TOS"

    def __init__(self, conn, key, bucket, **kwargs):
        kwargs["metadata_directive"] = "REPLACE"
        super(UpdateMetadataRequest, self).__init__(
            conn, key, bucket, key, bucket, **kwargs
        )
