# -*- coding: utf-8 -*-
"""
minitos.operations.listing_requests
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

TOS listing operations (ListObjectsV2).
"""

import json
from collections import namedtuple

import lxml.etree as ET

from ..datetime_utils import parse_iso8601
from ..signatures import UNSIGNED_PAYLOAD
from . import TOSRequest

MAX_KEYS_LIMIT = 1000

ListObjectsResult = namedtuple(
    "ListObjectsResult",
    [
        "objects",
        "common_prefixes",
        "is_truncated",
        "next_continuation_token",
        "key_count",
    ],
)


def _object_info(key, last_modified, etag, size, storage_class):
    return {
        "key": key,
        "last_modified": parse_iso8601(last_modified),
        "etag": (etag or "").replace('"', ""),
        "size": int(size or 0),
        "storage_class": storage_class or "STANDARD",
    }


def parse_list_objects(content):
    """
    Parse a ListObjectsV2 response body.

    TOS answers in JSON by default; XML bodies are handled as well.

    Args:
        content (bytes or str): Response body

    Returns:
        ListObjectsResult: The parsed page
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    try:
        document = json.loads(content.decode("utf-8"))
    except ValueError:
        return parse_list_objects_xml(content)
    if not isinstance(document, dict):
        raise ValueError("Unexpected ListObjects response: {0!r}".format(document))
    return parse_list_objects_json(document)


def parse_list_objects_json(document):
    objects = [
        _object_info(
            item.get("Key"),
            item.get("LastModified"),
            item.get("ETag"),
            item.get("Size"),
            item.get("StorageClass"),
        )
        for item in document.get("Contents") or []
    ]
    common_prefixes = [
        p.get("Prefix") for p in document.get("CommonPrefixes") or [] if p.get("Prefix")
    ]
    return ListObjectsResult(
        objects=objects,
        common_prefixes=common_prefixes,
        is_truncated=bool(document.get("IsTruncated", False)),
        next_continuation_token=document.get("NextContinuationToken") or None,
        key_count=document.get("KeyCount") or len(objects),
    )


def _children(element, name):
    """Child elements called ``name``, whatever their namespace."""
    return [
        child
        for child in element
        if isinstance(child.tag, str) and ET.QName(child).localname == name
    ]


def _child_text(element, name):
    found = _children(element, name)
    if not found:
        return None
    return found[0].text


def parse_list_objects_xml(content):
    """
    Parse an XML ListBucketResult.

    Raises:
        lxml.etree.XMLSyntaxError: If ``content`` is not well-formed XML
    """
    # lxml parsers must not be shared between threads
    parser = ET.XMLParser(resolve_entities=False, no_network=True)
    root = ET.fromstring(content, parser=parser)

    objects = []
    for tag in _children(root, "Contents"):
        key = _child_text(tag, "Key")
        if not key:
            continue
        objects.append(
            _object_info(
                key,
                _child_text(tag, "LastModified"),
                _child_text(tag, "ETag"),
                _child_text(tag, "Size"),
                _child_text(tag, "StorageClass"),
            )
        )

    common_prefixes = []
    for tag in _children(root, "CommonPrefixes"):
        prefix = _child_text(tag, "Prefix")
        if prefix:
            common_prefixes.append(prefix)

    key_count = _child_text(root, "KeyCount")
    return ListObjectsResult(
        objects=objects,
        common_prefixes=common_prefixes,
        is_truncated=_child_text(root, "IsTruncated") == "true",
        next_continuation_token=_child_text(root, "NextContinuationToken") or None,
        key_count=int(key_count) if key_count else len(objects),
    )


class ListRequest(TOSRequest):
    """
    List one page of objects in a bucket (ListObjectsV2).

    Args:
        conn: TOS connection object
        bucket (str): Bucket name
        prefix (str, optional): Only list keys starting with this prefix
        delimiter (str, optional): Group keys into common prefixes, e.g. ``/``
        max_keys (int, optional): Page size, 1 to 1000
        continuation_token (str, optional): Token from the previous page
        start_after (str, optional): Start listing after this key
        headers (dict, optional): Additional HTTP headers
    """

    action = "list objects in TOS"

    def __init__(
        self,
        conn,
        bucket,
        prefix=None,
        delimiter=None,
        max_keys=None,
        continuation_token=None,
        start_after=None,
        headers=None,
    ):
        if max_keys is not None and not 1 <= max_keys <= MAX_KEYS_LIMIT:
            raise ValueError(
                "max_keys must be between 1 and {0}, got {1}".format(
                    MAX_KEYS_LIMIT, max_keys
                )
            )

        params = {
            "list-type": 2,
            "prefix": prefix or None,
            "delimiter": delimiter or None,
            "max-keys": max_keys,
            "continuation-token": continuation_token or None,
            "start-after": start_after or None,
        }
        super(ListRequest, self).__init__(conn, params)
        self.bucket = bucket
        self.headers = headers or {}

    def run(self):
        """
        Execute the list request.

        Returns:
            ListObjectsResult: The requested page
        """
        headers = dict(self.headers)
        headers["X-Tos-Content-Sha256"] = UNSIGNED_PAYLOAD
        url = self.bucket_url("", self.bucket)
        response = self._make_request("GET", url, headers=headers)
        return parse_list_objects(response.content)


class ListAllRequest(object):
    """
    Iterate over every object under a prefix, page by page.

    Args:
        conn: TOS connection object
        bucket (str): Bucket name
        prefix (str, optional): Only list keys starting with this prefix
        delimiter (str, optional): Group keys into common prefixes
        max_keys (int): Page size
    """

    def __init__(self, conn, bucket, prefix=None, delimiter=None, max_keys=MAX_KEYS_LIMIT):
        self.conn = conn
        self.bucket = bucket
        self.prefix = prefix
        self.delimiter = delimiter
        self.max_keys = max_keys

    def run(self):
        return iter(self)

    def page(self, continuation_token):
        return ListRequest(
            self.conn,
            self.bucket,
            prefix=self.prefix,
            delimiter=self.delimiter,
            max_keys=self.max_keys,
            continuation_token=continuation_token,
        ).run()

    def __iter__(self):
        """
        Yields:
            dict: Object info with keys 'key', 'size', 'last_modified',
                  'etag', 'storage_class'
        """
        token = None
        while True:
            result = self.page(token)
            for obj in result.objects:
                yield obj

            token = result.next_continuation_token
            if not (result.is_truncated and token):
                break
