# -*- coding: utf-8 -*-
"""
minitos.util
~~~~~~~~~~~~

Encoding and hashing helpers shared by the signer and the request classes.
"""

import hashlib
import hmac
from urllib.parse import quote


def stringify(value):
    """Return ``value`` as text, decoding bytes as UTF-8."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return value


def uri_encode(value, encode_slash=True):
    """
    Percent-encode ``value`` the way TOS canonicalizes URIs.

    Everything but ``A-Z a-z 0-9 - _ . ~`` is escaped, which includes the
    ``!'()*`` characters a browser-style component encoder would leave
    alone. With ``encode_slash=False`` path separators stay literal.

    Args:
        value (str): Text to encode
        encode_slash (bool): Whether ``/`` is escaped as ``%2F``

    Returns:
        str: The encoded text
    """
    encoded = quote(stringify(value), safe="")
    if not encode_slash:
        encoded = encoded.replace("%2F", "/")
    return encoded


def sha256_hex(data):
    """Lowercase hex SHA-256 of ``data`` (text is UTF-8 encoded first)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key, msg):
    """
    Raw HMAC-SHA256 digest.

    ``key`` may be text (UTF-8 encoded) or the raw bytes of a previous
    digest; ``msg`` is always text.
    """
    if isinstance(key, str):
        key = key.encode("utf-8")
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def read_payload(data):
    """
    Read an upload body into bytes.

    Args:
        data: bytes, bytearray, memoryview, str or a readable file-like object

    Returns:
        bytes: The payload

    Raises:
        ValueError: If ``data`` is none of the supported types
    """
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    if hasattr(data, "read"):
        content = data.read()
        if isinstance(content, str):
            content = content.encode("utf-8")
        return content
    raise ValueError(
        "Unsupported data type {0}. Must be bytes, str or a file-like "
        "object".format(type(data).__name__)
    )
