# -*- coding: utf-8 -*-
"""
minitos.signatures.tos4
~~~~~~~~~~~~~~~~~~~~~~~

TOS Signature Version 4 (``TOS4-HMAC-SHA256``) implementation.

The scheme follows AWS SigV4 with TOS names: ``x-tos-*`` headers, a
``tos`` service and a ``request`` terminator in the credential scope, and
the raw secret (no prefix) as the first HMAC key.
"""

import logging
from collections import namedtuple
from urllib.parse import unquote, urlsplit

from requests.structures import CaseInsensitiveDict

from .. import datetime_utils
from ..util import hmac_sha256, sha256_hex, uri_encode
from .base import BaseSignature

logger = logging.getLogger(__name__)

ALGORITHM = "TOS4-HMAC-SHA256"
SERVICE = "tos"
TERMINATOR = "request"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
SIGNED_HEADERS = "host;x-tos-content-sha256;x-tos-date"

_SignRequestBase = namedtuple(
    "SignRequest",
    [
        "method",
        "bucket",
        "key",
        "region",
        "endpoint",
        "access_key_id",
        "access_key_secret",
        "content_type",
        "content_sha256",
        "date",
        "query_string",
        "debug",
    ],
)


class SignRequest(_SignRequestBase):
    """
    Everything needed to sign one request.

    ``content_sha256`` is the hex digest of the body, or None to sign
    with ``UNSIGNED-PAYLOAD``. ``date`` defaults to the current time at
    signing. ``query_string`` must already be percent-encoded and sorted
    by parameter name; it is signed verbatim.
    """

    __slots__ = ()

    def __new__(
        cls,
        method,
        bucket,
        key,
        region,
        endpoint,
        access_key_id,
        access_key_secret,
        content_type=DEFAULT_CONTENT_TYPE,
        content_sha256=None,
        date=None,
        query_string=None,
        debug=False,
    ):
        return super(SignRequest, cls).__new__(
            cls,
            method,
            bucket,
            key,
            region,
            endpoint,
            access_key_id,
            access_key_secret,
            content_type,
            content_sha256,
            date,
            query_string,
            debug,
        )

    def __repr__(self):
        return (
            "SignRequest(method={0!r}, bucket={1!r}, key={2!r}, region={3!r}, "
            "endpoint={4!r}, access_key_id={5!r}, access_key_secret='***')".format(
                self.method,
                self.bucket,
                self.key,
                self.region,
                self.endpoint,
                self.access_key_id,
            )
        )


def canonical_uri(key):
    """``/`` followed by the encoded key, keeping ``/`` separators literal."""
    return "/" + uri_encode(key or "", encode_slash=False)


def canonical_headers(host, payload_hash, long_date):
    return "\n".join(
        [
            "host:{0}".format(host),
            "x-tos-content-sha256:{0}".format(payload_hash),
            "x-tos-date:{0}".format(long_date),
        ]
    )


def canonical_request(method, uri, query_string, headers, payload_hash):
    return "\n".join(
        [method, uri, query_string or "", headers, "", SIGNED_HEADERS, payload_hash]
    )


def string_to_sign(long_date, credential_scope, canonical_request_hash):
    return "\n".join([ALGORITHM, long_date, credential_scope, canonical_request_hash])


def signing_key(secret_key, short_date, region):
    """Derive the per-day, per-region signing key from the secret."""
    k_date = hmac_sha256(secret_key, short_date)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, SERVICE)
    return hmac_sha256(k_service, TERMINATOR)


def sign(request):
    """
    Compute the signed header set for ``request``.

    Args:
        request (SignRequest): The request parameters

    Returns:
        CaseInsensitiveDict: ``Host``, ``X-Tos-Date``,
        ``X-Tos-Content-Sha256``, ``Authorization`` and ``Content-Type``
    """
    date = request.date
    if date is None:
        date = datetime_utils.get_utc_datetime()
    short_date, long_date = datetime_utils.format_timestamps(date)

    host = "{0}.{1}".format(request.bucket, request.endpoint)
    payload_hash = request.content_sha256 or UNSIGNED_PAYLOAD

    creq = canonical_request(
        request.method,
        canonical_uri(request.key),
        request.query_string,
        canonical_headers(host, payload_hash, long_date),
        payload_hash,
    )
    if request.debug:
        logger.debug("Canonical request:\n%s", creq)

    credential_scope = "{0}/{1}/{2}/{3}".format(
        short_date, request.region, SERVICE, TERMINATOR
    )
    sts = string_to_sign(long_date, credential_scope, sha256_hex(creq))
    if request.debug:
        logger.debug("String to sign:\n%s", sts)

    key = signing_key(request.access_key_secret, short_date, request.region)
    signature = hmac_sha256(key, sts).hex()
    if request.debug:
        logger.debug("Signature: %s", signature)

    authorization = "{0} Credential={1}/{2}, SignedHeaders={3}, Signature={4}".format(
        ALGORITHM, request.access_key_id, credential_scope, SIGNED_HEADERS, signature
    )

    headers = CaseInsensitiveDict()
    headers["Host"] = host
    headers["X-Tos-Date"] = long_date
    headers["X-Tos-Content-Sha256"] = payload_hash
    headers["Authorization"] = authorization
    headers["Content-Type"] = request.content_type or DEFAULT_CONTENT_TYPE
    return headers


class SignatureTOS4(BaseSignature):
    """
    TOS Signature Version 4.

    Holds the credentials, region and endpoint, and signs individual
    requests with them. Nothing is cached between calls.
    """

    def sign(
        self,
        method,
        bucket,
        key,
        content_type=None,
        content_sha256=None,
        date=None,
        query_string=None,
    ):
        """
        Sign a request for ``key`` in ``bucket``.

        Returns:
            CaseInsensitiveDict: The signed header set
        """
        return sign(
            SignRequest(
                method,
                bucket,
                key,
                self.region,
                self.endpoint,
                self.access_key,
                self.secret_key,
                content_type=content_type or DEFAULT_CONTENT_TYPE,
                content_sha256=content_sha256,
                date=date,
                query_string=query_string,
                debug=self.debug,
            )
        )

    def sign_request(self, request):
        """
        Sign a prepared ``requests`` request in place.

        The bucket, key and query string are read back from the URL, which
        must have been built with the same encoding the signer uses. The
        payload hash comes from the ``X-Tos-Content-Sha256`` header when
        the caller set one.

        Args:
            request: A ``requests.PreparedRequest``

        Returns:
            The same request with the signed headers set

        Raises:
            ValueError: If the URL host is not ``{bucket}.{endpoint}``
        """
        parts = urlsplit(request.url)
        suffix = "." + self.endpoint
        if not parts.netloc.endswith(suffix) or len(parts.netloc) == len(suffix):
            raise ValueError(
                "Host {0!r} does not belong to endpoint {1!r}".format(
                    parts.netloc, self.endpoint
                )
            )
        bucket = parts.netloc[: -len(suffix)]
        key = unquote(parts.path[1:])

        signed = self.sign(
            request.method.upper(),
            bucket,
            key,
            content_type=request.headers.get("Content-Type"),
            content_sha256=request.headers.get("X-Tos-Content-Sha256"),
            query_string=parts.query,
        )
        request.headers.update(signed)
        return request
