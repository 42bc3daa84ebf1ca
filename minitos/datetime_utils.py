# -*- coding: utf-8 -*-
"""
minitos.datetime_utils
~~~~~~~~~~~~~~~~~~~~~~

UTC clock and the timestamp formats used by TOS.
"""

from datetime import datetime, timezone

SHORT_DATE_FORMAT = "%Y%m%d"
LONG_DATE_FORMAT = "%Y%m%dT%H%M%SZ"

# LastModified values come with and without fractional seconds, and with
# either a Z suffix or a numeric offset
ISO8601_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)


def get_utc_datetime():
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(value):
    """Normalize ``value`` to UTC; naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamps(value):
    """
    Render the signing instant in both TOS forms.

    Args:
        value (datetime): The signing instant

    Returns:
        tuple: ``(short, long)``, e.g. ``("20250101", "20250101T000000Z")``
    """
    value = to_utc(value)
    return value.strftime(SHORT_DATE_FORMAT), value.strftime(LONG_DATE_FORMAT)


def parse_iso8601(text):
    """
    Parse a listing ``LastModified`` value.

    Returns:
        datetime: Aware UTC datetime, or None when ``text`` is empty or
        in an unknown format
    """
    if not text:
        return None
    for fmt in ISO8601_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return to_utc(parsed)
    return None
