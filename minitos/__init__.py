# -*- coding: utf-8 -*-
from .auth import TOSAuth
from .connection import Connection
from .exceptions import ConfigError, TOSError
from .operations.listing_requests import ListObjectsResult
from .signatures import UNSIGNED_PAYLOAD, SignatureTOS4, SignRequest, sign

__title__ = "minitos"
__version__ = "1.0.0"
__license__ = "MIT"
__all__ = [
    "Connection",
    "TOSAuth",
    "SignatureTOS4",
    "SignRequest",
    "sign",
    "UNSIGNED_PAYLOAD",
    "ListObjectsResult",
    "TOSError",
    "ConfigError",
]
