# -*- coding: utf-8 -*-
"""
minitos.signatures
~~~~~~~~~~~~~~~~~~

TOS request signature implementations.
"""

from .base import BaseSignature
from .tos4 import UNSIGNED_PAYLOAD, SignatureTOS4, SignRequest, sign

__all__ = ["BaseSignature", "SignatureTOS4", "SignRequest", "sign", "UNSIGNED_PAYLOAD"]
