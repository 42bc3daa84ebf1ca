# -*- coding: utf-8 -*-
"""
minitos.auth
~~~~~~~~~~~~

``requests`` authentication hook that signs outgoing TOS requests.
"""

from requests.auth import AuthBase

from .signatures import SignatureTOS4


class TOSAuth(AuthBase):
    """
    Attach a ``TOS4-HMAC-SHA256`` signature to every request it is given.

    Args:
        access_key (str): TOS access key ID
        secret_key (str): TOS secret access key
        region (str): Region identifier
        endpoint (str): Service host suffix
        debug (bool): Log the intermediate signing strings
    """

    def __init__(self, access_key, secret_key, region, endpoint, debug=False):
        self.signature = SignatureTOS4(
            access_key, secret_key, region, endpoint, debug=debug
        )

    @property
    def access_key(self):
        return self.signature.access_key

    def __call__(self, request):
        return self.signature.sign_request(request)
