# -*- coding: utf-8 -*-
"""
minitos.signatures.base
~~~~~~~~~~~~~~~~~~~~~~~

Base class for TOS signature implementations.
"""


class BaseSignature(object):
    """Base class for TOS signature implementations."""

    def __init__(self, access_key, secret_key, region, endpoint, debug=False):
        """
        Initialize the signature implementation.

        Args:
            access_key (str): TOS access key ID
            secret_key (str): TOS secret access key
            region (str): Region identifier, e.g. ``cn-beijing``
            endpoint (str): Service host suffix, e.g. ``tos-cn-beijing.volces.com``
            debug (bool): Log the intermediate signing strings
        """
        self.access_key = access_key
        self.secret_key = secret_key
        self.region = region
        self.endpoint = endpoint
        self.debug = debug

    def __repr__(self):
        return "<{0} access_key={1!r} region={2!r} endpoint={3!r}>".format(
            type(self).__name__, self.access_key, self.region, self.endpoint
        )

    def sign_request(self, request):
        """
        Sign the given request.

        Args:
            request: The request object to sign

        Returns:
            The signed request object
        """
        raise NotImplementedError("Subclasses must implement sign_request")
