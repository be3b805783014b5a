"""Address Validation — default identity-validation service.

Invariants:
    - Only canonical addresses pass: lowercase, no surrounding whitespace
    - Length within [min_length, max_length]; characters in [a-z0-9._-]
    - validate() returns the address unchanged as an Identity, or raises InvalidAddressError
"""

import re

from rwa_market.core.domain_types import Identity
from rwa_market.core.errors import InvalidAddressError


_ALLOWED = re.compile(r"^[a-z0-9._-]+$")


class CanonicalAddressValidator:
    """AddressValidator accepting lowercase ASCII identities."""

    def __init__(self, min_length: int = 3, max_length: int = 90):
        self._min_length = min_length
        self._max_length = max_length

    def validate(self, address: str) -> Identity:
        if not address or not address.strip():
            raise InvalidAddressError(address, "address is empty")
        if address != address.strip() or address != address.lower():
            raise InvalidAddressError(address, "address is not normalized")
        if len(address) < self._min_length:
            raise InvalidAddressError(address, "address is too short")
        if len(address) > self._max_length:
            raise InvalidAddressError(address, "address is too long")
        if not _ALLOWED.match(address):
            raise InvalidAddressError(address, "address contains invalid characters")
        return Identity(address)
