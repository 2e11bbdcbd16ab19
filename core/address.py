# PATH: core/address.py
"""
Address normalization.

Two strictness levels share one checksum algorithm (EIP-55 via web3):
- normalize(): corrects casing, used by repair tooling
- is_canonical(): rejects anything not already checksum-cased, used by
  the validation gate

USAGE:
    from core.address import normalize, is_canonical

    normalize("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
    # -> "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
"""

import re

from web3 import Web3

from core.constants import ADDRESS_PATTERN
from core.exceptions import InvalidAddress

_ADDRESS_RE = re.compile(ADDRESS_PATTERN)


def is_valid_address(value: object) -> bool:
    """
    Check if value is a syntactically valid address.

    Casing is not checked: any 0x-prefixed 40-char hex string passes.
    """
    if not isinstance(value, str):
        return False
    return _ADDRESS_RE.fullmatch(value) is not None


def normalize(raw: object) -> str:
    """
    Return the checksum-cased form of raw.

    Raises:
        InvalidAddress: raw is not 0x + 40 hex digits
    """
    if not is_valid_address(raw):
        raise InvalidAddress(raw)
    # Hash the lowercase form so the result never depends on input casing
    return Web3.to_checksum_address(raw.lower())


def is_canonical(value: object) -> bool:
    """True iff value is a valid address already in checksum casing."""
    if not is_valid_address(value):
        return False
    return normalize(value.lower()) == value


def address_key(address: str) -> str:
    """Case-insensitive identity key for an address."""
    return address.lower()
