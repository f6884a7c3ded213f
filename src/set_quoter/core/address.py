"""
EVM address utilities: validation and normalisation.

Addresses are 20-byte hex strings with a 0x prefix. Inside this package every
address is lower-cased, which makes it the identity key for tokens and Set
components. Checksummed (EIP-55) forms are only produced at the web3 boundary.
"""

from __future__ import annotations

import re

from set_quoter.core.errors import InvalidAddress

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def validate_address(address: str) -> bool:
    """
    Validate an EVM address (0x prefix + 40 hex characters).

    Returns:
        True if valid

    Raises:
        InvalidAddress: if the address is malformed
    """
    if not isinstance(address, str):
        raise InvalidAddress(f"Address must be a string, got {type(address).__name__}")
    if not _ADDRESS_RE.fullmatch(address):
        raise InvalidAddress(f"Malformed address: {address!r}", address=address)
    return True


def is_valid_address(address: str) -> bool:
    """Check if an address is valid without raising exceptions."""
    try:
        return validate_address(address)
    except InvalidAddress:
        return False


def normalize_address(address: str) -> str:
    """Validate and lower-case an address."""
    validate_address(address)
    return address.lower()
