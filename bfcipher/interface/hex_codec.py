"""
Hex Adapter

Converts the hexadecimal strings typed by a user into the key and IV bytes
the cipher expects.
"""

import string
from typing import Optional

from ..config.settings import ConfigurationError, validate_iv, validate_key

_HEX_DIGITS = frozenset(string.hexdigits)


def hex_to_bytes(text: str) -> bytes:
    """
    Decode a hex string, case-insensitively.

    A trailing unpaired digit is dropped rather than rejected, so "Af901Ce"
    decodes to the same three bytes as "Af901C".

    Args:
        text: The hex string; surrounding whitespace is ignored

    Returns:
        The decoded bytes

    Raises:
        ValueError: If the string contains a non-hex character
    """
    text = text.strip()
    bad = [c for c in text if c not in _HEX_DIGITS]
    if bad:
        raise ValueError(f"Not a hex digit: {bad[0]!r}")
    return bytes.fromhex(text[:len(text) - len(text) % 2])


def bytes_to_hex(data: bytes) -> str:
    """Encode bytes as a lowercase hex string."""
    return bytes(data).hex()


def parse_key(text: str) -> bytes:
    """
    Decode and validate a hex key.

    Raises:
        ConfigurationError: If the text is not hex or the key is not 1 to 72 bytes
    """
    try:
        key = hex_to_bytes(text)
    except ValueError as e:
        raise ConfigurationError(f"Invalid key: {e}") from e
    return validate_key(key)


def parse_iv(text: Optional[str]) -> bytes:
    """
    Decode and validate a hex initialization vector (16 hex digits).

    Raises:
        ConfigurationError: If the text is missing, not hex or not one block long
    """
    if text is None:
        raise ConfigurationError("This mode requires an initialization vector")
    try:
        iv = hex_to_bytes(text)
    except ValueError as e:
        raise ConfigurationError(f"Invalid IV: {e}") from e
    return validate_iv(iv)
