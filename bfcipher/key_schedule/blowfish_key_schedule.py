"""
Blowfish Key Schedule Implementation

This module expands a variable-length key (1 to 72 bytes) into the round
state used by the block transform: 18 subkeys and four 256-entry
substitution tables, seeded from the pi constants and then mixed by 521
chained block encryptions.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .constants import P_ARRAY, S_BOXES, SUBKEY_COUNT, SBOX_ENTRIES
from .feistel import encode_block
from ..config.settings import validate_key

logger = logging.getLogger(__name__)


class CyclicKeyReader:
    """
    Reads key bytes one at a time, wrapping back to the first byte when the
    key is exhausted. The position is kept between calls, so a single reader
    threaded through the subkey fill sees the key as an endless stream.
    """

    def __init__(self, key: bytes):
        if not key:
            raise ValueError("Cannot cycle over an empty key")
        self._key = bytes(key)
        self._index = 0

    @property
    def position(self) -> int:
        """Index of the byte the next read will return."""
        return self._index

    def next_byte(self) -> int:
        value = self._key[self._index]
        self._index = (self._index + 1) % len(self._key)
        return value

    def next_word(self) -> int:
        """Read four bytes and pack them big-endian into a 32-bit word."""
        word = 0
        for _ in range(4):
            word = (word << 8) | self.next_byte()
        return word


@dataclass(frozen=True)
class RoundState:
    """
    Per-key material of the cipher.

    Attributes:
        subkeys: The 18 round subkeys (P-array)
        sboxes: Four substitution tables of 256 32-bit entries each
    """
    subkeys: Tuple[int, ...]
    sboxes: Tuple[Tuple[int, ...], ...]

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return fresh uint32 copies of the subkeys and tables for analysis."""
        return (np.array(self.subkeys, dtype=np.uint32),
                np.array(self.sboxes, dtype=np.uint32))


class _WorkingState:
    """Mutable tables the schedule overwrites in place while it encrypts."""

    def __init__(self):
        self.subkeys = P_ARRAY.tolist()
        self.sboxes = S_BOXES.tolist()


def derive_round_state(key: bytes) -> RoundState:
    """
    Expand a key into a RoundState.

    Args:
        key: The cipher key (1 to 72 bytes)

    Returns:
        The derived, immutable round state

    Raises:
        ConfigurationError: If the key is not bytes or its length is out of range
    """
    key = validate_key(key)

    # Fresh copies; the module level tables are read-only
    state = _WorkingState()

    reader = CyclicKeyReader(key)
    for i in range(SUBKEY_COUNT):
        state.subkeys[i] ^= reader.next_word()

    left, right = 0, 0
    for i in range(0, SUBKEY_COUNT, 2):
        left, right = encode_block(left, right, state)
        state.subkeys[i] = left
        state.subkeys[i + 1] = right

    for table in state.sboxes:
        for j in range(0, SBOX_ENTRIES, 2):
            left, right = encode_block(left, right, state)
            table[j] = left
            table[j + 1] = right

    logger.debug("Derived round state for a %d-byte key", len(key))
    return RoundState(subkeys=tuple(state.subkeys),
                      sboxes=tuple(tuple(table) for table in state.sboxes))


def generate_key(key_size: int = 16) -> bytes:
    """
    Generate a cryptographically secure random key.

    Args:
        key_size: Size of the key in bytes (default: 16)

    Returns:
        A random key as bytes
    """
    return validate_key(secrets.token_bytes(key_size))
