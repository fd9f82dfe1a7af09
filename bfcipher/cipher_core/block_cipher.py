"""
Block Cipher Implementation

This module binds the Blowfish Feistel network to a key and applies it
to 8-byte blocks. The word-level F function and the encode/decode
operations are re-exported from the key schedule package, which runs
the same network while deriving the round state.
"""

import struct
from typing import Tuple

from ..config.settings import BLOCK_SIZE
from ..key_schedule.blowfish_key_schedule import RoundState, derive_round_state
from ..key_schedule.feistel import round_function, encode_block, decode_block

_BLOCK_FORMAT = struct.Struct('>II')


def bytes_to_words(block: bytes) -> Tuple[int, int]:
    """Split an 8-byte block into its big-endian (left, right) halves."""
    return _BLOCK_FORMAT.unpack(block)


def words_to_bytes(left: int, right: int) -> bytes:
    """Join two 32-bit halves into an 8-byte big-endian block."""
    return _BLOCK_FORMAT.pack(left, right)


class BlowfishBlockCipher:
    """
    Blowfish block cipher bound to one key.

    The round state is derived once at construction and shared read-only
    by every block operation, so one instance can serve a whole stream.
    """

    block_size = BLOCK_SIZE

    def __init__(self, key: bytes):
        """
        Initialize the cipher with a key.

        Args:
            key: The secret key (1 to 72 bytes)

        Raises:
            ConfigurationError: If the key length is out of range
        """
        self._state = derive_round_state(key)

    @property
    def round_state(self) -> RoundState:
        return self._state

    def _check_block(self, block: bytes) -> None:
        if len(block) != self.block_size:
            raise ValueError(f"Block must be exactly {self.block_size} bytes, got {len(block)}")

    def encrypt_block(self, plaintext: bytes) -> bytes:
        """
        Encrypt a single 8-byte block.

        Args:
            plaintext: The plaintext block

        Returns:
            The ciphertext block
        """
        self._check_block(plaintext)
        return words_to_bytes(*encode_block(*bytes_to_words(plaintext), self._state))

    def decrypt_block(self, ciphertext: bytes) -> bytes:
        """
        Decrypt a single 8-byte block.

        Args:
            ciphertext: The ciphertext block

        Returns:
            The plaintext block
        """
        self._check_block(ciphertext)
        return words_to_bytes(*decode_block(*bytes_to_words(ciphertext), self._state))


def encrypt_block(plaintext: bytes, key: bytes) -> bytes:
    """
    Convenience function to encrypt a single block.

    Args:
        plaintext: The plaintext block (8 bytes)
        key: The cipher key (1 to 72 bytes)

    Returns:
        The encrypted ciphertext block
    """
    return BlowfishBlockCipher(key).encrypt_block(plaintext)


def decrypt_block(ciphertext: bytes, key: bytes) -> bytes:
    """
    Convenience function to decrypt a single block.

    Args:
        ciphertext: The ciphertext block (8 bytes)
        key: The cipher key (1 to 72 bytes)

    Returns:
        The decrypted plaintext block
    """
    return BlowfishBlockCipher(key).decrypt_block(ciphertext)


if __name__ == "__main__":
    # Classic all-zero key vector
    key = bytes(8)
    plaintext = bytes(8)

    ciphertext = encrypt_block(plaintext, key)
    print(f"Key: {key.hex()}")
    print(f"Plaintext: {plaintext.hex()}")
    print(f"Ciphertext: {ciphertext.hex()}")

    assert ciphertext.hex() == '4ef997456198dd78'
    assert decrypt_block(ciphertext, key) == plaintext
    print("Block cipher self-test passed!")
