"""
Cipher Core Package

This package implements the Blowfish block transform: the F function, the
16-round Feistel encode/decode operations and a block cipher object bound
to one key.
"""

from .block_cipher import (
    BlowfishBlockCipher, encrypt_block, decrypt_block,
    encode_block, decode_block, round_function,
)

__all__ = [
    'BlowfishBlockCipher', 'encrypt_block', 'decrypt_block',
    'encode_block', 'decode_block', 'round_function',
]
