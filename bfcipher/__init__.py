"""
bfcipher - Blowfish Block Cipher Library

This library implements the Blowfish 64-bit block cipher with variable
length keys (1 to 72 bytes) and streaming modes of operation.

Key Features:
- Pi-derived constant tables and the standard Blowfish key schedule
- 16-round Feistel block transform
- ECB, CBC and CFB streaming modes with PKCS#7 padding
- Hex key/IV adapter and a command line tool
- Diffusion analysis of derived round states

The library provides confidentiality only; ciphertext is not authenticated.
"""

__version__ = '0.1.0'
__author__ = 'bfcipher Team'

from .config import ConfigurationError
from .cipher_core import BlowfishBlockCipher
from .block_modes import Mode, encrypt, decrypt, encrypt_stream, decrypt_stream

__all__ = [
    'ConfigurationError', 'BlowfishBlockCipher',
    'Mode', 'encrypt', 'decrypt', 'encrypt_stream', 'decrypt_stream',
]
