"""
Block Modes Package

This package applies the block cipher to streams of arbitrary length:
PKCS#7 padding plus the ECB, CBC and CFB modes of operation.
"""

from .padding import pad_pkcs7, unpad_pkcs7
from .stream_modes import (
    Mode, xor_cycle,
    encrypt_ecb, decrypt_ecb, encrypt_cbc, decrypt_cbc, encrypt_cfb, decrypt_cfb,
    encrypt_stream, decrypt_stream, encrypt, decrypt,
)

__all__ = [
    'pad_pkcs7', 'unpad_pkcs7', 'Mode', 'xor_cycle',
    'encrypt_ecb', 'decrypt_ecb', 'encrypt_cbc', 'decrypt_cbc', 'encrypt_cfb', 'decrypt_cfb',
    'encrypt_stream', 'decrypt_stream', 'encrypt', 'decrypt',
]
