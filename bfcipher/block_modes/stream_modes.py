"""
Streaming Block Modes

This module drives the Blowfish block cipher over byte streams in ECB, CBC
and CFB modes. Each mode function reads the source one block at a time
until it reports end of stream, writes every output block to the sink as
soon as it is produced and flushes the sink when done.

ECB and CBC pad the final plaintext block with PKCS#7 (an input that is an
exact multiple of the block size gains a whole padding block) and strip
the padding from the last decrypted block. CFB is a stream mode: the
ciphertext has exactly the plaintext length.
"""

import io
import logging
from itertools import cycle
from typing import BinaryIO, Optional, Tuple, Union

from ..cipher_core.block_cipher import BlowfishBlockCipher
from ..config.settings import BLOCK_SIZE, ConfigurationError, Mode, validate_iv, validate_key
from .padding import pad_pkcs7, unpad_pkcs7

logger = logging.getLogger(__name__)


def xor_cycle(data: bytes, key: bytes) -> bytes:
    """XOR each byte of data with the matching byte of key, repeating key as needed."""
    return bytes(a ^ b for a, b in zip(data, cycle(key)))


def _read_block(source: BinaryIO) -> bytes:
    # Collect a full block unless the source runs dry first
    chunk = bytearray()
    while len(chunk) < BLOCK_SIZE:
        data = source.read(BLOCK_SIZE - len(chunk))
        if not data:
            break
        chunk += data
    return bytes(chunk)


def _warn_trailing(chunk: bytes) -> None:
    if chunk:
        logger.warning("Ignoring %d trailing ciphertext bytes that do not fill a block", len(chunk))


def encrypt_ecb(source: BinaryIO, key: bytes, sink: BinaryIO) -> int:
    """
    Encrypt a stream in ECB mode.

    Args:
        source: Readable binary stream of plaintext
        key: The cipher key (1 to 72 bytes)
        sink: Writable binary stream receiving the ciphertext

    Returns:
        The number of blocks written
    """
    cipher = BlowfishBlockCipher(key)
    blocks = 0
    while True:
        chunk = _read_block(source)
        final = len(chunk) < BLOCK_SIZE
        if final:
            chunk = pad_pkcs7(chunk)
        sink.write(cipher.encrypt_block(chunk))
        blocks += 1
        if final:
            break
    sink.flush()
    logger.info("ECB encryption finished: %d blocks", blocks)
    return blocks


def decrypt_ecb(source: BinaryIO, key: bytes, sink: BinaryIO) -> int:
    """
    Decrypt a stream in ECB mode, removing padding from the last block.

    Returns:
        The number of blocks decrypted
    """
    cipher = BlowfishBlockCipher(key)
    blocks = 0
    chunk = _read_block(source)
    while len(chunk) == BLOCK_SIZE:
        decoded = cipher.decrypt_block(chunk)
        chunk = _read_block(source)
        if len(chunk) < BLOCK_SIZE:
            decoded = unpad_pkcs7(decoded)
        sink.write(decoded)
        blocks += 1
    _warn_trailing(chunk)
    sink.flush()
    logger.info("ECB decryption finished: %d blocks", blocks)
    return blocks


def encrypt_cbc(source: BinaryIO, key: bytes, iv: bytes, sink: BinaryIO) -> int:
    """
    Encrypt a stream in CBC mode.

    Args:
        source: Readable binary stream of plaintext
        key: The cipher key (1 to 72 bytes)
        iv: Initialization vector (8 bytes)
        sink: Writable binary stream receiving the ciphertext

    Returns:
        The number of blocks written
    """
    cipher = BlowfishBlockCipher(key)
    previous = validate_iv(iv)
    blocks = 0
    while True:
        chunk = _read_block(source)
        final = len(chunk) < BLOCK_SIZE
        if final:
            chunk = pad_pkcs7(chunk)
        previous = cipher.encrypt_block(xor_cycle(chunk, previous))
        sink.write(previous)
        blocks += 1
        if final:
            break
    sink.flush()
    logger.info("CBC encryption finished: %d blocks", blocks)
    return blocks


def decrypt_cbc(source: BinaryIO, key: bytes, iv: bytes, sink: BinaryIO) -> int:
    """
    Decrypt a stream in CBC mode, removing padding from the last block.

    The chaining value is the ciphertext block as read, before any padding
    is stripped from its plaintext.

    Returns:
        The number of blocks decrypted
    """
    cipher = BlowfishBlockCipher(key)
    previous = validate_iv(iv)
    blocks = 0
    chunk = _read_block(source)
    while len(chunk) == BLOCK_SIZE:
        decoded = xor_cycle(cipher.decrypt_block(chunk), previous)
        previous = chunk
        chunk = _read_block(source)
        if len(chunk) < BLOCK_SIZE:
            decoded = unpad_pkcs7(decoded)
        sink.write(decoded)
        blocks += 1
    _warn_trailing(chunk)
    sink.flush()
    logger.info("CBC decryption finished: %d blocks", blocks)
    return blocks


def encrypt_cfb(source: BinaryIO, key: bytes, iv: bytes, sink: BinaryIO) -> int:
    """
    Encrypt a stream in CFB mode (full-block feedback, no padding).

    A short final read uses only as many keystream bytes as it holds.

    Returns:
        The number of blocks, full or partial, written
    """
    cipher = BlowfishBlockCipher(key)
    previous = validate_iv(iv)
    blocks = 0
    while True:
        chunk = _read_block(source)
        if chunk:
            previous = xor_cycle(chunk, cipher.encrypt_block(previous))
            sink.write(previous)
            blocks += 1
        if len(chunk) < BLOCK_SIZE:
            break
    sink.flush()
    logger.info("CFB encryption finished: %d blocks", blocks)
    return blocks


def decrypt_cfb(source: BinaryIO, key: bytes, iv: bytes, sink: BinaryIO) -> int:
    """
    Decrypt a stream in CFB mode.

    The keystream comes from the forward transform of the previous
    ciphertext block, exactly as during encryption.

    Returns:
        The number of blocks, full or partial, written
    """
    cipher = BlowfishBlockCipher(key)
    previous = validate_iv(iv)
    blocks = 0
    while True:
        chunk = _read_block(source)
        if chunk:
            sink.write(xor_cycle(chunk, cipher.encrypt_block(previous)))
            previous = chunk
            blocks += 1
        if len(chunk) < BLOCK_SIZE:
            break
    sink.flush()
    logger.info("CFB decryption finished: %d blocks", blocks)
    return blocks


def _prepare(mode, key: bytes, iv: Optional[bytes]) -> Tuple[Mode, bytes, Optional[bytes]]:
    # Reject bad parameters before touching either stream
    mode = Mode.parse(mode)
    key = validate_key(key)
    if mode.requires_iv:
        iv = validate_iv(iv)
    elif iv is not None:
        logger.warning("ECB mode does not use an IV; ignoring it")
        iv = None
    return mode, key, iv


def encrypt_stream(mode: Union[str, Mode], source: BinaryIO, sink: BinaryIO,
                   key: bytes, iv: Optional[bytes] = None) -> int:
    """
    Encrypt a stream with the named mode.

    Args:
        mode: 'ecb', 'cbc', 'cfb' or a Mode member
        source: Readable binary stream of plaintext
        sink: Writable binary stream receiving the ciphertext
        key: The cipher key (1 to 72 bytes)
        iv: Initialization vector (8 bytes), required for CBC and CFB

    Returns:
        The number of blocks written

    Raises:
        ConfigurationError: If the mode, key or IV is invalid
        OSError: If reading or writing fails
    """
    mode, key, iv = _prepare(mode, key, iv)
    if mode is Mode.ECB:
        return encrypt_ecb(source, key, sink)
    if mode is Mode.CBC:
        return encrypt_cbc(source, key, iv, sink)
    if mode is Mode.CFB:
        return encrypt_cfb(source, key, iv, sink)
    raise ConfigurationError(f"No encryptor for mode {mode}")


def decrypt_stream(mode: Union[str, Mode], source: BinaryIO, sink: BinaryIO,
                   key: bytes, iv: Optional[bytes] = None) -> int:
    """
    Decrypt a stream with the named mode.

    Arguments and errors are as for encrypt_stream.
    """
    mode, key, iv = _prepare(mode, key, iv)
    if mode is Mode.ECB:
        return decrypt_ecb(source, key, sink)
    if mode is Mode.CBC:
        return decrypt_cbc(source, key, iv, sink)
    if mode is Mode.CFB:
        return decrypt_cfb(source, key, iv, sink)
    raise ConfigurationError(f"No decryptor for mode {mode}")


def encrypt(plaintext: bytes, key: bytes, mode: Union[str, Mode] = 'cbc',
            iv: Optional[bytes] = None) -> bytes:
    """
    Encrypt an in-memory message.

    Args:
        plaintext: The data to encrypt
        key: The cipher key (1 to 72 bytes)
        mode: Mode of operation (default: CBC)
        iv: Initialization vector, required for CBC and CFB

    Returns:
        The ciphertext
    """
    sink = io.BytesIO()
    encrypt_stream(mode, io.BytesIO(plaintext), sink, key, iv)
    return sink.getvalue()


def decrypt(ciphertext: bytes, key: bytes, mode: Union[str, Mode] = 'cbc',
            iv: Optional[bytes] = None) -> bytes:
    """
    Decrypt an in-memory message.

    Args:
        ciphertext: The data to decrypt
        key: The cipher key (1 to 72 bytes)
        mode: Mode of operation (default: CBC)
        iv: Initialization vector, required for CBC and CFB

    Returns:
        The plaintext
    """
    sink = io.BytesIO()
    decrypt_stream(mode, io.BytesIO(ciphertext), sink, key, iv)
    return sink.getvalue()


if __name__ == "__main__":
    key = bytes.fromhex('0123456789ABCDEFF0E1D2C3B4A59687')
    iv = bytes.fromhex('FEDCBA9876543210')
    message = b"7654321 Now is the time for \x00"

    for mode in Mode:
        mode_iv = iv if mode.requires_iv else None
        ciphertext = encrypt(message, key, mode, mode_iv)
        print(f"{mode.name}: {ciphertext.hex()}")
        assert decrypt(ciphertext, key, mode, mode_iv) == message

    print("Mode tests completed successfully!")
