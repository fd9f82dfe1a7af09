"""
PKCS#7 Padding

Padding for the block modes, built on Cryptodome's padding utilities.
Padding always adds between 1 and block_size bytes, each holding the
number of bytes added.

Removal is fail-open: a final block whose trailing bytes do not form valid
padding is returned unchanged instead of raising. This is a known
weakness: it neither detects corruption nor hides padding validity from
a timing observer.
"""

import logging

from Cryptodome.Util.Padding import pad, unpad

from ..config.settings import BLOCK_SIZE

logger = logging.getLogger(__name__)


def _check_block_size(block_size: int) -> None:
    # One padding byte must be able to hold the block size
    if not 1 <= block_size <= 255:
        raise ValueError(f"PKCS#7 block size must be between 1 and 255, got {block_size}")


def pad_pkcs7(message: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """
    Pad a message to a multiple of the block size.

    Args:
        message: The data to pad (typically the final, short chunk)
        block_size: Block size in bytes

    Returns:
        The message followed by N bytes of value N, 1 <= N <= block_size
    """
    _check_block_size(block_size)
    return pad(bytes(message), block_size, style='pkcs7')


def unpad_pkcs7(block: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """
    Strip PKCS#7 padding from the final block if it is well formed.

    Args:
        block: The final decrypted block (or any data ending with it)
        block_size: Block size in bytes

    Returns:
        The data without padding, or the data unchanged when the trailing
        bytes are not valid padding
    """
    _check_block_size(block_size)
    try:
        return unpad(bytes(block), block_size, style='pkcs7')
    except ValueError as e:
        if block:
            logger.debug("Leaving final block intact: %s", e)
        return bytes(block)
