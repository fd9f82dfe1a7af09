"""
Feistel Network

The 16-round Blowfish Feistel network on a 64-bit block held as two
32-bit halves. The key schedule runs it while the round state is still
being derived, and the block cipher runs it on the finished state, so
both take the state as an argument: any object with `subkeys` (18 words)
and `sboxes` (four 256-entry tables).
"""

from typing import Tuple

from .constants import ROUNDS, WORD_MASK


def round_function(word: int, state) -> int:
    """
    The Blowfish F function.

    The word is split into four bytes, most significant first; each byte
    indexes its own substitution table and the results are combined as
    ((S0[a] + S1[b]) ^ S2[c]) + S3[d], additions taken modulo 2**32.

    Args:
        word: A 32-bit input half
        state: Round state providing the four substitution tables

    Returns:
        The 32-bit output
    """
    s0, s1, s2, s3 = state.sboxes
    mixed = ((s0[word >> 24] + s1[(word >> 16) & 0xFF]) & WORD_MASK) ^ s2[(word >> 8) & 0xFF]
    return (mixed + s3[word & 0xFF]) & WORD_MASK


def encode_block(left: int, right: int, state) -> Tuple[int, int]:
    """
    Encrypt one block given as two 32-bit halves.

    Args:
        left: The most significant half of the block
        right: The least significant half of the block
        state: Round state (subkeys and substitution tables)

    Returns:
        The encrypted (left, right) pair
    """
    subkeys = state.subkeys
    for i in range(ROUNDS):
        left ^= subkeys[i]
        right ^= round_function(left, state)
        left, right = right, left
    left, right = right, left
    right ^= subkeys[ROUNDS]
    left ^= subkeys[ROUNDS + 1]
    return left, right


def decode_block(left: int, right: int, state) -> Tuple[int, int]:
    """
    Decrypt one block given as two 32-bit halves.

    Runs the same network as encode_block with the subkeys consumed from
    the last to the first.
    """
    subkeys = state.subkeys
    for i in range(ROUNDS + 1, 1, -1):
        left ^= subkeys[i]
        right ^= round_function(left, state)
        left, right = right, left
    left, right = right, left
    right ^= subkeys[1]
    left ^= subkeys[0]
    return left, right
