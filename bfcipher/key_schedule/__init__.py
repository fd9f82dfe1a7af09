"""
Key Schedule Package

This package holds the pi-derived constant tables, the Feistel network
and the key expansion that turns a 1 to 72 byte key into the round state
used by the block transform.
"""

from .constants import P_ARRAY, S_BOXES, BLOCK_SIZE, MIN_KEY_LENGTH, MAX_KEY_LENGTH
from .feistel import round_function, encode_block, decode_block
from .blowfish_key_schedule import CyclicKeyReader, RoundState, derive_round_state, generate_key

__all__ = [
    'P_ARRAY', 'S_BOXES', 'BLOCK_SIZE', 'MIN_KEY_LENGTH', 'MAX_KEY_LENGTH',
    'round_function', 'encode_block', 'decode_block',
    'CyclicKeyReader', 'RoundState', 'derive_round_state', 'generate_key',
]
