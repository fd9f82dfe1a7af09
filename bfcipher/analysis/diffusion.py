"""
Diffusion Analysis

This module measures statistical properties of a derived round state and
of the block cipher built on it: bit balance and differential behavior of
the key-dependent substitution tables, and the plaintext avalanche effect.
These are sanity checks on an implementation, not a cryptanalysis.
"""

import logging
from typing import Dict

import numpy as np

from ..cipher_core.block_cipher import BlowfishBlockCipher
from ..key_schedule.blowfish_key_schedule import RoundState
from ..config.settings import BLOCK_SIZE

logger = logging.getLogger(__name__)

WORD_BITS = 32


def sbox_bit_balance(table: np.ndarray) -> np.ndarray:
    """
    Fraction of entries with each output bit set.

    Args:
        table: One substitution table (256 uint32 entries)

    Returns:
        An array of 32 fractions, least significant bit first; 0.5 is ideal
    """
    table = np.asarray(table, dtype=np.uint32)
    bits = (table[:, None] >> np.arange(WORD_BITS, dtype=np.uint32)) & 1
    return bits.mean(axis=0)


def differential_uniformity(table: np.ndarray) -> int:
    """
    Largest number of inputs sharing one output difference for any input difference.

    Lower values indicate better resistance to differential cryptanalysis.
    Every pair (x, x ^ dx) is seen from both ends, so 2 is the minimum.

    Args:
        table: One substitution table (256 uint32 entries)

    Returns:
        The maximum count over all non-zero input differences
    """
    table = np.asarray(table, dtype=np.uint32)
    inputs = np.arange(table.size)
    worst = 0
    for dx in range(1, table.size):
        differences = table ^ table[inputs ^ dx]
        _, counts = np.unique(differences, return_counts=True)
        worst = max(worst, int(counts.max()))
    return worst


def evaluate_round_state(state: RoundState) -> Dict[str, float]:
    """
    Evaluate the four derived substitution tables of a round state.

    Args:
        state: The round state to evaluate

    Returns:
        A dictionary of scores
    """
    _, sboxes = state.as_arrays()
    balance = np.stack([sbox_bit_balance(table) for table in sboxes])
    duplicates = sum(table.size - np.unique(table).size for table in sboxes)

    return {
        'bit_balance_mean': float(balance.mean()),
        'bit_balance_min': float(balance.min()),
        'bit_balance_max': float(balance.max()),
        'duplicate_entries': int(duplicates),
        'differential': max(differential_uniformity(table) for table in sboxes),
    }


def avalanche_effect(cipher: BlowfishBlockCipher, samples: int = 64, seed: int = 1337) -> float:
    """
    Mean fraction of ciphertext bits that change when one plaintext bit flips.

    Args:
        cipher: The keyed block cipher to measure
        samples: Number of random plaintext blocks
        seed: Seed for the random generator

    Returns:
        The average fraction of flipped output bits; close to 0.5 is good
    """
    if samples < 1:
        raise ValueError("At least one sample is required")

    rng = np.random.default_rng(seed)
    plaintexts = rng.integers(0, 256, size=(samples, BLOCK_SIZE), dtype=np.uint8)
    positions = rng.integers(0, BLOCK_SIZE * 8, size=samples)

    flipped_bits = 0
    for block, position in zip(plaintexts, positions):
        altered = block.copy()
        altered[position // 8] ^= np.uint8(0x80 >> (position % 8))

        original = np.frombuffer(cipher.encrypt_block(block.tobytes()), dtype=np.uint8)
        changed = np.frombuffer(cipher.encrypt_block(altered.tobytes()), dtype=np.uint8)
        flipped_bits += int(np.unpackbits(original ^ changed).sum())

    score = flipped_bits / (samples * BLOCK_SIZE * 8)
    logger.info("Avalanche over %d samples: %.4f", samples, score)
    return score


if __name__ == "__main__":
    cipher = BlowfishBlockCipher(b"analysis example key")
    metrics = evaluate_round_state(cipher.round_state)

    print(f"Bit balance: {metrics['bit_balance_mean']:.4f} "
          f"(min {metrics['bit_balance_min']:.4f}, max {metrics['bit_balance_max']:.4f})")
    print(f"Duplicate table entries: {metrics['duplicate_entries']}")
    print(f"Differential uniformity: {metrics['differential']}")
    print(f"Avalanche: {avalanche_effect(cipher):.4f}")
