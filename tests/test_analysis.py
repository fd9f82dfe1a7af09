import numpy as np
import pytest

from bfcipher.analysis import (
    sbox_bit_balance, differential_uniformity, evaluate_round_state, avalanche_effect,
)
from bfcipher.cipher_core import BlowfishBlockCipher
from bfcipher.key_schedule import S_BOXES, derive_round_state


def test_bit_balance_of_constant_tables():
    balance = sbox_bit_balance(S_BOXES[0])
    assert balance.shape == (32,)
    assert np.all((balance > 0.35) & (balance < 0.65))


def test_bit_balance_extremes():
    assert np.all(sbox_bit_balance(np.zeros(256, dtype=np.uint32)) == 0.0)
    assert np.all(sbox_bit_balance(np.full(256, 0xFFFFFFFF, dtype=np.uint32)) == 1.0)


def test_differential_uniformity_lower_bound():
    assert differential_uniformity(S_BOXES[2]) >= 2


def test_differential_uniformity_of_linear_table():
    # A linear table maps every input difference to a single output difference
    assert differential_uniformity(np.arange(256, dtype=np.uint32)) == 256


def test_evaluate_round_state():
    metrics = evaluate_round_state(derive_round_state(b"analysis"))
    assert set(metrics) == {
        'bit_balance_mean', 'bit_balance_min', 'bit_balance_max',
        'duplicate_entries', 'differential',
    }
    assert 0.45 < metrics['bit_balance_mean'] < 0.55
    assert metrics['bit_balance_min'] <= metrics['bit_balance_mean'] <= metrics['bit_balance_max']
    assert metrics['duplicate_entries'] >= 0
    assert metrics['differential'] >= 2


def test_avalanche_is_near_half():
    score = avalanche_effect(BlowfishBlockCipher(b"avalanche"), samples=128)
    assert 0.4 < score < 0.6


def test_avalanche_is_reproducible():
    cipher = BlowfishBlockCipher(b"seeded")
    assert avalanche_effect(cipher, samples=16, seed=7) == avalanche_effect(cipher, samples=16, seed=7)


def test_avalanche_requires_samples():
    with pytest.raises(ValueError):
        avalanche_effect(BlowfishBlockCipher(b"k"), samples=0)
