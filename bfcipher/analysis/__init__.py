"""
Analysis Package

This package measures the diffusion of the cipher and the statistics of
its key-dependent substitution tables.
"""

from .diffusion import sbox_bit_balance, differential_uniformity, evaluate_round_state, avalanche_effect

__all__ = ['sbox_bit_balance', 'differential_uniformity', 'evaluate_round_state', 'avalanche_effect']
