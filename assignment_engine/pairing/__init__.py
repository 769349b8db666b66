"""Greedy room pairing."""

from .optimizer import PairingOptimizer, optimize

__all__ = ["PairingOptimizer", "optimize"]
