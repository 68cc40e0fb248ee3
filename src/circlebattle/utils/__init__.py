"""Utility functions for the circle battle engine."""

from circlebattle.utils.rng import (
    RngFactory,
    fnv1a_64,
    fresh_rng,
    seeded_rng,
    uniform_below,
)

__all__ = [
    "RngFactory",
    "fnv1a_64",
    "fresh_rng",
    "seeded_rng",
    "uniform_below",
]
