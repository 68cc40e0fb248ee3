"""Tests for the hashing and generator helpers.

Tests cover:
- FNV-1a reference values
- Determinism of seeded generators
- Independence of fresh generators
- Validation in uniform_below
"""

import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from circlebattle.utils.rng import (
    FNV_OFFSET_BASIS_64,
    fnv1a_64,
    fresh_rng,
    seeded_rng,
    uniform_below,
)


class TestFnv1a64:
    """Tests for fnv1a_64."""

    def test_empty_string_is_offset_basis(self):
        assert fnv1a_64("") == FNV_OFFSET_BASIS_64

    def test_reference_vectors(self):
        assert fnv1a_64("a") == 0xAF63DC4C8601EC8C
        assert fnv1a_64("foobar") == 0x85944171F73967E8

    def test_hashes_utf8_bytes(self):
        assert fnv1a_64("é") != fnv1a_64("e")

    @given(st.text())
    def test_result_fits_in_64_bits(self, text):
        value = fnv1a_64(text)
        assert 0 <= value < 2**64


class TestSeededRng:
    """Tests for seeded_rng."""

    def test_same_key_same_sequence(self):
        first = seeded_rng("card-42")
        second = seeded_rng("card-42")
        assert [first.random() for _ in range(5)] == [second.random() for _ in range(5)]

    def test_different_keys_diverge(self):
        assert seeded_rng("card-1").random() != seeded_rng("card-2").random()


class TestFreshRng:
    """Tests for fresh_rng."""

    def test_returns_new_instances(self):
        first = fresh_rng()
        second = fresh_rng()
        assert isinstance(first, random.Random)
        assert first is not second


class TestUniformBelow:
    """Tests for uniform_below."""

    @given(st.integers(min_value=1, max_value=10_000), st.integers())
    def test_within_bounds(self, upper, seed):
        value = uniform_below(random.Random(seed), upper)
        assert 0 <= value < upper

    @pytest.mark.parametrize("upper", [0, -1])
    def test_non_positive_upper_raises(self, upper):
        with pytest.raises(ValueError, match="upper must be positive"):
            uniform_below(random.Random(1), upper)
