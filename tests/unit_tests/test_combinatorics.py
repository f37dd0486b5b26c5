"""Unit tests for binomial coefficients and combination unranking."""

from itertools import combinations
from math import comb

import numpy as np
import pytest

from alphapolymer.exceptions import InvalidArgumentError
from alphapolymer.proteomics.combinatorics import (
    binomial_coefficient,
    largest_v,
    unrank_combination,
    unrank_combinations,
    unrank_combinations_numba,
)


class TestBinomialCoefficient:
    """Test exact C(n, k)."""

    def test_small_values(self):
        assert binomial_coefficient(5, 2) == 10
        assert binomial_coefficient(5, 0) == 1
        assert binomial_coefficient(5, 5) == 1
        assert binomial_coefficient(0, 0) == 1

    def test_out_of_range(self):
        assert binomial_coefficient(3, 4) == 0
        assert binomial_coefficient(3, -1) == 0

    def test_matches_math_comb(self):
        for n in range(25):
            for k in range(n + 1):
                assert binomial_coefficient(n, k) == comb(n, k)

    def test_large_values_exact(self):
        """No overflow beyond 64 bits."""
        assert binomial_coefficient(100, 50) == 100891344545564193334812497256
        assert binomial_coefficient(200, 100) == comb(200, 100)


class TestLargestV:
    """Test the combinadic helper."""

    def test_largest_v(self):
        # C(4, 2) = 6 <= 7 < C(5, 2) = 10
        assert largest_v(6, 2, 7) == 4
        assert largest_v(6, 2, 0) == 1


class TestUnrankCombination:
    """Test single-rank decoding."""

    def test_lexicographic_order(self):
        for n, k in [(3, 2), (6, 3), (7, 1), (5, 5)]:
            decoded = [tuple(unrank_combination(r, n, k)) for r in range(comb(n, k))]
            assert decoded == list(combinations(range(n), k))

    def test_first_and_last(self):
        assert unrank_combination(0, 10, 4) == [0, 1, 2, 3]
        assert unrank_combination(comb(10, 4) - 1, 10, 4) == [6, 7, 8, 9]

    def test_empty_subset(self):
        assert unrank_combination(0, 4, 0) == []

    def test_rank_out_of_range(self):
        with pytest.raises(InvalidArgumentError):
            unrank_combination(3, 3, 2)
        with pytest.raises(InvalidArgumentError):
            unrank_combination(-1, 3, 2)
        with pytest.raises(InvalidArgumentError):
            unrank_combination(0, 2, 3)


class TestUnrankCombinations:
    """Test batch decoding."""

    def test_matches_itertools(self):
        rows = unrank_combinations(0, comb(8, 3), 8, 3)
        assert rows.shape == (56, 3)
        assert [tuple(row) for row in rows.tolist()] == list(combinations(range(8), 3))

    def test_numba_kernel_matches_python(self):
        rows = unrank_combinations_numba(5, 25, 9, 4)
        for offset, row in enumerate(rows.tolist()):
            assert row == unrank_combination(5 + offset, 9, 4)

    def test_ranges_partition(self):
        """Disjoint blocks concatenate to the full enumeration."""
        full = unrank_combinations(0, 120, 10, 3)
        blocks = [unrank_combinations(a, b, 10, 3) for a, b in [(0, 7), (7, 7), (7, 64), (64, 120)]]
        assert np.array_equal(np.concatenate(blocks), full)

    def test_empty_range(self):
        assert unrank_combinations(4, 4, 6, 2).shape == (0, 2)

    def test_beyond_int64(self):
        """Falls back to exact decoding when C(n, k) exceeds int64."""
        total = comb(200, 100)
        rows = unrank_combinations(0, 2, 200, 100)
        assert rows[0].tolist() == list(range(100))
        assert rows[1].tolist() == list(range(99)) + [100]

        last = unrank_combinations(total - 1, total, 200, 100)
        assert last[0].tolist() == list(range(100, 200))

    def test_invalid_range(self):
        with pytest.raises(InvalidArgumentError):
            unrank_combinations(0, 11, 5, 2)
        with pytest.raises(InvalidArgumentError):
            unrank_combinations(5, 4, 5, 2)
