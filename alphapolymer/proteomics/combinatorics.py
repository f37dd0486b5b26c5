"""Binomial coefficients and combination unranking.

Implements the combinatorial number system: every integer rank in
[0, C(n, k)) maps to exactly one increasing k-subset of {0, ..., n-1}, so
any rank can be decoded on its own without enumerating the others.

Python integers are used for the exact, arbitrary-precision path. When the
whole index range fits safely in int64, batches are decoded by a
Numba-compiled kernel instead.

Examples
--------
>>> binomial_coefficient(5, 2)
10
>>> [unrank_combination(r, 3, 2) for r in range(3)]
[[0, 1], [0, 2], [1, 2]]
"""

from typing import List

import numba
import numpy as np

from ..exceptions import InvalidArgumentError

# Largest C(n, k) * k whose multiplicative evaluation cannot overflow int64
_INT64_LIMIT = 2 ** 63 - 1


def binomial_coefficient(n: int, k: int) -> int:
    """Exact C(n, k) by multiplicative accumulation (0 when k > n or k < 0)."""
    if k < 0 or n < 0 or k > n:
        return 0
    k = min(k, n - k)
    result = 1
    for i in range(k):
        # result == C(n, i) here, so the division is exact
        result = result * (n - i) // (i + 1)
    return result


def largest_v(a: int, b: int, x: int) -> int:
    """Largest v < a with C(v, b) <= x."""
    v = a - 1
    while binomial_coefficient(v, b) > x:
        v -= 1
    return v


def unrank_combination(rank: int, n: int, k: int) -> List[int]:
    """Decode ``rank`` into the increasing k-subset of {0, ..., n-1}.

    Ranks follow lexicographic order of the subsets: rank 0 is
    ``[0, 1, ..., k-1]`` and rank C(n, k) - 1 is ``[n-k, ..., n-1]``.

    Parameters
    ----------
    rank : int
        Index in [0, C(n, k))
    n : int
        Size of the ground set
    k : int
        Subset size

    Returns
    -------
    subset : List[int]
        Increasing element indices

    Raises
    ------
    InvalidArgumentError
        If ``rank`` is outside [0, C(n, k))
    """
    total = binomial_coefficient(n, k)
    if rank < 0 or rank >= total:
        raise InvalidArgumentError(f"Rank {rank} outside [0, {total}) for C({n}, {k})")

    # Work on the complement rank so the decoded indices come out increasing
    x = total - rank - 1
    a, b = n, k
    subset = []
    for _ in range(k):
        v = largest_v(a, b, x)
        subset.append(n - 1 - v)
        x -= binomial_coefficient(v, b)
        a, b = v, b - 1
    return subset


# =============================================================================
# Batch Unranking (Numba-Compiled)
# =============================================================================

@numba.jit(nopython=True, cache=True)
def _binomial_int64(n: int, k: int) -> int:
    if k < 0 or n < 0 or k > n:
        return 0
    if n - k < k:
        k = n - k
    result = 1
    for i in range(k):
        result = result * (n - i) // (i + 1)
    return result


@numba.jit(nopython=True, cache=True)
def unrank_combinations_numba(start: int, stop: int, n: int, k: int) -> np.ndarray:
    """Decode ranks [start, stop) into an (stop - start, k) index array.

    Only valid when C(n, k) * k fits in int64 (see ``unrank_combinations``).
    """
    total = _binomial_int64(n, k)
    count = stop - start
    out = np.empty((count, k), dtype=np.int64)

    for row in range(count):
        x = total - (start + row) - 1
        a = n
        b = k
        for j in range(k):
            v = a - 1
            while _binomial_int64(v, b) > x:
                v -= 1
            out[row, j] = n - 1 - v
            x -= _binomial_int64(v, b)
            a = v
            b -= 1

    return out


def unrank_combinations(start: int, stop: int, n: int, k: int) -> np.ndarray:
    """Decode a contiguous block of ranks into increasing k-subsets.

    Blocks are independent, so [0, C(n, k)) can be split across workers.

    Parameters
    ----------
    start, stop : int
        Half-open rank range within [0, C(n, k)]
    n, k : int
        Ground set size and subset size

    Returns
    -------
    subsets : np.ndarray (int64)
        Shape (stop - start, k); row i is the subset of rank start + i
    """
    total = binomial_coefficient(n, k)
    if not 0 <= start <= stop <= total:
        raise InvalidArgumentError(f"Rank range [{start}, {stop}) outside [0, {total}]")

    if total * max(k, 1) < _INT64_LIMIT:
        return unrank_combinations_numba(start, stop, n, k)

    subsets = np.empty((stop - start, k), dtype=np.int64)
    for row, rank in enumerate(range(start, stop)):
        subsets[row] = unrank_combination(rank, n, k)
    return subsets
