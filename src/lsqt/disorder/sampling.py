"""Sampling without replacement through an explicit Fisher-Yates shuffle."""
from __future__ import annotations

import numpy as np

from ..errors import ConfigurationError


def permutation(rng: np.random.Generator, n: int) -> np.ndarray:
    """Uniform random permutation of ``0..n-1``.

    For ``i = 0..n-1`` an index ``j`` is drawn uniformly from ``[i, n)`` and
    entries ``i`` and ``j`` are swapped. The ``n`` draws are taken from ``rng``
    in ascending ``i`` order.
    """
    perm = np.arange(n, dtype=np.int64)
    if n == 0:
        return perm
    picks = rng.integers(np.arange(n), n)
    for i, j in enumerate(picks.tolist()):
        perm[i], perm[j] = perm[j], perm[i]
    return perm


def sample_without_replacement(rng: np.random.Generator, n: int, k: int) -> np.ndarray:
    """First ``k`` entries of a Fisher-Yates permutation of ``0..n-1``."""
    if not 0 <= k <= n:
        raise ConfigurationError(f"cannot draw {k} distinct indices out of {n}")
    return permutation(rng, n)[:k]
