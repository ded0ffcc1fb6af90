"""Uncorrelated on-site (Anderson) disorder."""
from __future__ import annotations

import logging

import numpy as np

from .. import REAL
from ..errors import ConfigurationError
from ..rng import uniform_symmetric


def anderson_potential(rng: np.random.Generator, n_atoms: int, strength: float,
                       out: np.ndarray | None = None) -> np.ndarray:
    """Draw i.i.d. on-site energies uniform in ``[-W/2, W/2]``.

    ``out`` is overwritten in place when given.
    """
    if not strength > 0:
        raise ConfigurationError(f"Anderson disorder strength must be positive, got {strength}")
    values = uniform_symmetric(rng, strength, n_atoms)
    if out is None:
        out = np.empty(n_atoms, dtype=REAL)
    out[:] = values
    logging.info("Anderson disorder W={} on {} atoms".format(strength, n_atoms))
    return out
