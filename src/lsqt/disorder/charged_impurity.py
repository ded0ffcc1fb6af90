"""Gaussian-screened charged impurities placed on random atom sites."""
from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from .. import REAL
from ..errors import ConfigurationError
from ..geometry.periodic import minimum_image
from ..rng import uniform_symmetric
from .sampling import sample_without_replacement


@dataclass(slots=True)
class Impurities:
    sites: np.ndarray
    charges: np.ndarray

    @property
    def count(self) -> int:
        return int(self.sites.size)


def place_impurities(rng: np.random.Generator, n_atoms: int, count: int, strength: float) -> Impurities:
    """Pick ``count`` distinct sites, then draw each charge uniform in ``[-W/2, W/2]``."""
    if count <= 0:
        raise ConfigurationError(f"impurity count must be positive, got {count}")
    if count > n_atoms:
        raise ConfigurationError(f"cannot place {count} impurities on {n_atoms} atoms")
    if not strength > 0:
        raise ConfigurationError(f"impurity strength must be positive, got {strength}")
    sites = sample_without_replacement(rng, n_atoms, count)
    charges = uniform_symmetric(rng, strength, count)
    return Impurities(sites=sites, charges=charges)


def charged_impurity_potential(positions: np.ndarray, impurities: Impurities, box, pbc,
                               screening_range: float, out: np.ndarray | None = None) -> np.ndarray:
    """Accumulate ``sum_i q_i exp(-r^2 / (2 xi^2))`` at every atom.

    ``r`` is the minimum-image distance between the atom and impurity ``i``.
    Cost is O(N * count); ``out`` is reset and overwritten when given.
    """
    if not screening_range > 0:
        raise ConfigurationError(f"screening range must be positive, got {screening_range}")
    positions = np.asarray(positions, dtype=REAL)
    if out is None:
        out = np.empty(positions.shape[0], dtype=REAL)
    out[:] = 0.0
    inv_two_xi2 = 1.0 / (2.0 * screening_range * screening_range)
    for site, charge in zip(impurities.sites.tolist(), impurities.charges.tolist()):
        d = minimum_image(positions - positions[site], box, pbc)
        out += charge * np.exp(-np.einsum('ij,ij->i', d, d) * inv_two_xi2)
    return out


def apply_charged_impurities(rng: np.random.Generator, positions: np.ndarray, box, pbc,
                             count: int, strength: float, screening_range: float,
                             out: np.ndarray | None = None) -> tuple[np.ndarray, Impurities]:
    """Place impurities and return ``(potential, impurities)``."""
    impurities = place_impurities(rng, positions.shape[0], count, strength)
    potential = charged_impurity_potential(positions, impurities, box, pbc, screening_range, out=out)
    logging.info(
        "Placed {} charged impurities (W={}, xi={}) on {} atoms".format(
            count, strength, screening_range, positions.shape[0])
    )
    return potential, impurities
