"""Random-phase initial states for stochastic trace estimation.

Amplitudes have unit modulus; normalisation by the number of atoms and
random vectors is left to the routine that sums the moments.
"""
from __future__ import annotations

import numpy as np

from .. import REAL
from ..errors import ConfigurationError

TWO_PI = 2.0 * np.pi


def initialize_state(rng: np.random.Generator, state_real: np.ndarray, state_imag: np.ndarray,
                     spin: bool = False) -> None:
    """Overwrite ``state_real``/``state_imag`` with a random-phase vector.

    Without spin every atom gets ``(cos t, sin t)`` with ``t`` uniform in
    ``[0, 2 pi)``. With spin, atoms pair up as ``(2k, 2k+1)``: two phases are
    drawn per pair in index order, the even atom takes the first and the odd
    atom is set to zero.
    """
    n = state_real.shape[0]
    if state_imag.shape[0] != n:
        raise ValueError(f"state buffers differ in length: {n} != {state_imag.shape[0]}")
    if spin:
        if n % 2:
            raise ConfigurationError(f"spin states need an even number of atoms, got {n}")
        phases = rng.uniform(0.0, TWO_PI, size=(n // 2, 2))
        state_real[0::2] = np.cos(phases[:, 0])
        state_imag[0::2] = np.sin(phases[:, 0])
        state_real[1::2] = 0.0
        state_imag[1::2] = 0.0
    else:
        phases = rng.uniform(0.0, TWO_PI, size=n)
        state_real[:] = np.cos(phases)
        state_imag[:] = np.sin(phases)


def random_state(rng: np.random.Generator, n_atoms: int, spin: bool = False) -> tuple[np.ndarray, np.ndarray]:
    state_real = np.empty(n_atoms, dtype=REAL)
    state_imag = np.empty(n_atoms, dtype=REAL)
    initialize_state(rng, state_real, state_imag, spin=spin)
    return state_real, state_imag
