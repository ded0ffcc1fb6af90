"""Minimum-image helpers for orthorhombic boxes."""
from __future__ import annotations

import numpy as np


def minimum_image(delta, box, pbc) -> np.ndarray:
    """Per-axis separation under the minimum-image convention.

    ``delta`` has shape (..., 3). On a periodic axis a separation ``d`` larger
    than half the box length ``L`` becomes ``L - d``. Returns absolute values.
    """
    d = np.abs(np.asarray(delta, dtype=float))
    box = np.asarray(box, dtype=float)
    periodic = np.asarray(pbc, dtype=bool)
    wrap = periodic & (d > 0.5 * box)
    return np.where(wrap, box - d, d)


def wrap_displacement(delta, box, pbc) -> np.ndarray:
    """Signed minimum-image displacement, shape (..., 3)."""
    delta = np.asarray(delta, dtype=float)
    box = np.asarray(box, dtype=float)
    periodic = np.asarray(pbc, dtype=bool)
    shift = np.where(periodic, box * np.round(delta / np.where(periodic, box, 1.0)), 0.0)
    return delta - shift
