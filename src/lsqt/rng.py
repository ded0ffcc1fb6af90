"""Random number source shared by all sampling routines of one run.

A single :class:`numpy.random.Generator` is created per run and passed
explicitly to every routine that draws from it. Routines consume it in a
fixed order, so a fixed seed reproduces the whole model.
"""
from __future__ import annotations

import logging

import numpy as np


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Return the generator for a run.

    ``seed=None`` draws fresh entropy from the operating system; any integer
    gives a reproducible stream (used by tests and debug runs).
    """
    if seed is None:
        logging.debug("Seeding random generator from system entropy")
    else:
        logging.info("Seeding random generator with fixed seed {}".format(seed))
    return np.random.default_rng(seed)


def uniform_symmetric(rng: np.random.Generator, width: float, size: int) -> np.ndarray:
    """Draw ``size`` i.i.d. values uniform in ``[-width/2, +width/2]``."""
    half = 0.5 * float(width)
    return rng.uniform(-half, half, size=size)
