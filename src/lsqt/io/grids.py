"""Readers for the energy and time-step grids."""
from __future__ import annotations

from pathlib import Path
import logging

import numpy as np

from .. import REAL
from ..errors import ConfigurationError
from .tokens import TokenReader


def read_grid(path: str | Path, what: str = 'grid') -> np.ndarray:
    """Read a count ``M`` followed by ``M`` reals; return them as a read-only array."""
    reader = TokenReader.from_file(path)
    count = reader.next_int(f'{what} size')
    if count <= 0:
        raise ConfigurationError(f"{path}: {what} size must be positive, got {count}")
    values = np.array(reader.next_floats(count, f'{what} value'), dtype=REAL)
    values.setflags(write=False)
    logging.info("Read {} {} points from {}".format(count, what, path))
    return values


def read_energies(path: str | Path) -> np.ndarray:
    return read_grid(path, 'energy')


def read_time_steps(path: str | Path) -> np.ndarray:
    return read_grid(path, 'time step')
