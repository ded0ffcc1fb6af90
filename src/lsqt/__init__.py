"""Lattice model construction for linear-scaling quantum transport.

Builds the padded neighbor table of a tight-binding Hamiltonian, applies
vacancy / Anderson / charged-impurity disorder and produces the random
initial states consumed by Chebyshev-moment propagation.
"""
import numpy as np

# Build-time floating-point precision of every real array in the model.
REAL = np.float64

from .errors import ModelBuildError, ConfigurationError, InputFileError
from .rng import make_rng
from .base.neighbor_table import NeighborTable
from .base.model import Model

__all__ = [
    "REAL",
    "ModelBuildError",
    "ConfigurationError",
    "InputFileError",
    "make_rng",
    "NeighborTable",
    "Model",
]
