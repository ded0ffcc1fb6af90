"""Readers for the run's text input files."""
from .parameters import Parameters, VALID_KEYS, GENERAL_MODEL, LATTICE_MODEL, parse_parameter_lines, read_parameters
from .grids import read_grid, read_energies, read_time_steps
from .lattice import parse_lattice, read_lattice
from .general import Geometry, GeneralModelData, read_general_model

__all__ = [
    "Parameters",
    "VALID_KEYS",
    "GENERAL_MODEL",
    "LATTICE_MODEL",
    "parse_parameter_lines",
    "read_parameters",
    "read_grid",
    "read_energies",
    "read_time_steps",
    "parse_lattice",
    "read_lattice",
    "Geometry",
    "GeneralModelData",
    "read_general_model",
]
