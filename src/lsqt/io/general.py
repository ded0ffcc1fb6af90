"""Readers for general (non-lattice) models given as explicit neighbor lists.

A general model directory holds:

- ``neighbor.in``: ``N max_neighbor``, then per atom ``count j_1 ... j_count``
- ``hopping.in``: per atom, per listed neighbor, ``Re Im``
- ``potential.in`` (optional): ``N`` on-site energies
- ``xyz.in`` (needed for VAC/MSD): ``N``, ``box_x box_y box_z pbc_x pbc_y pbc_z
  transport_axis`` and ``N`` lines ``x y z``
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging

import numpy as np

from .. import REAL
from ..base.neighbor_table import NeighborTable
from ..errors import ConfigurationError
from ..geometry.periodic import wrap_displacement
from .tokens import TokenReader

NEIGHBOR_FILE = 'neighbor.in'
HOPPING_FILE = 'hopping.in'
POTENTIAL_FILE = 'potential.in'
XYZ_FILE = 'xyz.in'


@dataclass(slots=True)
class Geometry:
    """Atom positions with an orthorhombic box."""
    positions: np.ndarray  # (N,3)
    box: np.ndarray
    pbc: tuple
    transport_axis: int

    @property
    def natoms(self) -> int:
        return int(self.positions.shape[0])


@dataclass(slots=True)
class GeneralModelData:
    table: NeighborTable
    potential: np.ndarray
    geometry: Geometry | None = None


def read_neighbors(path: str | Path) -> NeighborTable:
    reader = TokenReader.from_file(path)
    n_atoms = reader.next_int('number of atoms')
    max_neighbor = reader.next_int('max neighbor')
    if n_atoms <= 0 or max_neighbor <= 0:
        raise ConfigurationError(
            f"{path}: number of atoms and max neighbor must be positive, got {n_atoms} {max_neighbor}"
        )
    table = NeighborTable.empty(n_atoms, max_neighbor)
    for n in range(n_atoms):
        count = reader.next_int(f'neighbor count of atom {n}')
        if not 0 <= count <= max_neighbor:
            raise ConfigurationError(
                f"{path}: atom {n} lists {count} neighbors, allowed range is [0, {max_neighbor}]"
            )
        targets = reader.next_ints(count, f'neighbor of atom {n}')
        for target in targets:
            if not 0 <= target < n_atoms:
                raise ConfigurationError(f"{path}: atom {n} has neighbor {target} outside [0, {n_atoms})")
        table.neighbor_number[n] = count
        table.neighbor_list[n, :count] = targets
    return table


def read_hoppings(path: str | Path, table: NeighborTable) -> None:
    """Fill the hopping arrays of ``table`` in neighbor-file order."""
    reader = TokenReader.from_file(path)
    for n in range(table.number_of_atoms):
        for slot in range(int(table.neighbor_number[n])):
            table.hopping_real[n, slot] = reader.next_float(f'hopping (real) of atom {n}')
            table.hopping_imag[n, slot] = reader.next_float(f'hopping (imag) of atom {n}')


def read_potential(path: str | Path, n_atoms: int) -> np.ndarray:
    reader = TokenReader.from_file(path)
    return np.array(reader.next_floats(n_atoms, 'on-site potential'), dtype=REAL)


def read_xyz(path: str | Path) -> Geometry:
    reader = TokenReader.from_file(path)
    n_atoms = reader.next_int('number of atoms')
    if n_atoms <= 0:
        raise ConfigurationError(f"{path}: number of atoms must be positive, got {n_atoms}")
    box = np.array(reader.next_floats(3, 'box length'), dtype=REAL)
    flags = reader.next_ints(3, 'periodic flag')
    axis = reader.next_int('transport axis')
    if any(flag not in (0, 1) for flag in flags):
        raise ConfigurationError(f"{path}: periodic flags must be 0 or 1, got {flags}")
    if axis not in (0, 1, 2):
        raise ConfigurationError(f"{path}: transport axis must be 0, 1 or 2, got {axis}")
    if not flags[axis]:
        raise ConfigurationError(f"{path}: transport axis {axis} must be periodic")
    if np.any(box <= 0):
        raise ConfigurationError(f"{path}: box lengths must be positive, got {box.tolist()}")
    positions = np.array(
        [reader.next_floats(3, f'position of atom {n}') for n in range(n_atoms)], dtype=REAL
    )
    return Geometry(positions=positions, box=box, pbc=tuple(bool(f) for f in flags), transport_axis=axis)


def assign_displacements(table: NeighborTable, geometry: Geometry) -> None:
    """Set ``table.xx`` to the minimum-image target-minus-source separation."""
    if geometry.natoms != table.number_of_atoms:
        raise ConfigurationError(
            f"xyz file has {geometry.natoms} atoms, neighbor file has {table.number_of_atoms}"
        )
    mask = table.used_mask()
    rows = np.broadcast_to(np.arange(table.number_of_atoms)[:, None], mask.shape)[mask]
    cols = table.neighbor_list[mask]
    delta = geometry.positions[cols] - geometry.positions[rows]
    delta = wrap_displacement(delta, geometry.box, geometry.pbc)
    table.xx[mask] = delta[:, geometry.transport_axis]


def read_general_model(directory: str | Path, need_positions: bool) -> GeneralModelData:
    """Read a general model from ``directory``.

    ``need_positions`` makes ``xyz.in`` mandatory and fills the hop
    displacements from it.
    """
    directory = Path(directory)
    table = read_neighbors(directory / NEIGHBOR_FILE)
    read_hoppings(directory / HOPPING_FILE, table)

    potential_path = directory / POTENTIAL_FILE
    if potential_path.exists():
        potential = read_potential(potential_path, table.number_of_atoms)
    else:
        potential = np.zeros(table.number_of_atoms, dtype=REAL)

    geometry = None
    if need_positions:
        geometry = read_xyz(directory / XYZ_FILE)
        assign_displacements(table, geometry)

    logging.info(
        "General model from {}: {} atoms, {} hops, max_neighbor={}".format(
            directory, table.number_of_atoms, table.number_of_pairs, table.max_neighbor)
    )
    return GeneralModelData(table=table, potential=potential, geometry=geometry)
