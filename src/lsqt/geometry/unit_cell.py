"""Supercell expansion of a unit-cell hopping template.

Atom ``(nx, ny, nz, m)`` of an ``Nx x Ny x Nz`` supercell with ``N_orbital``
orbitals per cell has the flat index ``((nx*Ny + ny)*Nz + nz)*N_orbital + m``.
Hops that leave the supercell across an open face are dropped, so atoms on an
open boundary end up with fewer neighbors than bulk atoms.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Sequence, Tuple

import numpy as np

from .. import REAL
from ..base.neighbor_table import NeighborTable
from ..errors import ConfigurationError

AXES = ('x', 'y', 'z')


@dataclass(slots=True, frozen=True)
class Hop:
    """One template hop from an orbital to ``target`` in the cell shifted by ``cell``."""
    cell: Tuple[int, int, int]
    target: int
    hopping: complex


@dataclass(slots=True)
class UnitCell:
    """Unit cell, supercell extent and boundary conditions of a lattice model.

    Parameters
    ----------
    extent : (Nx, Ny, Nz)
        Number of cells along each axis.
    pbc : (bool, bool, bool)
        Periodic flag per axis.
    transport_axis : int
        Axis (0, 1 or 2) along which velocity is evaluated; must be periodic.
    lattice_constant : (ax, ay, az)
        Cell lengths.
    orbital_positions : np.ndarray (N_orbital, 3)
        Cartesian offset of each orbital inside the cell.
    hops : list[list[Hop]]
        Hopping template of each orbital, at most ``max_neighbor`` entries.
    max_neighbor : int
        Stride of the neighbor table.
    """
    extent: Tuple[int, int, int]
    pbc: Tuple[bool, bool, bool]
    transport_axis: int
    lattice_constant: Tuple[float, float, float]
    orbital_positions: np.ndarray
    hops: List[List[Hop]]
    max_neighbor: int
    _orbital_count: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.orbital_positions = np.asarray(self.orbital_positions, dtype=REAL).reshape(-1, 3)
        self._orbital_count = int(self.orbital_positions.shape[0])
        self.validate()

    def validate(self) -> None:
        if len(self.extent) != 3 or any(int(n) <= 0 for n in self.extent):
            raise ConfigurationError(f"cell extents must be three positive integers, got {self.extent}")
        if len(self.pbc) != 3 or any(flag not in (0, 1, True, False) for flag in self.pbc):
            raise ConfigurationError(f"periodic flags must be 0 or 1, got {self.pbc}")
        if self.transport_axis not in (0, 1, 2):
            raise ConfigurationError(f"transport axis must be 0, 1 or 2, got {self.transport_axis}")
        if not self.pbc[self.transport_axis]:
            raise ConfigurationError(
                "transport axis {} must be periodic".format(AXES[self.transport_axis])
            )
        if len(self.lattice_constant) != 3 or any(not a > 0 for a in self.lattice_constant):
            raise ConfigurationError(f"lattice constants must be positive, got {self.lattice_constant}")
        if self._orbital_count <= 0:
            raise ConfigurationError("a unit cell needs at least one orbital")
        if self.max_neighbor <= 0:
            raise ConfigurationError(f"max_neighbor must be positive, got {self.max_neighbor}")
        if len(self.hops) != self._orbital_count:
            raise ConfigurationError(
                f"expected a hopping list for each of {self._orbital_count} orbitals, got {len(self.hops)}"
            )
        for m, template in enumerate(self.hops):
            if len(template) > self.max_neighbor:
                raise ConfigurationError(
                    f"orbital {m} has {len(template)} hops, more than max_neighbor={self.max_neighbor}"
                )
            for hop in template:
                if not 0 <= hop.target < self._orbital_count:
                    raise ConfigurationError(f"orbital {m} hops to unknown orbital {hop.target}")

    @property
    def number_of_orbitals(self) -> int:
        return self._orbital_count

    @property
    def number_of_cells(self) -> int:
        nx, ny, nz = self.extent
        return int(nx * ny * nz)

    @property
    def number_of_atoms(self) -> int:
        return self.number_of_cells * self.number_of_orbitals

    @property
    def box(self) -> np.ndarray:
        """Supercell lengths along each axis."""
        return np.asarray(self.extent, dtype=REAL) * np.asarray(self.lattice_constant, dtype=REAL)

    def atom_index(self, nx, ny, nz, m):
        """Flat index of orbital ``m`` in cell ``(nx, ny, nz)``; periodic axes wrap.

        Works elementwise on integer arrays. Coordinates on open axes must
        already lie inside the supercell.
        """
        cells = [nx, ny, nz]
        for axis in range(3):
            if self.pbc[axis]:
                cells[axis] = np.mod(cells[axis], self.extent[axis])
        _, size_y, size_z = self.extent
        return ((cells[0] * size_y + cells[1]) * size_z + cells[2]) * self.number_of_orbitals + m


def _cell_grid(extent: Sequence[int]) -> np.ndarray:
    """Cell coordinates in row-major order, shape (Nx*Ny*Nz, 3)."""
    grids = np.meshgrid(*(np.arange(n) for n in extent), indexing='ij')
    return np.stack([g.ravel() for g in grids], axis=1)


def expand_supercell(cell: UnitCell) -> NeighborTable:
    """Build the neighbor table of the supercell described by ``cell``.

    For every orbital the template hops are applied to all cells at once, in
    template order, so each atom's used slots follow its orbital's template
    with the dropped open-boundary hops removed.
    """
    n_orb = cell.number_of_orbitals
    table = NeighborTable.empty(cell.number_of_atoms, cell.max_neighbor)
    cells = _cell_grid(cell.extent)
    extent = np.asarray(cell.extent)
    axis = cell.transport_axis
    a_transport = cell.lattice_constant[axis]
    dropped = 0

    for m in range(n_orb):
        sources = cell.atom_index(cells[:, 0], cells[:, 1], cells[:, 2], m)
        for hop in cell.hops[m]:
            shifted = cells + np.asarray(hop.cell)
            keep = np.ones(len(cells), dtype=bool)
            for ax in range(3):
                if not cell.pbc[ax]:
                    keep &= (shifted[:, ax] >= 0) & (shifted[:, ax] < extent[ax])
            dropped += int(len(cells) - keep.sum())
            src = sources[keep]
            targets = cell.atom_index(shifted[keep, 0], shifted[keep, 1], shifted[keep, 2], hop.target)
            slot = table.neighbor_number[src]
            table.neighbor_list[src, slot] = targets
            table.hopping_real[src, slot] = hop.hopping.real
            table.hopping_imag[src, slot] = hop.hopping.imag
            table.xx[src, slot] = (
                hop.cell[axis] * a_transport
                + cell.orbital_positions[hop.target, axis]
                - cell.orbital_positions[m, axis]
            )
            table.neighbor_number[src] += 1

    logging.info(
        "Expanded {} cells x {} orbitals into {} atoms with {} hops".format(
            cell.number_of_cells, n_orb, table.number_of_atoms, table.number_of_pairs)
    )
    if dropped:
        logging.debug("{} hops crossed an open boundary and were dropped".format(dropped))
    return table


def supercell_positions(cell: UnitCell) -> np.ndarray:
    """Cartesian position of every atom, shape (N, 3), in flat-index order."""
    cells = _cell_grid(cell.extent).astype(REAL) * np.asarray(cell.lattice_constant, dtype=REAL)
    positions = cells[:, None, :] + cell.orbital_positions[None, :, :]
    return positions.reshape(-1, 3)
