"""Fixed-stride padded neighbor table of a tight-binding Hamiltonian.

Row ``n`` of every 2-D array is the stride ``[n*max_neighbor, (n+1)*max_neighbor)``
of the flat layout; only the first ``neighbor_number[n]`` slots of a row are
used. Unused slots hold ``-1`` as target and ``0`` as payload.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np
import scipy.sparse as sp

from .. import REAL

UNUSED = -1


@dataclass(slots=True)
class NeighborTable:
    """Per-atom neighbor lists with complex hoppings and transport-axis displacements.

    Attributes
    ----------
    neighbor_number : np.ndarray (N,)
        Number of used slots per atom.
    neighbor_list : np.ndarray (N, max_neighbor)
        Target atom index of each slot.
    hopping_real, hopping_imag : np.ndarray (N, max_neighbor)
        Real and imaginary parts of the hopping amplitude.
    xx : np.ndarray (N, max_neighbor)
        Hop displacement along the transport axis (velocity-operator input).
    """
    neighbor_number: np.ndarray
    neighbor_list: np.ndarray
    hopping_real: np.ndarray
    hopping_imag: np.ndarray
    xx: np.ndarray

    @classmethod
    def empty(cls, number_of_atoms: int, max_neighbor: int) -> "NeighborTable":
        shape = (number_of_atoms, max_neighbor)
        return cls(
            neighbor_number=np.zeros(number_of_atoms, dtype=np.int64),
            neighbor_list=np.full(shape, UNUSED, dtype=np.int64),
            hopping_real=np.zeros(shape, dtype=REAL),
            hopping_imag=np.zeros(shape, dtype=REAL),
            xx=np.zeros(shape, dtype=REAL),
        )

    @property
    def number_of_atoms(self) -> int:
        return int(self.neighbor_list.shape[0])

    @property
    def max_neighbor(self) -> int:
        return int(self.neighbor_list.shape[1])

    @property
    def number_of_pairs(self) -> int:
        """Total number of used slots (directed hops)."""
        return int(self.neighbor_number.sum())

    def used_mask(self) -> np.ndarray:
        """Boolean (N, max_neighbor) mask of the used slots."""
        slots = np.arange(self.max_neighbor)
        return slots[None, :] < self.neighbor_number[:, None]

    def iter_hops(self, n: int) -> Iterator[Tuple[int, complex, float]]:
        """Yield ``(target, hopping, displacement)`` for the used slots of atom ``n``."""
        for slot in range(int(self.neighbor_number[n])):
            yield (
                int(self.neighbor_list[n, slot]),
                complex(self.hopping_real[n, slot], self.hopping_imag[n, slot]),
                float(self.xx[n, slot]),
            )

    def validate(self) -> None:
        """Check the stride invariants; raise ``ValueError`` when broken."""
        n_atoms, stride = self.neighbor_list.shape
        for name in ('hopping_real', 'hopping_imag', 'xx'):
            shape = getattr(self, name).shape
            if shape != (n_atoms, stride):
                raise ValueError(f"{name} shape {shape} != ({n_atoms},{stride})")
        if self.neighbor_number.shape != (n_atoms,):
            raise ValueError(f"neighbor_number shape {self.neighbor_number.shape} != ({n_atoms},)")
        if np.any(self.neighbor_number < 0) or np.any(self.neighbor_number > stride):
            raise ValueError("neighbor_number must lie in [0, max_neighbor]")
        targets = self.neighbor_list[self.used_mask()]
        if targets.size and (targets.min() < 0 or targets.max() >= n_atoms):
            raise ValueError("neighbor_list holds a target outside [0, number_of_atoms)")

    def _coo(self, values: np.ndarray):
        mask = self.used_mask()
        rows = np.broadcast_to(np.arange(self.number_of_atoms)[:, None], mask.shape)[mask]
        return values[mask], rows, self.neighbor_list[mask]

    def hamiltonian(self, potential: np.ndarray | None = None) -> sp.csr_array:
        """Assemble ``H`` as a sparse matrix; ``potential`` fills the diagonal.

        Repeated hops to the same target are summed.
        """
        n = self.number_of_atoms
        hop, rows, cols = self._coo(self.hopping_real + 1j * self.hopping_imag)
        if potential is not None:
            potential = np.asarray(potential)
            if potential.shape != (n,):
                raise ValueError(f"potential shape {potential.shape} != ({n},)")
            diag = np.arange(n)
            hop = np.concatenate([hop, potential.astype(complex)])
            rows = np.concatenate([rows, diag])
            cols = np.concatenate([cols, diag])
        return sp.coo_array((hop, (rows, cols)), shape=(n, n)).tocsr()

    def velocity(self) -> sp.csr_array:
        """Velocity operator ``V = i[H, X]`` along the transport axis (hbar = 1)."""
        n = self.number_of_atoms
        values = 1j * self.xx * (self.hopping_real + 1j * self.hopping_imag)
        vel, rows, cols = self._coo(values)
        return sp.coo_array((vel, (rows, cols)), shape=(n, n)).tocsr()
