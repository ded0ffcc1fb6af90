"""Vacancy disorder: remove randomly chosen atoms and compact the neighbor table."""
from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from ..base.neighbor_table import NeighborTable
from ..errors import ConfigurationError
from .sampling import sample_without_replacement


@dataclass(slots=True)
class VacancyResult:
    """Outcome of a vacancy removal.

    ``new_index[n]`` is the compact index of old atom ``n``, or ``-1`` when
    ``n`` was removed.
    """
    table: NeighborTable
    vacancies: np.ndarray
    new_index: np.ndarray
    positions: np.ndarray | None = None

    @property
    def number_removed(self) -> int:
        return int(self.vacancies.size)


def compact_indices(is_vacancy: np.ndarray) -> np.ndarray:
    """Map old atom index to new compact index by a forward scan; vacancies map to -1."""
    present = ~is_vacancy
    new_index = np.cumsum(present) - 1
    new_index[is_vacancy] = -1
    return new_index


def remove_atoms(table: NeighborTable, vacancies, positions: np.ndarray | None = None) -> VacancyResult:
    """Remove ``vacancies`` from ``table`` and return the rebuilt, smaller table.

    Surviving atoms keep their relative order, and each one keeps its
    surviving hops in their original slot order. Hops into a vacancy are
    dropped and no longer count in ``neighbor_number``. The input table is not
    modified; it can be released once the new one is returned.
    """
    vacancies = np.asarray(vacancies, dtype=np.int64)
    n_old = table.number_of_atoms
    if vacancies.size and (vacancies.min() < 0 or vacancies.max() >= n_old):
        raise ConfigurationError(f"vacancy indices must lie in [0, {n_old}), got {vacancies.tolist()}")
    is_vacancy = np.zeros(n_old, dtype=bool)
    is_vacancy[vacancies] = True
    if int(is_vacancy.sum()) != vacancies.size:
        raise ConfigurationError("vacancy indices must be distinct")
    new_index = compact_indices(is_vacancy)
    survivors = np.flatnonzero(~is_vacancy)

    used = table.used_mask()[survivors]
    old_targets = table.neighbor_list[survivors]
    keep = used & ~is_vacancy[np.where(used, old_targets, 0)]
    # Slot of each kept hop in its new row: running count of kept hops before it.
    new_slot = np.cumsum(keep, axis=1) - 1

    new_table = NeighborTable.empty(survivors.size, table.max_neighbor)
    rows = np.broadcast_to(np.arange(survivors.size)[:, None], keep.shape)[keep]
    slots = new_slot[keep]
    new_table.neighbor_list[rows, slots] = new_index[old_targets[keep]]
    new_table.hopping_real[rows, slots] = table.hopping_real[survivors][keep]
    new_table.hopping_imag[rows, slots] = table.hopping_imag[survivors][keep]
    new_table.xx[rows, slots] = table.xx[survivors][keep]
    new_table.neighbor_number[:] = keep.sum(axis=1)

    new_positions = None if positions is None else np.asarray(positions)[survivors].copy()
    return VacancyResult(table=new_table, vacancies=vacancies, new_index=new_index,
                         positions=new_positions)


def apply_vacancies(table: NeighborTable, rng: np.random.Generator, count: int,
                    positions: np.ndarray | None = None) -> VacancyResult:
    """Draw ``count`` distinct vacancies uniformly and remove them."""
    n_atoms = table.number_of_atoms
    if not 0 < count < n_atoms:
        raise ConfigurationError(
            f"vacancy count must lie in [1, {n_atoms - 1}] for {n_atoms} atoms, got {count}"
        )
    vacancies = sample_without_replacement(rng, n_atoms, count)
    result = remove_atoms(table, vacancies, positions)
    logging.info(
        "Removed {} vacancies: {} -> {} atoms, {} -> {} hops".format(
            count, n_atoms, result.table.number_of_atoms, table.number_of_pairs,
            result.table.number_of_pairs)
    )
    return result
