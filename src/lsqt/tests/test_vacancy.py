import sys
from pathlib import Path

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

SRC_DIR = Path(__file__).resolve().parents[2]
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from lsqt.errors import ConfigurationError
from lsqt.geometry import Hop, UnitCell, expand_supercell, supercell_positions
from lsqt.disorder import (
    apply_vacancies,
    compact_indices,
    permutation,
    remove_atoms,
    sample_without_replacement,
)
from lsqt.rng import make_rng


def _chain_2x2():
    hops = [Hop(cell=(1, 0, 0), target=0, hopping=1.0), Hop(cell=(-1, 0, 0), target=0, hopping=1.0)]
    return UnitCell(extent=(2, 2, 1), pbc=(True, True, True), transport_axis=0,
                    lattice_constant=(1.0, 1.0, 1.0), orbital_positions=[[0.0, 0.0, 0.0]],
                    hops=[hops], max_neighbor=2)


def _square(n, pbc_y=True):
    hops = [Hop(cell=offset, target=0, hopping=complex(-1.0, 0.1 * k))
            for k, offset in enumerate(((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0)))]
    return UnitCell(extent=(n, n, 1), pbc=(True, pbc_y, True), transport_axis=0,
                    lattice_constant=(1.0, 1.0, 1.0), orbital_positions=[[0.0, 0.0, 0.0]],
                    hops=[hops], max_neighbor=4)


def test_permutation_is_a_permutation():
    perm = permutation(make_rng(3), 50)
    assert_array_equal(np.sort(perm), np.arange(50))
    assert permutation(make_rng(3), 0).size == 0


def test_permutation_is_reproducible():
    assert_array_equal(permutation(make_rng(11), 20), permutation(make_rng(11), 20))


def test_sample_without_replacement_is_distinct():
    picks = sample_without_replacement(make_rng(5), 30, 30)
    assert len(set(picks.tolist())) == 30
    with pytest.raises(ConfigurationError):
        sample_without_replacement(make_rng(5), 3, 4)


def test_vacancy_frequency_is_uniform():
    rng = make_rng(2024)
    n, k, trials = 10, 3, 4000
    hits = np.zeros(n)
    for _ in range(trials):
        hits[sample_without_replacement(rng, n, k)] += 1
    freq = hits / trials
    assert_allclose(freq, k / n, atol=0.04)


def test_compact_indices_forward_scan():
    mask = np.array([False, True, False, False, True, False])
    assert_array_equal(compact_indices(mask), [0, -1, 1, 2, -1, 3])


def test_single_vacancy_on_four_atom_lattice():
    table = expand_supercell(_chain_2x2())
    result = apply_vacancies(table, make_rng(7), 1)
    new = result.table
    assert new.number_of_atoms == 3
    removed = int(result.vacancies[0])
    # In the 2x2 lattice both x-hops of the partner atom point at the removed atom.
    partner = (removed + 2) % 4
    for old in range(4):
        if old == removed:
            continue
        expected = 0 if old == partner else 2
        assert new.neighbor_number[result.new_index[old]] == expected
    assert new.number_of_pairs == 8 - 2 - 2
    new.validate()


def test_remove_atoms_counts_and_targets():
    table = expand_supercell(_square(5))
    result = apply_vacancies(table, make_rng(1), 7)
    new = result.table
    assert new.number_of_atoms == 25 - 7
    assert np.all(new.neighbor_list[new.used_mask()] < new.number_of_atoms)
    assert np.all(new.neighbor_number <= new.max_neighbor)
    new.validate()

    vacant = np.zeros(25, dtype=bool)
    vacant[result.vacancies] = True
    for old in np.flatnonzero(~vacant):
        lost = sum(vacant[t] for t, _, _ in table.iter_hops(old))
        assert new.neighbor_number[result.new_index[old]] == table.neighbor_number[old] - lost


def test_remove_atoms_preserves_hop_order_and_payload():
    table = expand_supercell(_square(4, pbc_y=False))
    vacancies = [5, 6]
    result = remove_atoms(table, vacancies)
    new = result.table
    for old in range(table.number_of_atoms):
        if old in vacancies:
            continue
        expected = [(int(result.new_index[t]), h, x) for t, h, x in table.iter_hops(old)
                    if t not in vacancies]
        assert list(new.iter_hops(int(result.new_index[old]))) == expected


def test_remove_atoms_leaves_original_untouched():
    table = expand_supercell(_square(3))
    before = table.neighbor_list.copy()
    remove_atoms(table, [0, 4])
    assert_array_equal(table.neighbor_list, before)
    assert table.number_of_atoms == 9


def test_remove_atoms_compacts_positions():
    cell = _square(3)
    table = expand_supercell(cell)
    positions = supercell_positions(cell)
    result = remove_atoms(table, [1, 7], positions=positions)
    assert result.positions.shape == (7, 3)
    assert_allclose(result.positions, np.delete(positions, [1, 7], axis=0))


@pytest.mark.parametrize("count", [0, 4, 5])
def test_vacancy_count_must_leave_atoms(count):
    table = expand_supercell(_chain_2x2())
    with pytest.raises(ConfigurationError):
        apply_vacancies(table, make_rng(0), count)


@pytest.mark.parametrize("vacancies", [[-1], [4], [1, 1]])
def test_remove_atoms_rejects_bad_indices(vacancies):
    table = expand_supercell(_chain_2x2())
    with pytest.raises(ConfigurationError):
        remove_atoms(table, vacancies)


def test_single_forward_hop_template():
    # Only the +x hop is listed; no reverse hop is added.
    cell = UnitCell(extent=(2, 2, 1), pbc=(True, True, True), transport_axis=0,
                    lattice_constant=(1.0, 1.0, 1.0), orbital_positions=[[0.0, 0.0, 0.0]],
                    hops=[[Hop(cell=(1, 0, 0), target=0, hopping=complex(1.0, 0.0))]], max_neighbor=1)
    table = expand_supercell(cell)
    assert table.number_of_atoms == 4
    assert_array_equal(table.neighbor_number, 1)
    assert_array_equal(table.neighbor_list[:, 0], [2, 3, 0, 1])

    result = apply_vacancies(table, make_rng(7), 1)
    removed = int(result.vacancies[0])
    partner = (removed + 2) % 4
    new = result.table
    assert new.number_of_atoms == 3
    for old in range(4):
        if old == removed:
            continue
        expected = 0 if old == partner else 1
        assert new.neighbor_number[result.new_index[old]] == expected
    assert new.number_of_pairs == 2
