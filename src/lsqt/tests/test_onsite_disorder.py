import sys
from pathlib import Path

import numpy as np
import pytest
from numpy.testing import assert_allclose

SRC_DIR = Path(__file__).resolve().parents[2]
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from lsqt.errors import ConfigurationError
from lsqt.disorder import (
    Impurities,
    anderson_potential,
    charged_impurity_potential,
    minimum_image,
    place_impurities,
)
from lsqt.geometry import wrap_displacement
from lsqt.rng import make_rng


def test_anderson_range_and_independence():
    values = anderson_potential(make_rng(0), 20000, 3.0)
    assert values.min() >= -1.5 and values.max() <= 1.5
    assert abs(values.mean()) < 0.05
    assert values.var() == pytest.approx(3.0 ** 2 / 12.0, rel=0.05)


def test_anderson_overwrites_buffer():
    out = np.full(8, 99.0)
    result = anderson_potential(make_rng(1), 8, 1.0, out=out)
    assert result is out
    assert np.all(np.abs(out) <= 0.5)


def test_anderson_requires_positive_strength():
    with pytest.raises(ConfigurationError):
        anderson_potential(make_rng(1), 4, 0.0)


def test_minimum_image_wraps_only_periodic_axes():
    box = [10.0, 10.0, 10.0]
    d = minimum_image([[7.0, -7.0, 7.0]], box, (True, True, False))
    assert_allclose(d, [[3.0, 3.0, 7.0]])
    # Exactly half a box is not wrapped.
    assert_allclose(minimum_image([[5.0, 0.0, 0.0]], box, (True, True, True)), [[5.0, 0.0, 0.0]])


def test_wrap_displacement_keeps_sign():
    box = [4.0, 4.0, 4.0]
    delta = np.array([[3.0, -3.0, 1.0], [1.5, 0.0, -1.5]])
    assert_allclose(wrap_displacement(delta, box, (True, True, True)), [[-1.0, 1.0, 1.0], [1.5, 0.0, -1.5]])
    assert_allclose(wrap_displacement(delta, box, (False, False, False)), delta)


def test_place_impurities_distinct_and_bounded():
    imp = place_impurities(make_rng(9), 40, 12, 2.0)
    assert imp.count == 12
    assert len(set(imp.sites.tolist())) == 12
    assert np.all((imp.sites >= 0) & (imp.sites < 40))
    assert np.all(np.abs(imp.charges) <= 1.0)


@pytest.mark.parametrize("count, strength", [(0, 1.0), (41, 1.0), (3, -1.0)])
def test_place_impurities_rejects_bad_input(count, strength):
    with pytest.raises(ConfigurationError):
        place_impurities(make_rng(9), 40, count, strength)


def test_single_impurity_gaussian_profile_uses_minimum_image():
    positions = np.array([[float(x), 0.0, 0.0] for x in range(10)])
    box = [10.0, 1.0, 1.0]
    xi = 1.5
    imp = Impurities(sites=np.array([0]), charges=np.array([2.0]))
    pot = charged_impurity_potential(positions, imp, box, (True, True, True), xi)
    distance = np.minimum(np.arange(10), 10 - np.arange(10))
    assert_allclose(pot, 2.0 * np.exp(-distance ** 2 / (2 * xi ** 2)))
    # Atom 9 is one box length minus one away: it must see distance 1, not 9.
    assert pot[9] == pytest.approx(pot[1])

    open_pot = charged_impurity_potential(positions, imp, box, (False, True, True), xi)
    assert open_pot[9] == pytest.approx(2.0 * np.exp(-81.0 / (2 * xi ** 2)))


def test_impurity_potentials_superpose():
    rng = np.random.default_rng(3)
    positions = rng.uniform(0.0, 6.0, size=(30, 3))
    box, pbc = [6.0, 6.0, 6.0], (True, True, True)
    a = Impurities(sites=np.array([2]), charges=np.array([0.7]))
    b = Impurities(sites=np.array([11]), charges=np.array([-0.4]))
    both = Impurities(sites=np.array([2, 11]), charges=np.array([0.7, -0.4]))
    out = np.full(30, 5.0)
    total = charged_impurity_potential(positions, both, box, pbc, 1.2, out=out)
    assert total is out
    assert_allclose(total, charged_impurity_potential(positions, a, box, pbc, 1.2)
                    + charged_impurity_potential(positions, b, box, pbc, 1.2))
