"""Build a disordered square lattice and plot its on-site potential.

Usage example:
    python disorder_map.py --nx 40 --ny 40 --impurities 30 --strength 1.0 --xi 2.0 --vacancies 50 --out disorder.png
"""
import argparse
import logging
import os
import sys
import numpy as np
import matplotlib

matplotlib.use('Agg')
import matplotlib.pyplot as plt

_HERE = os.path.abspath(os.path.dirname(__file__))
_SRC_ROOT = os.path.abspath(os.path.join(_HERE, '..', '..'))
if _SRC_ROOT not in sys.path:
    sys.path.insert(0, _SRC_ROOT)

from lsqt import Model, make_rng
from lsqt.geometry import Hop, UnitCell
from lsqt.io import LATTICE_MODEL, Parameters


def square_lattice(nx: int, ny: int, hopping: float = -1.0, a: float = 1.0) -> UnitCell:
    """One orbital per cell, four nearest-neighbour hops, periodic in x and y."""
    hops = [Hop(cell=offset, target=0, hopping=complex(hopping, 0.0))
            for offset in ((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0))]
    return UnitCell(extent=(nx, ny, 1), pbc=(True, True, False), transport_axis=0,
                    lattice_constant=(a, a, a), orbital_positions=[[0.0, 0.0, 0.0]],
                    hops=[hops], max_neighbor=4)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument('--nx', type=int, default=40)
    ap.add_argument('--ny', type=int, default=40)
    ap.add_argument('--impurities', type=int, default=30)
    ap.add_argument('--strength', type=float, default=1.0)
    ap.add_argument('--xi', type=float, default=2.0, help='screening range')
    ap.add_argument('--vacancies', type=int, default=0)
    ap.add_argument('--seed', type=int, default=1)
    ap.add_argument('--out', default='disorder_map.png')
    args = ap.parse_args()
    if args.impurities <= 0:
        ap.error('--impurities must be positive to have a potential to plot')
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    params = Parameters(model=LATTICE_MODEL, impurity_count=args.impurities,
                        impurity_strength=args.strength, impurity_range=args.xi,
                        vacancy_count=args.vacancies)
    energies = np.linspace(-4.0, 4.0, 81)
    model = Model.from_unit_cell(square_lattice(args.nx, args.ny), params, energies, make_rng(args.seed))

    pos = model.positions
    plt.figure(figsize=(6, 5))
    sc = plt.scatter(pos[:, 0], pos[:, 1], c=model.potential, s=12, cmap='coolwarm')
    plt.colorbar(sc, label='on-site potential')
    plt.gca().set_aspect('equal')
    plt.title(f'{model.number_of_atoms} atoms, {model.impurities.count} impurities')
    plt.tight_layout()
    plt.savefig(args.out, dpi=150)
    plt.close()
    print(f'Saved {args.out}')


if __name__ == '__main__':
    main()
