"""Reader for the lattice description file (``lattice.in``)."""
from __future__ import annotations

from pathlib import Path
import logging

import numpy as np

from ..errors import ConfigurationError
from ..geometry.unit_cell import Hop, UnitCell
from .tokens import TokenReader


def _flag(value: int, what: str, source: str) -> bool:
    if value not in (0, 1):
        raise ConfigurationError(f"{source}: {what} must be 0 or 1, got {value}")
    return bool(value)


def parse_lattice(reader: TokenReader) -> UnitCell:
    """Parse a lattice description from ``reader`` (see :func:`read_lattice`)."""
    src = reader.source
    extent = tuple(reader.next_ints(3, 'cell extents'))
    pbc = tuple(_flag(reader.next_int('periodic flag'), 'periodic flag', src) for _ in range(3))
    transport_axis = reader.next_int('transport axis')
    lattice_constant = tuple(reader.next_floats(3, 'lattice constants'))
    n_orbital = reader.next_int('number of orbitals')
    max_neighbor = reader.next_int('max neighbors per orbital')
    if n_orbital <= 0:
        raise ConfigurationError(f"{src}: number of orbitals must be positive, got {n_orbital}")
    if max_neighbor <= 0:
        raise ConfigurationError(f"{src}: max neighbors per orbital must be positive, got {max_neighbor}")

    positions = np.array(
        [reader.next_floats(3, f'position of orbital {m}') for m in range(n_orbital)], dtype=float
    )
    hops = []
    for m in range(n_orbital):
        n_hops = reader.next_int(f'hop count of orbital {m}')
        if not 0 <= n_hops <= max_neighbor:
            raise ConfigurationError(
                f"{src}: orbital {m} lists {n_hops} hops, allowed range is [0, {max_neighbor}]"
            )
        template = []
        for _ in range(n_hops):
            dx, dy, dz = reader.next_ints(3, f'hop cell offset of orbital {m}')
            target = reader.next_int(f'hop target of orbital {m}')
            re, im = reader.next_floats(2, f'hopping of orbital {m}')
            template.append(Hop(cell=(dx, dy, dz), target=target, hopping=complex(re, im)))
        hops.append(template)

    try:
        return UnitCell(
            extent=extent,
            pbc=pbc,
            transport_axis=transport_axis,
            lattice_constant=lattice_constant,
            orbital_positions=positions,
            hops=hops,
            max_neighbor=max_neighbor,
        )
    except ConfigurationError as exc:
        raise ConfigurationError(f"{src}: {exc}") from exc


def read_lattice(path: str | Path) -> UnitCell:
    """Read ``lattice.in``.

    Layout (whitespace-separated, positional)::

        Nx Ny Nz
        pbc_x pbc_y pbc_z transport_axis
        a_x a_y a_z
        N_orbital max_neighbor
        x y z                    # one line per orbital
        n_hops                   # per orbital, followed by n_hops lines of
        dx dy dz target Re Im
    """
    cell = parse_lattice(TokenReader.from_file(path))
    logging.info(
        "Lattice {}: extent={} pbc={} transport axis={} orbitals={} max_neighbor={}".format(
            path, cell.extent, cell.pbc, cell.transport_axis, cell.number_of_orbitals, cell.max_neighbor)
    )
    return cell
