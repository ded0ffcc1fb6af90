from .unit_cell import Hop, UnitCell, expand_supercell, supercell_positions
from .periodic import minimum_image, wrap_displacement

__all__ = [
    "Hop",
    "UnitCell",
    "expand_supercell",
    "supercell_positions",
    "minimum_image",
    "wrap_displacement",
]
