from .neighbor_table import NeighborTable, UNUSED
from .model import Model

__all__ = ["NeighborTable", "UNUSED", "Model"]
