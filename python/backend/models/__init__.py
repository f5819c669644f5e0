from backend.models.hexgrid import Cell
from backend.models.tile import Color, TileMemory
from backend.models.decomposer import CELLS_PER_TILE, decompose
from backend.models.occupancy import OccupancySet
from backend.models.board import PALETTE_SIZE, Board
from backend.models.solution import Solution
from backend.models.storage import GameMode, SolutionStore

__all__ = [
    "Board",
    "CELLS_PER_TILE",
    "Cell",
    "Color",
    "GameMode",
    "OccupancySet",
    "PALETTE_SIZE",
    "Solution",
    "SolutionStore",
    "TileMemory",
    "decompose",
]
