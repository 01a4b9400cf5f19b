"""
Hex Grid Geometry
=================

Maps discrete (row, col) cells of the offset hex grid to pixel centers and
back, and computes the parity-dependent neighbor set.

Odd rows are shifted right by one orb radius, so an even row's diagonal
neighbors sit to the left and an odd row's to the right.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Set, Tuple

from gauntlet.orb_core.config_loader import GameConfig, get_config

Cell = Tuple[int, int]
Vec2 = Tuple[float, float]

# (d_row, d_col) offsets shared by both parities: left, right, up, down
_COMMON_OFFSETS = ((0, -1), (0, 1), (-1, 0), (1, 0))
_EVEN_DIAGONALS = ((-1, -1), (1, -1))   # up-left, down-left
_ODD_DIAGONALS = ((-1, 1), (1, 1))      # up-right, down-right


def distance(p1: Vec2, p2: Vec2) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


class HexGeometry:
    """
    Pure geometry of the orb grid.

    Holds no orbs; every method is a function of its arguments and the
    grid configuration.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize geometry.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        grid = config.grid
        self._diameter = grid.orb_diameter
        self._radius = grid.orb_radius
        self._row_spacing = grid.row_spacing
        self._origin_x = grid.origin_x
        self._cols = grid.cols
        self._usable_cols = grid.usable_cols
        self._scan_rows = grid.scan_rows

    @property
    def orb_diameter(self) -> float:
        return self._diameter

    @property
    def orb_radius(self) -> float:
        return self._radius

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def usable_cols(self) -> int:
        return self._usable_cols

    @property
    def scan_rows(self) -> int:
        return self._scan_rows

    def cell_to_position(self, row: int, col: int) -> Vec2:
        """
        Pixel center of a cell.

        Args:
            row: Grid row (0 is the ceiling row).
            col: Grid column.

        Returns:
            (x, y) in board pixels.
        """
        x = col * self._diameter + (row % 2) * self._radius + self._origin_x
        y = row * self._row_spacing + self._radius
        return (x, y)

    def neighbors_of(self, row: int, col: int) -> Set[Cell]:
        """
        Cells adjacent to (row, col).

        Columns outside [0, usable_cols) are dropped. Rows are not filtered;
        a neighbor above the ceiling simply never holds an orb.
        """
        diagonals = _EVEN_DIAGONALS if row % 2 == 0 else _ODD_DIAGONALS
        neighbors = set()
        for d_row, d_col in _COMMON_OFFSETS + diagonals:
            c = col + d_col
            if 0 <= c < self._usable_cols:
                neighbors.add((row + d_row, c))
        return neighbors

    def nearest_empty_cell(self, position: Vec2, occupied: Iterable[Cell]) -> Cell:
        """
        Closest unoccupied cell to a pixel position.

        Scans rows [0, scan_rows) and columns [0, cols) row-major ascending;
        on equal distance the first cell scanned wins.

        Args:
            position: Pixel position to snap.
            occupied: Cells already holding an orb.

        Returns:
            The chosen (row, col).
        """
        taken = occupied if isinstance(occupied, (set, frozenset, dict)) else set(occupied)
        best: Cell = (0, 0)
        best_dist = math.inf
        for row in range(self._scan_rows):
            for col in range(self._cols):
                if (row, col) in taken:
                    continue
                dist = distance(position, self.cell_to_position(row, col))
                if dist < best_dist:
                    best_dist = dist
                    best = (row, col)
        return best
