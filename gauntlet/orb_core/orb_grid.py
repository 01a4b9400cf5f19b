"""
Orb Grid
========

The mapping of cells to resting orbs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set

from gauntlet.orb_core.config_loader import LevelLayout
from gauntlet.orb_core.hex_geometry import Cell, HexGeometry, Vec2


@dataclass
class RestingOrb:
    """
    An orb locked into a grid cell.

    The pixel position is never stored; it is projected from the cell
    through the grid's geometry on every read.
    """
    uid: int
    color: int
    row: int
    col: int
    geometry: HexGeometry
    jiggle: int = 0

    @property
    def cell(self) -> Cell:
        return (self.row, self.col)

    @property
    def position(self) -> Vec2:
        return self.geometry.cell_to_position(self.row, self.col)

    def decay_jiggle(self) -> None:
        """Count the decorative jiggle down by one tick, stopping at zero."""
        if self.jiggle > 0:
            self.jiggle -= 1

    def __repr__(self) -> str:
        return f"RestingOrb(uid={self.uid}, color={self.color}, cell={self.cell})"


class OrbGrid:
    """
    Cell -> RestingOrb mapping.

    Keys are unique and always equal the stored orb's cell. Lookups of
    cells that hold nothing (including out-of-range cells) return None.
    """

    def __init__(self, geometry: HexGeometry):
        self._geometry = geometry
        self._orbs: Dict[Cell, RestingOrb] = {}

    @classmethod
    def from_layout(
        cls,
        layout: LevelLayout,
        geometry: HexGeometry,
        uid_source: Iterator[int]
    ) -> "OrbGrid":
        """
        Build a grid from an authored level layout.

        Args:
            layout: Level matrix of color index or None.
            geometry: Shared grid geometry.
            uid_source: Iterator handing out unique orb IDs.
        """
        grid = cls(geometry)
        for row, col, color in layout.cells():
            grid.place(next(uid_source), color, row, col)
        return grid

    @property
    def geometry(self) -> HexGeometry:
        return self._geometry

    def __len__(self) -> int:
        return len(self._orbs)

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._orbs

    def __iter__(self) -> Iterator[RestingOrb]:
        return iter(list(self._orbs.values()))

    def get(self, cell: Cell) -> Optional[RestingOrb]:
        return self._orbs.get(cell)

    @property
    def orbs(self) -> List[RestingOrb]:
        return list(self._orbs.values())

    @property
    def occupied(self) -> Set[Cell]:
        return set(self._orbs)

    @property
    def max_row(self) -> int:
        """Lowest populated row, or -1 for an empty grid."""
        return max((row for row, _ in self._orbs), default=-1)

    def colors_present(self) -> Set[int]:
        return {orb.color for orb in self._orbs.values()}

    def place(self, uid: int, color: int, row: int, col: int) -> RestingOrb:
        """
        Put a new orb into an empty cell.

        Raises:
            ValueError: If the cell already holds an orb.
        """
        cell = (row, col)
        if cell in self._orbs:
            raise ValueError(f"Cell {cell} is already occupied")
        orb = RestingOrb(uid=uid, color=color, row=row, col=col, geometry=self._geometry)
        self._orbs[cell] = orb
        return orb

    def remove(self, cell: Cell) -> Optional[RestingOrb]:
        """Take the orb out of a cell, returning it (None if empty)."""
        return self._orbs.pop(cell, None)

    def neighbors(self, orb: RestingOrb) -> List[RestingOrb]:
        """Orbs occupying the cells adjacent to ``orb``."""
        found = []
        for cell in self._geometry.neighbors_of(orb.row, orb.col):
            neighbor = self._orbs.get(cell)
            if neighbor is not None:
                found.append(neighbor)
        return found

    def shift_down(self, rows: int = 1) -> int:
        """
        Move every orb down by ``rows`` rows, re-keying the mapping.

        Returns:
            The new lowest populated row (-1 for an empty grid).
        """
        shifted: Dict[Cell, RestingOrb] = {}
        for orb in self._orbs.values():
            orb.row += rows
            shifted[orb.cell] = orb
        self._orbs = shifted
        return self.max_row

    def decay_jiggle(self) -> None:
        for orb in self._orbs.values():
            orb.decay_jiggle()

    def clear(self) -> None:
        self._orbs.clear()
