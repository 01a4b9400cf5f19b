"""
Support Engine
==============

Finds orbs that lost their connection to the ceiling row.

An orb is supported when a chain of adjacent orbs of any color links it to
row 0. Everything else floats and must fall.
"""

from __future__ import annotations

from typing import List, Set

from gauntlet.orb_core.hex_geometry import Cell
from gauntlet.orb_core.orb_grid import OrbGrid, RestingOrb


def find_supported_cells(grid: OrbGrid) -> Set[Cell]:
    """
    Cells reachable from any occupied row-0 cell.

    Args:
        grid: Grid to search.

    Returns:
        Set of supported, occupied cells.
    """
    geometry = grid.geometry
    stack = [orb.cell for orb in grid if orb.row == 0]
    supported: Set[Cell] = set()

    while stack:
        cell = stack.pop()
        if cell in supported:
            continue
        supported.add(cell)
        for neighbor in geometry.neighbors_of(*cell):
            if neighbor not in supported and neighbor in grid:
                stack.append(neighbor)

    return supported


def find_unsupported_orbs(grid: OrbGrid) -> List[RestingOrb]:
    """
    Orbs with no path to the ceiling.

    Together with ``find_supported_cells`` this partitions the occupied
    cells. The grid is not modified.

    Returns:
        Floating orbs, ordered by (row, col).
    """
    supported = find_supported_cells(grid)
    floating = [orb for orb in grid if orb.cell not in supported]
    floating.sort(key=lambda orb: orb.cell)
    return floating
