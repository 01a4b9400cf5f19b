"""
Match Engine
============

Finds the same-color cluster around a newly placed orb.
"""

from __future__ import annotations

from typing import List, Set

from gauntlet.orb_core.hex_geometry import Cell
from gauntlet.orb_core.orb_grid import OrbGrid, RestingOrb


def find_same_color_cluster(grid: OrbGrid, seed: RestingOrb) -> List[RestingOrb]:
    """
    Flood fill from ``seed`` through neighbors of the seed's color.

    Every cell is visited at most once, so cycles in the hex adjacency are
    harmless. The whole connected group is returned, seed included, whatever
    its size; callers apply the match threshold.

    Args:
        grid: Grid containing the seed.
        seed: Orb to start from.

    Returns:
        Orbs of the cluster, seed first.
    """
    geometry = grid.geometry
    color = seed.color
    visited: Set[Cell] = set()
    stack = [seed]
    cluster: List[RestingOrb] = []

    while stack:
        orb = stack.pop()
        if orb.cell in visited:
            continue
        visited.add(orb.cell)
        cluster.append(orb)

        for cell in geometry.neighbors_of(orb.row, orb.col):
            if cell in visited:
                continue
            neighbor = grid.get(cell)
            if neighbor is not None and neighbor.color == color:
                stack.append(neighbor)

    return cluster


def is_match(cluster: List[RestingOrb], match_min: int) -> bool:
    """True if a cluster is large enough to clear."""
    return len(cluster) >= match_min
