"""
Projectile / Collision Resolver
===============================

Moves the fired orb, bounces it off the side walls, detects when it reaches
the ceiling or touches a resting orb, and commits it to the grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from gauntlet.orb_core.config_loader import GameConfig, get_config
from gauntlet.orb_core.hex_geometry import HexGeometry, distance
from gauntlet.orb_core.match_engine import find_same_color_cluster
from gauntlet.orb_core.orb_grid import OrbGrid, RestingOrb
from gauntlet.orb_core.support_engine import find_unsupported_orbs


@dataclass
class ProjectileOrb:
    """
    The player's orb, either waiting in the launcher or in flight.
    """
    uid: int
    color: int
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    in_flight: bool = False

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def velocity(self) -> Tuple[float, float]:
        return (self.vx, self.vy)

    def launch(self, velocity: Tuple[float, float]) -> None:
        """Detach from the launcher with the given velocity."""
        self.vx, self.vy = velocity
        self.in_flight = True


@dataclass
class LandingResult:
    """
    Everything that happened when a projectile snapped into the grid.

    The grid has already been updated: the placed orb was added, and the
    cluster and floating orbs (if any) removed.
    """
    placed: RestingOrb
    landing_row: int
    cluster: List[RestingOrb]
    matched: bool
    removed: List[RestingOrb] = field(default_factory=list)
    floating: List[RestingOrb] = field(default_factory=list)
    jiggled: List[RestingOrb] = field(default_factory=list)

    @property
    def color(self) -> int:
        return self.placed.color


class CollisionResolver:
    """
    Steps a projectile through the playfield.

    Walls are two vertical lines inset from the board edges; the ceiling is
    the top of row 0.
    """

    def __init__(self, geometry: HexGeometry, config: Optional[GameConfig] = None):
        """
        Initialize resolver.

        Args:
            geometry: Grid geometry.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._geometry = geometry
        radius = geometry.orb_radius
        self._left_wall = radius + config.board.wall_inset
        self._right_wall = config.board.width - radius - config.board.wall_inset
        self._ceiling_y = radius
        self._contact_distance = geometry.orb_diameter

    @property
    def walls(self) -> Tuple[float, float]:
        """(left, right) x thresholds for the projectile center."""
        return (self._left_wall, self._right_wall)

    def advance(self, projectile: ProjectileOrb, grid: OrbGrid) -> bool:
        """
        Move the projectile one tick.

        Args:
            projectile: In-flight orb; mutated in place.
            grid: Resting orbs to collide with.

        Returns:
            True if the projectile arrived and must snap.
        """
        projectile.x += projectile.vx
        projectile.y += projectile.vy

        if projectile.x < self._left_wall and projectile.vx < 0:
            projectile.vx = -projectile.vx
        elif projectile.x > self._right_wall and projectile.vx > 0:
            projectile.vx = -projectile.vx

        if projectile.y < self._ceiling_y:
            projectile.y = self._ceiling_y
            return True

        return self.touches_grid(projectile, grid)

    def touches_grid(self, projectile: ProjectileOrb, grid: OrbGrid) -> bool:
        """True if the projectile overlaps any resting orb."""
        pos = projectile.position
        for orb in grid:
            if distance(pos, orb.position) < self._contact_distance:
                return True
        return False


def resolve_landing(
    grid: OrbGrid,
    projectile: ProjectileOrb,
    config: Optional[GameConfig] = None
) -> LandingResult:
    """
    Snap an arrived projectile into the grid and resolve its consequences.

    Steps, in order: place the orb in the nearest empty cell, jiggle its
    neighbors, find its same-color cluster, and if the cluster is large
    enough remove it and then remove every orb left without ceiling support.
    Scoring, locking and termination are left to the caller.

    Args:
        grid: Grid to mutate.
        projectile: The arrived projectile.
        config: Game configuration. Uses default if None.

    Returns:
        LandingResult describing the placement, cluster and floating orbs.
    """
    if config is None:
        config = get_config()

    geometry = grid.geometry
    row, col = geometry.nearest_empty_cell(projectile.position, grid.occupied)
    placed = grid.place(projectile.uid, projectile.color, row, col)

    jiggled = grid.neighbors(placed)
    for neighbor in jiggled:
        neighbor.jiggle = config.rules.jiggle_ticks

    cluster = find_same_color_cluster(grid, placed)
    result = LandingResult(
        placed=placed,
        landing_row=row,
        cluster=cluster,
        matched=len(cluster) >= config.rules.match_min,
        jiggled=jiggled
    )

    if not result.matched:
        return result

    for orb in cluster:
        grid.remove(orb.cell)
    result.removed = list(cluster)

    floating = find_unsupported_orbs(grid)
    for orb in floating:
        grid.remove(orb.cell)
    result.floating = floating

    return result
