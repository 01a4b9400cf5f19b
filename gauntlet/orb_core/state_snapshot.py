"""
State Snapshot
==============

Packs the session into numpy arrays: the read-only view handed to renderers
and to the Gymnasium observation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, TYPE_CHECKING

import numpy as np

from gauntlet.orb_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from gauntlet.orb_core.effects import EffectsLayer
    from gauntlet.orb_core.orb_grid import OrbGrid
    from gauntlet.orb_core.projectile import ProjectileOrb

# Columns of the falling orb array
FALLING_FIELDS = ("x", "y", "vx", "vy", "color")
# Columns of the particle array (RGB is kept separately as uint8)
PARTICLE_FIELDS = ("x", "y", "life", "size")


@dataclass
class GameSnapshot:
    """
    Complete session state at the end of a tick.

    Grid arrays are fixed-size (scan_rows x cols) with -1 for empty cells.
    Falling orb and particle arrays have one row per live object.
    """
    # Session
    status: int
    level_index: int
    score: int
    shots_until_descent: int
    shots_fired: int

    # Launcher
    aim_angle: float
    aiming_color: int                 # -1 while a shot is in flight
    next_color: int

    # Chevrons
    locked_mask: np.ndarray           # (num_chevrons,) bool

    # Grid
    grid_color: np.ndarray            # (scan_rows, cols) int16
    grid_jiggle: np.ndarray           # (scan_rows, cols) int16
    orb_count: int

    # Projectile
    has_projectile: bool
    projectile: np.ndarray            # (4,) float32: x, y, vx, vy
    projectile_color: int

    # Effects
    falling: np.ndarray               # (N, 5) float32, see FALLING_FIELDS
    particles: np.ndarray             # (M, 4) float32, see PARTICLE_FIELDS
    particle_rgb: np.ndarray          # (M, 3) uint8

    @property
    def locked_count(self) -> int:
        return int(self.locked_mask.sum())

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert the fixed-size part to a Gymnasium observation dictionary."""
        return {
            "status": np.array(self.status, dtype=np.int32),
            "level_index": np.array(self.level_index, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "shots_until_descent": np.array(self.shots_until_descent, dtype=np.int32),
            "aim_angle": np.array(self.aim_angle, dtype=np.float32),
            "aiming_color": np.array(self.aiming_color, dtype=np.int32),
            "next_color": np.array(self.next_color, dtype=np.int32),
            "locked_mask": self.locked_mask.astype(np.int8),
            "grid_color": self.grid_color,
            "orb_count": np.array(self.orb_count, dtype=np.int32),
        }


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated grid arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._rows = config.grid.scan_rows
        self._cols = config.grid.cols
        self._num_chevrons = config.rules.num_chevrons

        self._grid_color = np.full((self._rows, self._cols), -1, dtype=np.int16)
        self._grid_jiggle = np.zeros((self._rows, self._cols), dtype=np.int16)
        self._locked_mask = np.zeros(self._num_chevrons, dtype=bool)

    def build(
        self,
        *,
        status: int,
        level_index: int,
        score: int,
        shots_until_descent: int,
        shots_fired: int,
        aim_angle: float,
        grid: "OrbGrid",
        aiming: Optional["ProjectileOrb"],
        projectile: Optional["ProjectileOrb"],
        next_color: int,
        locked_colors: Iterable[int],
        effects: "EffectsLayer"
    ) -> GameSnapshot:
        """Build a snapshot from current session state."""
        self._grid_color.fill(-1)
        self._grid_jiggle.fill(0)
        self._locked_mask.fill(False)

        for orb in grid:
            # Rows past the scan range cannot occur while playing
            if 0 <= orb.row < self._rows and 0 <= orb.col < self._cols:
                self._grid_color[orb.row, orb.col] = orb.color
                self._grid_jiggle[orb.row, orb.col] = orb.jiggle

        for color in locked_colors:
            if 0 <= color < self._num_chevrons:
                self._locked_mask[color] = True

        if projectile is not None:
            projectile_arr = np.array(
                [projectile.x, projectile.y, projectile.vx, projectile.vy],
                dtype=np.float32
            )
            projectile_color = projectile.color
        else:
            projectile_arr = np.zeros(4, dtype=np.float32)
            projectile_color = -1

        falling = np.array(
            [[f.x, f.y, f.vx, f.vy, f.color] for f in effects.falling],
            dtype=np.float32
        ).reshape(-1, len(FALLING_FIELDS))
        particles = np.array(
            [[p.x, p.y, p.life, p.size] for p in effects.particles],
            dtype=np.float32
        ).reshape(-1, len(PARTICLE_FIELDS))
        particle_rgb = np.array(
            [p.color for p in effects.particles],
            dtype=np.uint8
        ).reshape(-1, 3)

        return GameSnapshot(
            status=status,
            level_index=level_index,
            score=score,
            shots_until_descent=shots_until_descent,
            shots_fired=shots_fired,
            aim_angle=aim_angle,
            aiming_color=aiming.color if aiming is not None else -1,
            next_color=next_color,
            locked_mask=self._locked_mask.copy(),
            grid_color=self._grid_color.copy(),
            grid_jiggle=self._grid_jiggle.copy(),
            orb_count=len(grid),
            has_projectile=projectile is not None,
            projectile=projectile_arr,
            projectile_color=projectile_color,
            falling=falling,
            particles=particles,
            particle_rgb=particle_rgb
        )
