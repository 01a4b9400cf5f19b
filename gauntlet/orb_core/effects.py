"""
Effects
=======

Falling orbs and burst particles. Neither feeds back into matching or
support; they only animate until they leave the board or expire.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from gauntlet.orb_core.config_loader import GameConfig, get_config
from gauntlet.orb_core.orb_grid import RestingOrb


@dataclass
class FallingOrb:
    """A former resting orb dropping off the board under gravity."""
    uid: int
    color: int
    x: float
    y: float
    vx: float
    vy: float

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class Particle:
    """Short-lived spark spawned when an orb is cleared."""
    uid: int
    x: float
    y: float
    vx: float
    vy: float
    life: float
    color: Tuple[int, int, int]
    size: float


class EffectsLayer:
    """
    Owns falling orbs and particles and steps them once per tick.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize effects.

        Args:
            config: Game configuration. Uses default if None.
            rng: Random source for spawn velocities. Unseeded if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else random.Random()
        self._gravity = config.physics.gravity
        # Falling orbs are dropped once fully below the board
        self._floor_y = config.board.height + config.grid.orb_diameter

        self.falling: List[FallingOrb] = []
        self.particles: List[Particle] = []

    def clear(self) -> None:
        self.falling.clear()
        self.particles.clear()

    def detach(self, orb: RestingOrb) -> FallingOrb:
        """
        Turn a resting orb into a falling one with a small random kick.

        The orb must already be removed from the grid.
        """
        physics = self._config.physics
        x, y = orb.position
        falling = FallingOrb(
            uid=orb.uid,
            color=orb.color,
            x=x,
            y=y,
            vx=(self._rng.random() - 0.5) * physics.fall_spread_x,
            vy=-self._rng.random() * physics.fall_lift_y
        )
        self.falling.append(falling)
        return falling

    def burst(
        self,
        position: Tuple[float, float],
        color: Tuple[int, int, int],
        uid_source: Iterator[int]
    ) -> List[Particle]:
        """Spawn the configured number of particles at ``position``."""
        cfg = self._config.particles
        spawned = []
        for _ in range(cfg.per_orb):
            particle = Particle(
                uid=next(uid_source),
                x=position[0],
                y=position[1],
                vx=(self._rng.random() - 0.5) * cfg.speed,
                vy=(self._rng.random() - 0.5) * cfg.speed,
                life=self._rng.uniform(cfg.min_life, cfg.max_life),
                color=color,
                size=self._rng.uniform(cfg.min_size, cfg.max_size)
            )
            spawned.append(particle)
        self.particles.extend(spawned)
        return spawned

    def step(self) -> None:
        """Advance particles and falling orbs by one tick."""
        for p in self.particles:
            p.x += p.vx
            p.y += p.vy
            p.life -= 1
        self.particles = [p for p in self.particles if p.life > 0]

        for orb in self.falling:
            orb.x += orb.vx
            orb.y += orb.vy
            orb.vy += self._gravity
        self.falling = [orb for orb in self.falling if orb.y < self._floor_y]

    @property
    def busy(self) -> bool:
        """True while anything is still animating."""
        return bool(self.falling or self.particles)
