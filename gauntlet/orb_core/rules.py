"""
Game Rules
==========

Handles aiming, the shot-driven ceiling descent, and termination conditions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from gauntlet.orb_core.config_loader import GameConfig, get_config


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    truncated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, False, reason)

    @staticmethod
    def truncation(reason: str) -> "TerminationResult":
        return TerminationResult(False, True, reason)


class AimRules:
    """
    Converts aim input into launch velocities.

    Aim angles are measured from vertical: 0 fires straight up, positive
    angles lean right.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize aim rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._speed = config.projectile.speed
        self._max_angle = config.projectile.max_aim_angle
        self._launcher = (config.board.launcher_x, config.board.launcher_y)

    @property
    def launcher_position(self) -> Tuple[float, float]:
        """Where the aiming orb waits."""
        return self._launcher

    @property
    def max_angle(self) -> float:
        return self._max_angle

    def clamp_angle(self, angle: float) -> float:
        """Clamp an aim angle to [-max_aim_angle, max_aim_angle]."""
        return max(-self._max_angle, min(self._max_angle, float(angle)))

    def angle_towards(self, x: float, y: float) -> float:
        """
        Aim angle that points the launcher at a pointer position.

        Args:
            x: Pointer X in board pixels.
            y: Pointer Y in board pixels.

        Returns:
            Clamped aim angle in radians.
        """
        lx, ly = self._launcher
        return self.clamp_angle(math.atan2(x - lx, ly - y))

    def launch_velocity(self, angle: float) -> Tuple[float, float]:
        """Velocity of an orb fired at ``angle``."""
        angle = self.clamp_angle(angle)
        return (math.sin(angle) * self._speed, -math.cos(angle) * self._speed)


class CeilingRules:
    """
    Counts shots down to the next ceiling descent.

    Every successful fire takes one shot off the counter; when it reaches
    zero the whole grid moves down one row and the counter starts over.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._shots_per_descent = config.rules.shots_before_descent
        self._shots_until_descent = self._shots_per_descent
        self._descents = 0

    @property
    def shots_until_descent(self) -> int:
        return self._shots_until_descent

    @property
    def shots_per_descent(self) -> int:
        return self._shots_per_descent

    @property
    def descents(self) -> int:
        """Descents performed since the last reset."""
        return self._descents

    @property
    def descent_due(self) -> bool:
        return self._shots_until_descent <= 0

    def record_shot(self) -> None:
        self._shots_until_descent -= 1

    def complete_descent(self) -> None:
        """Restart the countdown after the grid has moved down."""
        self._shots_until_descent = self._shots_per_descent
        self._descents += 1

    def reset(self) -> None:
        self._shots_until_descent = self._shots_per_descent
        self._descents = 0


class TerminationRules:
    """
    Handles game termination conditions.

    - Landing breach: a projectile snapped at or below the ceiling limit row
    - Ceiling breach: a descent pushed the grid to the ceiling limit row
    - Shot cap: maximum shots per episode (truncation, for agents)
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._ceiling_row_limit = config.rules.ceiling_row_limit
        self._max_shots = config.caps.max_shots

    @property
    def ceiling_row_limit(self) -> int:
        """First row that ends the game when populated."""
        return self._ceiling_row_limit

    @property
    def max_shots(self) -> int:
        return self._max_shots

    def check_landing(self, landing_row: int) -> TerminationResult:
        """
        Check the row a projectile snapped into.

        The row is the one the orb was placed in, whether or not that orb
        survived the match step.
        """
        if landing_row >= self._ceiling_row_limit:
            return TerminationResult.game_over("landing_breach")
        return TerminationResult.none()

    def check_descent(self, max_row: int) -> TerminationResult:
        """Check the lowest populated row after a ceiling descent."""
        if max_row >= self._ceiling_row_limit:
            return TerminationResult.game_over("ceiling_breach")
        return TerminationResult.none()

    def check_shot_cap(self, shots_fired: int) -> TerminationResult:
        if shots_fired >= self._max_shots:
            return TerminationResult.truncation("shot_cap")
        return TerminationResult.none()


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.aim = AimRules(config)
        self.ceiling = CeilingRules(config)
        self.termination = TerminationRules(config)

    def reset(self) -> None:
        """Reset all rule state."""
        self.ceiling.reset()
