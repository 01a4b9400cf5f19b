"""
RNG - Color Queue
=================

Deterministic (seeded) choice of the aiming orb color and the next-orb
preview.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional

from gauntlet.orb_core.config_loader import GameConfig, get_config


class ColorQueue:
    """
    Two-slot queue: the preview color and the draw that consumes it.

    Drawing hands out the current preview and rolls a new one uniformly from
    the colors still on the board, so the player is never fed a color that
    can no longer be matched. With an empty board every chevron color is
    eligible.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize color queue.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._chevron_colors: List[int] = list(range(config.rules.num_chevrons))
        self._next: int = self._rng.choice(self._chevron_colors)

    @property
    def next_color(self) -> int:
        """Color of the orb after the current aiming orb."""
        return self._next

    def available_colors(self, grid_colors: Iterable[int]) -> List[int]:
        """
        Colors eligible for the next roll, in ascending order.

        Args:
            grid_colors: Colors currently resting in the grid.
        """
        present = sorted({c for c in grid_colors if 0 <= c < len(self._chevron_colors)})
        return present if present else list(self._chevron_colors)

    def roll(self, grid_colors: Iterable[int]) -> int:
        """Pick a color uniformly from the eligible set."""
        return self._rng.choice(self.available_colors(grid_colors))

    def prime(self) -> int:
        """
        Re-roll the preview from every chevron color (used on level load).

        Returns:
            The new preview color.
        """
        self._next = self._rng.choice(self._chevron_colors)
        return self._next

    def draw(self, grid_colors: Iterable[int]) -> int:
        """
        Consume the preview and roll a new one.

        Args:
            grid_colors: Colors currently resting in the grid.

        Returns:
            The color that was previewed (now the aiming orb's color).
        """
        consumed = self._next
        self._next = self.roll(grid_colors)
        return consumed

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the queue with optional new seed.

        Args:
            seed: New random seed. Keeps current generator if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self.prime()
