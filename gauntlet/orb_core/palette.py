"""
Orb Palette
===========

Provides convenient access to the orb colors loaded from config, and to the
subset of colors bound to gate chevrons.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from gauntlet.orb_core.config_loader import GameConfig, OrbColorConfig, get_config


@dataclass
class OrbColor:
    """
    Runtime representation of a palette color.

    Wraps OrbColorConfig with convenience properties for renderers.
    """
    config: OrbColorConfig

    @property
    def id(self) -> int:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def symbol(self) -> str:
        return self.config.symbol

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.config.color

    def __repr__(self) -> str:
        return f"OrbColor({self.id}: {self.name})"


class OrbPalette:
    """
    All orb colors in palette order.

    The first ``num_chevrons`` colors each own one gate chevron.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize palette from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._colors: Tuple[OrbColor, ...] = tuple(
            OrbColor(entry) for entry in config.palette
        )
        self._num_chevrons = config.rules.num_chevrons

    def __len__(self) -> int:
        return len(self._colors)

    def __getitem__(self, color_id: int) -> OrbColor:
        if 0 <= color_id < len(self._colors):
            return self._colors[color_id]
        raise IndexError(f"Color ID {color_id} out of range [0, {len(self._colors)})")

    def __iter__(self):
        return iter(self._colors)

    @property
    def num_chevrons(self) -> int:
        """Number of chevrons (one per leading palette color)."""
        return self._num_chevrons

    def is_chevron_color(self, color_id: int) -> bool:
        """Check if a color ID owns a chevron."""
        return 0 <= color_id < self._num_chevrons

    def rgb(self, color_id: int) -> Tuple[int, int, int]:
        return self[color_id].rgb


# Module-level singleton
_cached_palette: Optional[OrbPalette] = None


def get_palette(config: Optional[GameConfig] = None) -> OrbPalette:
    """
    Get the palette singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        OrbPalette instance.
    """
    global _cached_palette
    if _cached_palette is None or config is not None:
        _cached_palette = OrbPalette(config)
    return _cached_palette
