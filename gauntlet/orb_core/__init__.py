"""
Orb Core - The game simulation.

This module provides the tick-driven game simulation, the Gymnasium
environment wrapper, and all supporting systems (geometry, matching,
support, projectile, scoring, RNG, effects, sound).

Main exports:
- GauntletGame: Game simulation and state machine
- GauntletEnv: Gymnasium environment (one step = one shot)
- SoundBoard: Gesture-gated sound effect playback
- GameConfig: Configuration loaded from game_config.yaml
"""

from gauntlet.orb_core.config_loader import (
    GameConfig,
    LevelLayout,
    load_config,
    load_levels,
)
from gauntlet.orb_core.hex_geometry import HexGeometry
from gauntlet.orb_core.orb_grid import OrbGrid, RestingOrb
from gauntlet.orb_core.game import GameStatus, GauntletGame, TickResult
from gauntlet.orb_core.env_gym import GauntletEnv
from gauntlet.orb_core.sfx import SoundBoard
from gauntlet.orb_core.state_snapshot import GameSnapshot

__all__ = [
    "GameConfig",
    "LevelLayout",
    "load_config",
    "load_levels",
    "HexGeometry",
    "OrbGrid",
    "RestingOrb",
    "GameStatus",
    "GauntletGame",
    "TickResult",
    "GauntletEnv",
    "SoundBoard",
    "GameSnapshot",
]
