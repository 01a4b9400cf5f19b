"""
Core Game
=========

Main game orchestrator combining the grid, projectile, match and support
engines, scoring, rules and effects into a tick-driven state machine.
"""

from __future__ import annotations

import itertools
import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set

from gauntlet.orb_core.config_loader import GameConfig, LevelLayout, get_config, load_levels
from gauntlet.orb_core.effects import EffectsLayer
from gauntlet.orb_core.hex_geometry import HexGeometry
from gauntlet.orb_core.orb_grid import OrbGrid
from gauntlet.orb_core.palette import OrbPalette, get_palette
from gauntlet.orb_core.projectile import (
    CollisionResolver,
    LandingResult,
    ProjectileOrb,
    resolve_landing,
)
from gauntlet.orb_core.rng import ColorQueue
from gauntlet.orb_core.rules import GameRules
from gauntlet.orb_core.scoring import ScoreTracker
from gauntlet.orb_core.sfx import SoundBoard
from gauntlet.orb_core.state_snapshot import GameSnapshot, SnapshotBuilder
from gauntlet.orb_core.timers import DelayTimer


class GameStatus(IntEnum):
    NOT_STARTED = 0
    PLAYING = 1
    LEVEL_CLEARED = 2
    GAME_OVER = 3


@dataclass
class TickResult:
    """Result of a single game tick."""
    status: GameStatus
    landing: Optional[LandingResult] = None
    descended: bool = False
    level_changed: bool = False
    delta_score: int = 0
    effects: List[str] = field(default_factory=list)


class GauntletGame:
    """
    Main game simulation class.

    Orchestrates:
    - Orb grid and hex geometry
    - Projectile flight and landing
    - Cluster matching and floating-orb detection
    - Color queue (RNG)
    - Scoring and chevron locks
    - Ceiling descent and termination rules
    - Falling orb / particle effects
    - State snapshots

    One tick = one rendered frame. The host loop calls tick() and feeds
    aim / fire input in between.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        levels: Optional[Sequence[LevelLayout]] = None,
        seed: Optional[int] = None,
        sound: Optional[SoundBoard] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            levels: Level layouts in play order. Loads levels.yaml if None.
            seed: Random seed for reproducibility.
            sound: Optional sound board for effect playback.
        """
        if config is None:
            config = get_config()
        if levels is None:
            levels = load_levels(config=config)
        if not levels:
            raise ValueError("At least one level is required")

        self._config = config
        self._levels = tuple(levels)
        self._seed = seed
        self._sound = sound

        # Initialize subsystems
        self._palette = get_palette(config)
        self._geometry = HexGeometry(config)
        self._resolver = CollisionResolver(self._geometry, config)
        self._scorer = ScoreTracker(config)
        self._colors = ColorQueue(config, seed)
        self._rules = GameRules(config)
        self._rng = random.Random(seed)
        self._effects = EffectsLayer(config, self._rng)
        self._snapshot_builder = SnapshotBuilder(config)
        self._level_timer = DelayTimer()
        self._uids = itertools.count(1)

        # Game state
        self._status = GameStatus.NOT_STARTED
        self._grid = OrbGrid(self._geometry)
        self._level_index: int = 0
        self._locked: Set[int] = set()
        self._aiming: Optional[ProjectileOrb] = None
        self._projectile: Optional[ProjectileOrb] = None
        self._aim_angle: float = 0.0
        self._shots_fired: int = 0
        self._ticks: int = 0
        self._termination_reason: str = ""
        self._emitted: List[str] = []

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def palette(self) -> OrbPalette:
        return self._palette

    @property
    def geometry(self) -> HexGeometry:
        return self._geometry

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def levels(self) -> tuple:
        return self._levels

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def grid(self) -> OrbGrid:
        """Resting orbs of the current level."""
        return self._grid

    @property
    def effects(self) -> EffectsLayer:
        """Falling orbs and particles."""
        return self._effects

    @property
    def aiming_orb(self) -> Optional[ProjectileOrb]:
        """Orb waiting in the launcher, or None while a shot is in flight."""
        return self._aiming

    @property
    def projectile(self) -> Optional[ProjectileOrb]:
        """Orb in flight, or None."""
        return self._projectile

    @property
    def next_color(self) -> int:
        """Preview color: the orb after the aiming orb."""
        return self._colors.next_color

    @property
    def aim_angle(self) -> float:
        return self._aim_angle

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def locked(self) -> FrozenSet[int]:
        """Colors whose chevron is locked on this level."""
        return frozenset(self._locked)

    @property
    def shots_until_descent(self) -> int:
        return self._rules.ceiling.shots_until_descent

    @property
    def shots_fired(self) -> int:
        """Shots fired since start()."""
        return self._shots_fired

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def level_index(self) -> int:
        return self._level_index

    @property
    def level_count(self) -> int:
        return len(self._levels)

    @property
    def level_clear_ticks_remaining(self) -> int:
        """Ticks until the next level loads (0 when no transition is pending)."""
        return self._level_timer.remaining if self._level_timer.active else 0

    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return self._status == GameStatus.GAME_OVER

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination_reason

    def start(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Begin a fresh run on the first level.

        Args:
            seed: New random seed. Continues the current streams if None.

        Returns:
            Initial game snapshot.
        """
        self._level_timer.cancel()

        if seed is not None:
            self._seed = seed
            self._rng.seed(seed)
        self._colors.reset(seed)

        self._scorer.reset()
        self._shots_fired = 0
        self._ticks = 0
        self._termination_reason = ""
        self._emitted = []

        self.load_level(0)
        return self.snapshot()

    def load_level(self, index: int) -> None:
        """
        Replace the board with a fresh copy of level ``index``.

        Score and the run's shot count carry over; everything tied to the
        level (grid, ceiling counter, locks, flight and effects) is reset
        and play resumes.
        """
        if not 0 <= index < len(self._levels):
            raise IndexError(f"Level {index} out of range [0, {len(self._levels)})")

        self._level_timer.cancel()
        self._status = GameStatus.PLAYING
        self._termination_reason = ""
        self._level_index = index
        self._grid = OrbGrid.from_layout(self._levels[index], self._geometry, self._uids)
        self._rules.reset()
        self._locked.clear()
        self._projectile = None
        self._aiming = None
        self._effects.clear()

        self._colors.prime()
        self._ensure_aiming_orb()

    def set_aim(self, angle: float) -> float:
        """Set the aim angle (radians from vertical), returning the clamped value."""
        self._aim_angle = self._rules.aim.clamp_angle(angle)
        return self._aim_angle

    def aim_at(self, x: float, y: float) -> float:
        """Aim the launcher at a pointer position in board pixels."""
        self._aim_angle = self._rules.aim.angle_towards(x, y)
        return self._aim_angle

    def fire(self) -> bool:
        """
        Launch the aiming orb along the current aim.

        Returns:
            True if a shot was fired. False while not playing, while a shot
            is already in flight, or with no aiming orb queued.
        """
        if self._status != GameStatus.PLAYING:
            return False
        if self._projectile is not None or self._aiming is None:
            return False

        orb = self._aiming
        orb.launch(self._rules.aim.launch_velocity(self._aim_angle))
        self._projectile = orb
        self._aiming = None
        self._rules.ceiling.record_shot()
        self._shots_fired += 1
        self._emit("fire")
        return True

    def lock_chevron(self, color: int) -> bool:
        """
        Lock the chevron owned by ``color``.

        Returns:
            True if the locked set grew.
        """
        grew = self._lock(color)
        if grew and self._status == GameStatus.PLAYING:
            self._on_lock_grew()
        return grew

    def tick(self) -> TickResult:
        """
        Advance the simulation by one frame.

        Returns:
            TickResult for this tick. Effects emitted by fire() since the
            previous tick are reported here too.
        """
        score_before = self._scorer.score
        result = TickResult(status=self._status)

        if self._status == GameStatus.PLAYING:
            self._ticks += 1
            self._tick_playing(result)
        elif self._status == GameStatus.LEVEL_CLEARED:
            self._ticks += 1
            self._effects.step()
            self._grid.decay_jiggle()
            fired = self._level_timer.tick()
            result.level_changed = fired and self._status == GameStatus.PLAYING

        result.status = self._status
        result.delta_score = self._scorer.score - score_before
        result.effects = self._emitted
        self._emitted = []
        return result

    def _tick_playing(self, result: TickResult) -> None:
        if self._rules.ceiling.descent_due:
            result.descended = True
            self._descend()
            if self._status != GameStatus.PLAYING:
                return

        self._effects.step()
        self._grid.decay_jiggle()

        if self._projectile is None:
            self._ensure_aiming_orb()
            return

        if self._resolver.advance(self._projectile, self._grid):
            result.landing = self._land()

    def _descend(self) -> None:
        max_row = self._grid.shift_down(1)
        self._rules.ceiling.complete_descent()
        term = self._rules.termination.check_descent(max_row)
        if term.terminated:
            self._end_game(term.reason)

    def _land(self) -> LandingResult:
        projectile = self._projectile
        self._projectile = None
        self._emit("snap")

        landing = resolve_landing(self._grid, projectile, self._config)

        grew = False
        if landing.matched:
            self._emit("match")
            self._scorer.apply_cluster(len(landing.removed), landing.color)
            for orb in landing.removed:
                self._effects.burst(orb.position, self._palette.rgb(orb.color), self._uids)
            for orb in landing.floating:
                self._effects.detach(orb)
            if landing.floating:
                self._scorer.apply_floating(len(landing.floating))
            grew = self._lock(landing.color)

        term = self._rules.termination.check_landing(landing.landing_row)
        if term.terminated:
            self._end_game(term.reason)
            return landing

        if grew:
            self._on_lock_grew()
        return landing

    def _lock(self, color: int) -> bool:
        if not self._palette.is_chevron_color(color) or color in self._locked:
            return False
        self._locked.add(color)
        return True

    def _on_lock_grew(self) -> None:
        if len(self._locked) >= self._palette.num_chevrons:
            self._emit("gate_open")
            self._status = GameStatus.LEVEL_CLEARED
            self._level_timer.start(
                self._config.rules.level_clear_delay_ticks,
                self._advance_level
            )
        else:
            self._emit("chevron_lock")

    def _advance_level(self) -> None:
        next_index = self._level_index + 1
        if next_index < self.level_count:
            self.load_level(next_index)
        else:
            self._end_game("all_levels_cleared")

    def _end_game(self, reason: str) -> None:
        self._level_timer.cancel()
        self._status = GameStatus.GAME_OVER
        self._termination_reason = reason
        self._projectile = None
        self._emit("game_over")

    def _ensure_aiming_orb(self) -> None:
        if self._aiming is not None or self._projectile is not None:
            return
        color = self._colors.draw(self._grid.colors_present())
        lx, ly = self._rules.aim.launcher_position
        self._aiming = ProjectileOrb(uid=next(self._uids), color=color, x=lx, y=ly)

    def _emit(self, name: str) -> None:
        self._emitted.append(name)
        if self._sound is not None:
            self._sound.play(name)

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            status=int(self._status),
            level_index=self._level_index,
            score=self._scorer.score,
            shots_until_descent=self.shots_until_descent,
            shots_fired=self._shots_fired,
            aim_angle=self._aim_angle,
            grid=self._grid,
            aiming=self._aiming,
            projectile=self._projectile,
            next_color=self.next_color,
            locked_colors=self._locked,
            effects=self._effects
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "status": self._status.name,
            "level_index": self._level_index,
            "shots_fired": self._shots_fired,
            "shots_until_descent": self.shots_until_descent,
            "orb_count": len(self._grid),
            "locked_count": len(self._locked),
            "clusters": self._scorer.clusters,
            "orbs_dropped": self._scorer.orbs_dropped,
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with orb positions, colors, effects and HUD values.
        """
        orbs_data = []
        for orb in self._grid:
            x, y = orb.position
            orbs_data.append({
                "uid": orb.uid,
                "color": orb.color,
                "row": orb.row,
                "col": orb.col,
                "x": x,
                "y": y,
                "jiggle": orb.jiggle,
            })

        def orb_dict(orb: Optional[ProjectileOrb]) -> Optional[Dict[str, Any]]:
            if orb is None:
                return None
            return {"uid": orb.uid, "color": orb.color, "x": orb.x, "y": orb.y}

        left_wall, right_wall = self._resolver.walls
        return {
            "board_width": self._config.board.width,
            "board_height": self._config.board.height,
            "orb_radius": self._geometry.orb_radius,
            "wall_left": left_wall - self._geometry.orb_radius,
            "wall_right": right_wall + self._geometry.orb_radius,
            "launcher": self._rules.aim.launcher_position,
            "aim_angle": self._aim_angle,
            "orbs": orbs_data,
            "aiming": orb_dict(self._aiming),
            "projectile": orb_dict(self._projectile),
            "next_color": self.next_color,
            "falling": [
                {"uid": f.uid, "color": f.color, "x": f.x, "y": f.y}
                for f in self._effects.falling
            ],
            "particles": [
                {"x": p.x, "y": p.y, "size": p.size, "life": p.life, "rgb": p.color}
                for p in self._effects.particles
            ],
            "locked": sorted(self._locked),
            "score": self._scorer.score,
            "shots_until_descent": self.shots_until_descent,
            "status": self._status.name,
            "level_index": self._level_index,
            "level_name": self._levels[self._level_index].name,
            "termination_reason": self._termination_reason,
        }
