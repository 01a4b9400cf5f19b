"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the orb gauntlet.
One step = one shot: aim, fire, and tick until the shot has resolved.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from gauntlet.orb_core.config_loader import GameConfig, load_config, load_levels
from gauntlet.orb_core.game import GameStatus, GauntletGame
from gauntlet.orb_core.render_solid import SolidRenderer
from gauntlet.orb_core.state_snapshot import GameSnapshot


class GauntletEnv(gym.Env):
    """
    Orb-matching gate game as a Gymnasium environment.

    Action Space:
        Box(low=-max_aim_angle, high=max_aim_angle, shape=(), dtype=float32)
        Aim angle in radians from vertical; positive leans right.

    Observation Space:
        Dict containing the grid color matrix, launcher colors, locked
        chevrons, score and countdowns, plus an optional RGB image.

    Reward:
        Score gained during the step.

    Info:
        Contains score, delta_score, shots_fired, terminated_reason, etc.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        levels_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            levels_path: Path to the level table. Uses the config's if None.
            render_mode: "rgb_array" for numpy, None for headless.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        self._config = load_config(config_path)
        levels = load_levels(levels_path, config=self._config)

        self.render_mode = render_mode
        self._image_obs = image_obs
        self._debug = debug

        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height

        self._game = GauntletGame(config=self._config, levels=levels)
        self._renderer: Optional[SolidRenderer] = None

        max_angle = self._config.projectile.max_aim_angle
        self.action_space = spaces.Box(
            low=-max_angle,
            high=max_angle,
            shape=(),
            dtype=np.float32
        )

        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] GauntletEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Levels: {len(levels)}")
            print(f"[DEBUG]   Max shots: {self._config.caps.max_shots}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        cfg = self._config
        rows, cols = cfg.grid.scan_rows, cfg.grid.cols
        num_colors = cfg.num_colors

        obs_dict = {
            "status": spaces.Box(low=0, high=len(GameStatus) - 1, shape=(), dtype=np.int32),
            "level_index": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "shots_until_descent": spaces.Box(
                low=0, high=cfg.rules.shots_before_descent, shape=(), dtype=np.int32
            ),
            "aim_angle": spaces.Box(
                low=-cfg.projectile.max_aim_angle,
                high=cfg.projectile.max_aim_angle,
                shape=(),
                dtype=np.float32
            ),
            "aiming_color": spaces.Box(low=-1, high=num_colors - 1, shape=(), dtype=np.int32),
            "next_color": spaces.Box(low=0, high=num_colors - 1, shape=(), dtype=np.int32),
            "locked_mask": spaces.MultiBinary(cfg.rules.num_chevrons),
            "grid_color": spaces.Box(low=-1, high=num_colors - 1, shape=(rows, cols), dtype=np.int16),
            "orb_count": spaces.Box(low=0, high=rows * cols, shape=(), dtype=np.int32),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.start(seed=seed)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[float, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one shot.

        Args:
            action: Aim angle in radians.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = float(action.item() if action.ndim == 0 else action[0])

        game = self._game
        score_before = game.score
        truncated_reason = ""

        game.set_aim(action)
        fired = game.fire()

        ticks = 0
        max_ticks = self._config.caps.max_ticks_per_shot
        while ticks < max_ticks:
            game.tick()
            ticks += 1
            if self._shot_resolved():
                break
        else:
            truncated_reason = "tick_cap"

        delta_score = game.score - score_before
        terminated = game.is_over

        if not terminated and not truncated_reason:
            cap = game.rules.termination.check_shot_cap(game.shots_fired)
            if cap.truncated:
                truncated_reason = cap.reason
        truncated = bool(truncated_reason) and not terminated

        obs = self._snapshot_to_obs(game.snapshot())
        reward = float(delta_score)

        info = game.get_info()
        info["delta_score"] = delta_score
        info["fired"] = fired
        info["ticks"] = ticks
        if truncated:
            info["truncated_reason"] = truncated_reason

        if self._debug:
            print(f"[DEBUG] Step: action={action:.3f}, fired={fired}, ticks={ticks}, "
                  f"delta_score={delta_score}, orbs={obs['orb_count']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")
            elif truncated:
                print(f"[DEBUG] TRUNCATED: {truncated_reason}")

        return obs, reward, terminated, truncated, info

    def _shot_resolved(self) -> bool:
        """True once the game is ready for the next aim or has ended."""
        game = self._game
        if game.status == GameStatus.GAME_OVER:
            return True
        if game.status != GameStatus.PLAYING:
            return False
        return game.projectile is None and game.aiming_orb is not None

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()

        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            self._renderer = SolidRenderer(self._config)

        return self._renderer.render(
            self._game.get_render_data(),
            self._img_width,
            self._img_height
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> GauntletGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
