"""
Solid Renderer
==============

Fast numpy-based renderer that draws orbs as solid-color circles.
Shows the walls, the aim line, the chevron ring state and the ceiling
countdown. No text is drawn.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

import numpy as np

from gauntlet.orb_core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the game board as solid-color circles.

    Board coordinates are y-down, matching image rows, so no flip is needed.
    The bottom strip holds one pip per chevron (bright when locked) and one
    pip per shot left before the ceiling descends.
    """

    def __init__(self, config: Optional[GameConfig] = None, show_hud: bool = True):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
            show_hud: Whether to draw the chevron / countdown strip.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._show_hud = show_hud

        self._bg_color = np.array([12, 14, 30], dtype=np.uint8)
        self._wall_color = np.array([60, 60, 80], dtype=np.uint8)
        self._aim_color = np.array([200, 200, 220], dtype=np.uint8)
        self._hud_bg = np.array([20, 20, 25], dtype=np.uint8)
        self._countdown_color = np.array([220, 120, 60], dtype=np.uint8)

        self._palette = [
            np.array(entry.color, dtype=np.uint8) for entry in config.palette
        ]

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from GauntletGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        hud_height = max(12, height // 10) if self._show_hud else 0
        game_height = height - hud_height

        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        board_width = render_data["board_width"]
        board_height = render_data["board_height"]
        scale = min(width / board_width, game_height / board_height)
        offset_x = (width - board_width * scale) / 2
        offset_y = (game_height - board_height * scale) / 2

        def to_img(x: float, y: float):
            return int(x * scale + offset_x), int(y * scale + offset_y)

        # Walls
        wall_thickness = max(1, int(4 * scale))
        for wall_x in (render_data["wall_left"], render_data["wall_right"]):
            wx, _ = to_img(wall_x, 0)
            x0 = max(0, wx - wall_thickness // 2)
            img[:game_height, x0:x0 + wall_thickness] = self._wall_color

        radius = max(1, int(render_data["orb_radius"] * scale))

        for orb in render_data["orbs"]:
            # Jiggling orbs are nudged sideways by their remaining countdown
            wobble = math.sin(orb["jiggle"]) * 2 if orb["jiggle"] > 0 else 0.0
            cx, cy = to_img(orb["x"] + wobble, orb["y"])
            self._draw_orb(img, cx, cy, radius, orb["color"])

        for orb in render_data["falling"]:
            cx, cy = to_img(orb["x"], orb["y"])
            self._draw_orb(img, cx, cy, radius, orb["color"])

        for particle in render_data["particles"]:
            cx, cy = to_img(particle["x"], particle["y"])
            size = max(1, int(particle["size"] * scale / 2))
            self._draw_circle(img, cx, cy, size, np.array(particle["rgb"], dtype=np.uint8))

        self._draw_aim_line(img, render_data, scale, offset_x, offset_y)

        for key in ("aiming", "projectile"):
            orb = render_data.get(key)
            if orb is not None:
                cx, cy = to_img(orb["x"], orb["y"])
                self._draw_orb(img, cx, cy, radius, orb["color"])

        if self._show_hud:
            self._draw_hud(img, render_data, width, height, hud_height)

        return img

    def _draw_orb(self, img: np.ndarray, cx: int, cy: int, radius: int, color_id: int) -> None:
        color = self._palette[color_id]
        self._draw_circle(img, cx, cy, radius, color)
        self._draw_circle_outline(img, cx, cy, radius, (color * 0.6).astype(np.uint8), 1)

    def _draw_aim_line(
        self,
        img: np.ndarray,
        render_data: Dict[str, Any],
        scale: float,
        offset_x: float,
        offset_y: float
    ) -> None:
        """Dotted guide from the launcher along the aim angle."""
        if render_data.get("aiming") is None:
            return
        lx, ly = render_data["launcher"]
        angle = render_data["aim_angle"]
        dx, dy = math.sin(angle), -math.cos(angle)
        dot = max(1, int(2 * scale))
        for step in range(2, 12):
            dist = step * 12.0
            cx = int((lx + dx * dist) * scale + offset_x)
            cy = int((ly + dy * dist) * scale + offset_y)
            self._draw_circle(img, cx, cy, dot, self._aim_color)

    def _draw_hud(
        self,
        img: np.ndarray,
        render_data: Dict[str, Any],
        width: int,
        height: int,
        hud_height: int
    ) -> None:
        hud_y = height - hud_height
        img[hud_y:, :] = self._hud_bg
        img[hud_y:hud_y + 1, :] = self._wall_color

        num_chevrons = self._config.rules.num_chevrons
        locked = set(render_data.get("locked", ()))
        pip = max(2, hud_height // 4)
        y_center = hud_y + hud_height // 2

        # Chevrons on the left half
        spacing = (width // 2) // (num_chevrons + 1)
        for i in range(num_chevrons):
            color = self._palette[i]
            if i not in locked:
                color = (color * 0.3).astype(np.uint8)
            self._draw_circle(img, spacing * (i + 1), y_center, pip, color)

        # Ceiling countdown on the right half
        shots_per_descent = self._config.rules.shots_before_descent
        remaining = render_data.get("shots_until_descent", 0)
        spacing = (width // 2) // (shots_per_descent + 1)
        for i in range(shots_per_descent):
            color = self._countdown_color if i < remaining else self._wall_color
            self._draw_circle(img, width // 2 + spacing * (i + 1), y_center, max(1, pip // 2), color)

    def _draw_circle(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        color: np.ndarray
    ) -> None:
        """Draw a filled circle using numpy."""
        height, width = img.shape[:2]

        y_min = max(0, cy - radius)
        y_max = min(height, cy + radius + 1)
        x_min = max(0, cx - radius)
        x_max = min(width, cx + radius + 1)

        if y_min >= y_max or x_min >= x_max:
            return

        yy, xx = np.meshgrid(
            np.arange(y_min, y_max), np.arange(x_min, x_max), indexing='ij'
        )
        mask = (xx - cx)**2 + (yy - cy)**2 <= radius**2
        img[y_min:y_max, x_min:x_max][mask] = color

    def _draw_circle_outline(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        color: np.ndarray,
        thickness: int = 1
    ) -> None:
        """Draw circle outline."""
        height, width = img.shape[:2]

        inner_r = max(0, radius - thickness)

        y_min = max(0, cy - radius)
        y_max = min(height, cy + radius + 1)
        x_min = max(0, cx - radius)
        x_max = min(width, cx + radius + 1)

        if y_min >= y_max or x_min >= x_max:
            return

        yy, xx = np.meshgrid(
            np.arange(y_min, y_max), np.arange(x_min, x_max), indexing='ij'
        )
        dist_sq = (xx - cx)**2 + (yy - cy)**2
        mask = (dist_sq <= radius**2) & (dist_sq >= inner_r**2)
        img[y_min:y_max, x_min:x_max][mask] = color

    def close(self) -> None:
        """Clean up resources (no-op for solid renderer)."""
        pass
