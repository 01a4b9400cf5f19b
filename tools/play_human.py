"""
Human Play Mode
================

Play the orb gauntlet interactively. One game tick runs per frame.

Controls:
    - Mouse: Aim the launcher
    - Click/Space: Fire (a click also starts or restarts the game and enables sound)
    - R: Restart game
    - M: Toggle sound
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--mute]
"""

from __future__ import annotations

import argparse
import math
import sys
from typing import Optional, Tuple

import pygame

from gauntlet.orb_core.config_loader import GameConfig, load_config
from gauntlet.orb_core.game import GameStatus, GauntletGame
from gauntlet.orb_core.sfx import SoundBoard


class GauntletRenderer:
    """
    Pygame renderer for human play mode: starfield backdrop, gate ring with
    one chevron per color, orbs labelled with their color's symbol.
    """

    def __init__(self, config: GameConfig):
        self._config = config
        self._width = config.board.width
        self._height = config.board.height

        self._bg_color = (8, 10, 24)
        self._wall_color = (50, 55, 80)
        self._ring_color = (90, 95, 120)
        self._text_color = (230, 230, 240)
        self._dim_text = (140, 140, 160)
        self._danger_color = (200, 60, 60)

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 56)
        self._font_medium = pygame.font.Font(None, 28)
        self._font_small = pygame.font.Font(None, 20)
        # Zodiac glyphs are missing from the bundled default font
        self._font_symbol = pygame.font.SysFont("dejavusans", 22)

        self._bg_surface = self._create_background()

    def _create_background(self) -> pygame.Surface:
        """Static starfield, seeded so it never flickers between runs."""
        surface = pygame.Surface((self._width, self._height))
        surface.fill(self._bg_color)
        for i in range(120):
            x = (i * 7919) % self._width
            y = (i * 104729) % self._height
            shade = 90 + (i * 37) % 120
            surface.set_at((x, y), (shade, shade, shade))
        return surface

    def render(self, screen: pygame.Surface, render_data: dict) -> None:
        """Render the complete game scene."""
        screen.blit(self._bg_surface, (0, 0))

        self._draw_walls(screen, render_data)
        self._draw_danger_line(screen, render_data)
        self._draw_gate(screen, render_data)

        radius = int(render_data["orb_radius"])
        for orb in render_data["orbs"]:
            offset = math.sin(orb["jiggle"]) * 2 if orb["jiggle"] > 0 else 0.0
            self._draw_orb(screen, orb["x"] + offset, orb["y"], radius, orb["color"])

        for orb in render_data["falling"]:
            self._draw_orb(screen, orb["x"], orb["y"], radius, orb["color"])

        for particle in render_data["particles"]:
            alpha = max(0.0, min(1.0, particle["life"] / 40.0))
            color = tuple(int(c * alpha) for c in particle["rgb"])
            pygame.draw.circle(
                screen, color,
                (int(particle["x"]), int(particle["y"])),
                max(1, int(particle["size"] / 2))
            )

        self._draw_launcher(screen, render_data, radius)
        self._draw_hud(screen, render_data)

        status = render_data["status"]
        if status == GameStatus.NOT_STARTED.name:
            self._draw_banner(screen, "CLICK TO BEGIN", "Aim with the mouse, click to fire")
        elif status == GameStatus.LEVEL_CLEARED.name:
            self._draw_banner(screen, "GATE OPEN", "Dialing the next address...")
        elif status == GameStatus.GAME_OVER.name:
            if render_data["termination_reason"] == "all_levels_cleared":
                title = "ALL GATES OPEN"
            else:
                title = "GAME OVER"
            self._draw_banner(screen, title, f"Score: {render_data['score']}   Click to re-engage")

    def _draw_walls(self, screen: pygame.Surface, render_data: dict) -> None:
        for x in (render_data["wall_left"], render_data["wall_right"]):
            pygame.draw.line(screen, self._wall_color, (int(x), 0), (int(x), self._height), 3)

    def _draw_danger_line(self, screen: pygame.Surface, render_data: dict) -> None:
        """Dashed line at the top of the first row that ends the game."""
        limit = self._config.rules.ceiling_row_limit
        y = int(limit * self._config.grid.row_spacing)
        left, right = int(render_data["wall_left"]), int(render_data["wall_right"])
        for x in range(left, right, 16):
            pygame.draw.line(screen, self._danger_color, (x, y), (min(x + 8, right), y), 1)

    def _draw_gate(self, screen: pygame.Surface, render_data: dict) -> None:
        """Gate ring in the lower left with one chevron per chevron color."""
        cx, cy, ring = 70, self._height - 90, 48
        pygame.draw.circle(screen, self._ring_color, (cx, cy), ring, 4)
        locked = set(render_data["locked"])
        num_chevrons = self._config.rules.num_chevrons
        for i in range(num_chevrons):
            angle = -math.pi / 2 + i * 2 * math.pi / num_chevrons
            px = cx + math.cos(angle) * ring
            py = cy + math.sin(angle) * ring
            color = self._config.palette[i].color
            if i not in locked:
                color = tuple(c // 4 for c in color)
            pygame.draw.circle(screen, color, (int(px), int(py)), 8)

    def _draw_orb(self, screen: pygame.Surface, x: float, y: float, radius: int, color_id: int) -> None:
        entry = self._config.palette[color_id]
        center = (int(x), int(y))
        pygame.draw.circle(screen, entry.color, center, radius - 1)
        pygame.draw.circle(screen, tuple(c // 2 for c in entry.color), center, radius - 1, 2)
        label = self._font_symbol.render(entry.symbol, True, (20, 20, 30))
        screen.blit(label, label.get_rect(center=center))

    def _draw_launcher(self, screen: pygame.Surface, render_data: dict, radius: int) -> None:
        lx, ly = render_data["launcher"]
        aiming = render_data["aiming"]
        if aiming is not None:
            angle = render_data["aim_angle"]
            dx, dy = math.sin(angle), -math.cos(angle)
            for step in range(2, 10):
                dist = step * 14
                pygame.draw.circle(
                    screen, self._dim_text,
                    (int(lx + dx * dist), int(ly + dy * dist)), 2
                )
            self._draw_orb(screen, aiming["x"], aiming["y"], radius, aiming["color"])

        projectile = render_data["projectile"]
        if projectile is not None:
            self._draw_orb(screen, projectile["x"], projectile["y"], radius, projectile["color"])

        # Preview beside the launcher
        self._draw_orb(screen, lx + 70, ly, radius // 2 + 4, render_data["next_color"])
        label = self._font_small.render("NEXT", True, self._dim_text)
        screen.blit(label, (lx + 55, ly - radius - 10))

    def _draw_hud(self, screen: pygame.Surface, render_data: dict) -> None:
        score = self._font_medium.render(f"Score: {render_data['score']}", True, self._text_color)
        screen.blit(score, (self._width - score.get_width() - 12, 12))

        level = self._font_small.render(
            f"Level {render_data['level_index'] + 1}: {render_data['level_name']}",
            True, self._dim_text
        )
        screen.blit(level, (12, 12))

        shots = render_data["shots_until_descent"]
        descent = self._font_small.render(f"Ceiling drops in {shots}", True, self._dim_text)
        screen.blit(descent, (self._width - descent.get_width() - 12, 40))

    def _draw_banner(self, screen: pygame.Surface, title: str, subtitle: str) -> None:
        overlay = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 140))
        screen.blit(overlay, (0, 0))

        text = self._font_large.render(title, True, self._text_color)
        screen.blit(text, text.get_rect(center=(self._width // 2, self._height // 2 - 20)))
        sub = self._font_medium.render(subtitle, True, self._dim_text)
        screen.blit(sub, sub.get_rect(center=(self._width // 2, self._height // 2 + 25)))


class HumanPlayer:
    """
    Human-playable gauntlet. The frame loop is the only tick driver.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: int = 60,
        mute: bool = False
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        self._sound = SoundBoard(config)
        if mute:
            self._sound.set_volume(0.0)
        self._game = GauntletGame(config=config, seed=seed, sound=self._sound)

        pygame.init()
        self._screen = pygame.display.set_mode((config.board.width, config.board.height))
        pygame.display.set_caption("Orb Gauntlet")
        self._clock = pygame.time.Clock()

        self._renderer = GauntletRenderer(config)
        self._running = True
        self._saved_volume = self._sound.volume

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Orb Gauntlet ===")
        print("Aim with the mouse, click or Space to fire")
        print("R to restart, M to toggle sound, ESC to quit")
        print()

        while self._running:
            self._handle_events()
            self._update()
            self._render()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.MOUSEMOTION:
                self._aim(event.pos)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()
                elif event.key == pygame.K_m:
                    self._toggle_sound()
                elif event.key == pygame.K_SPACE:
                    self._trigger()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._aim(event.pos)
                self._trigger()

    def _aim(self, pos: Tuple[int, int]) -> None:
        self._game.aim_at(pos[0], pos[1])

    def _trigger(self) -> None:
        """Click handler: unlock audio, start when idle or over, otherwise fire."""
        self._sound.unlock()
        if self._game.status in (GameStatus.NOT_STARTED, GameStatus.GAME_OVER):
            self._game.start(seed=self._seed)
            self._print_level()
            return
        self._game.fire()

    def _print_level(self) -> None:
        index = self._game.level_index
        print(f"Level {index + 1}/{self._game.level_count}: {self._game.levels[index].name}")

    def _toggle_sound(self) -> None:
        if self._sound.volume > 0:
            self._saved_volume = self._sound.volume
            self._sound.set_volume(0.0)
        else:
            self._sound.set_volume(self._saved_volume or self._config.audio.volume)

    def _update(self) -> None:
        result = self._game.tick()

        if result.delta_score > 0:
            print(f"  +{result.delta_score} (Total: {self._game.score})")
        if result.descended:
            print("  Ceiling descended")
        if "gate_open" in result.effects:
            print(f"\nGATE OPEN - Score: {self._game.score}")
        if result.level_changed:
            self._print_level()
        if "game_over" in result.effects:
            reason = self._game.termination_reason
            if reason == "all_levels_cleared":
                print(f"\nALL GATES OPEN - Score: {self._game.score}")
            else:
                print(f"\nGAME OVER ({reason}) - Score: {self._game.score}")

    def _restart(self) -> None:
        """Restart the game."""
        self._game.start(seed=self._seed)
        print("\n=== Game Restarted ===\n")

    def _render(self) -> None:
        self._renderer.render(self._screen, self._game.get_render_data())
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play the orb gauntlet interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--mute", action="store_true", help="Start with sound muted")

    args = parser.parse_args()

    config = load_config(args.config)
    player = HumanPlayer(
        config=config,
        seed=args.seed,
        target_fps=args.fps,
        mute=args.mute
    )
    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
