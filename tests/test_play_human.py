"""
Tests for the human play tool's click handling.

SDL runs on its dummy drivers so no window or audio device is opened.
"""

import pygame
import pytest

from gauntlet.orb_core.config_loader import LevelLayout, load_config
from gauntlet.orb_core.game import GameStatus, GauntletGame
from tools.play_human import HumanPlayer


@pytest.fixture
def player(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    player = HumanPlayer(config=load_config(), seed=4, mute=True)
    yield player
    pygame.quit()


class TestTrigger:
    """Test click / Space behaviour across game states."""

    def test_first_click_starts(self, player):
        """A click before the game starts begins play without firing."""
        assert player._game.status == GameStatus.NOT_STARTED
        player._trigger()
        assert player._game.status == GameStatus.PLAYING
        assert player._game.shots_fired == 0
        assert player._sound.unlocked

    def test_click_fires_while_playing(self, player):
        """Once playing a click fires the aiming orb."""
        player._trigger()
        player._trigger()
        assert player._game.projectile is not None
        assert player._game.shots_fired == 1

    def test_click_after_game_over_restarts(self, player):
        """A click on the game-over screen starts a fresh run."""
        config = player._config
        cells = {(r, 8): r % 2 for r in range(11)}
        player._game = GauntletGame(
            config=config,
            levels=[LevelLayout.from_cells(cells, config.grid.cols)],
            seed=4,
        )
        game = player._game
        game.start(seed=4)
        game.lock_chevron(0)
        orb = game.aiming_orb
        orb.x, orb.y, orb.color = 380, 420, 2
        game.set_aim(0.0)
        game.fire()
        for _ in range(100):
            game.tick()
            if game.is_over:
                break
        assert game.status == GameStatus.GAME_OVER

        player._trigger()
        assert game.status == GameStatus.PLAYING
        assert game.score == 0
        assert game.locked == frozenset()
        assert game.shots_fired == 0
