"""
Tests for gesture-gated sound playback.

pygame.mixer is replaced with a recording fake so no audio device is needed.
"""

import dataclasses

import pygame
import pytest

from gauntlet.orb_core.config_loader import load_config
from gauntlet.orb_core.game import GauntletGame
from gauntlet.orb_core.sfx import EFFECT_NAMES, SoundBoard


class FakeSound:
    instances = []

    def __init__(self, path):
        self.path = path
        self.plays = 0
        self.volume = None
        FakeSound.instances.append(self)

    def set_volume(self, value):
        self.volume = value

    def play(self):
        self.plays += 1


class BrokenSound(FakeSound):
    def play(self):
        raise RuntimeError("device lost")


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def sound_dir(tmp_path, config):
    for filename in config.audio.effect_files().values():
        (tmp_path / filename).write_bytes(b"")
    return str(tmp_path)


@pytest.fixture
def fake_mixer(monkeypatch):
    FakeSound.instances = []
    monkeypatch.setattr(pygame.mixer, "get_init", lambda: (44100, -16, 2))
    monkeypatch.setattr(pygame.mixer, "init", lambda *args, **kwargs: None)
    monkeypatch.setattr(pygame.mixer, "Sound", FakeSound)
    return FakeSound


def plays_for(name):
    return sum(s.plays for s in FakeSound.instances if s.path.endswith(name + ".wav"))


class TestSoundBoard:
    """Test unlock gating and error swallowing."""

    def test_every_effect_has_a_file(self, config):
        """The config maps every effect name to a file."""
        assert set(config.audio.effect_files()) == set(EFFECT_NAMES)

    def test_silent_before_unlock(self, config, sound_dir, fake_mixer):
        """play() before unlock() is dropped, not queued."""
        board = SoundBoard(config, sound_dir=sound_dir)
        board.play("fire")
        assert FakeSound.instances == []
        board.unlock()
        assert plays_for("fire") == 0

    def test_plays_after_unlock(self, config, sound_dir, fake_mixer):
        """Unlocking preloads sounds and enables playback."""
        board = SoundBoard(config, sound_dir=sound_dir)
        board.unlock()
        assert board.unlocked
        assert len(FakeSound.instances) == len(EFFECT_NAMES)
        board.play("match")
        board.play("match")
        assert plays_for("match") == 2

    def test_volume_applied(self, config, sound_dir, fake_mixer):
        """Loaded sounds follow the board volume."""
        board = SoundBoard(config, sound_dir=sound_dir)
        board.unlock()
        board.set_volume(2.0)
        assert board.volume == 1.0
        assert all(s.volume == 1.0 for s in FakeSound.instances)

    def test_disabled_audio(self, config, sound_dir, fake_mixer):
        """Disabled audio never touches the mixer."""
        quiet = dataclasses.replace(
            config, audio=dataclasses.replace(config.audio, enabled=False)
        )
        board = SoundBoard(quiet, sound_dir=sound_dir)
        board.unlock()
        board.play("fire")
        assert FakeSound.instances == []

    def test_missing_files_are_ignored(self, config, tmp_path, fake_mixer):
        """Missing sound files are skipped silently."""
        board = SoundBoard(config, sound_dir=str(tmp_path / "nowhere"))
        board.unlock()
        board.play("snap")
        assert FakeSound.instances == []

    def test_unknown_effect_is_ignored(self, config, sound_dir, fake_mixer):
        """Unknown names are a no-op."""
        board = SoundBoard(config, sound_dir=sound_dir)
        board.unlock()
        board.play("fanfare")

    def test_playback_errors_swallowed(self, config, sound_dir, fake_mixer, monkeypatch):
        """Errors from the backend never reach the caller."""
        monkeypatch.setattr(pygame.mixer, "Sound", BrokenSound)
        board = SoundBoard(config, sound_dir=sound_dir)
        board.unlock()
        board.play("fire")

    def test_mixer_init_failure(self, config, sound_dir, monkeypatch):
        """No audio device leaves the board silent."""
        def no_device(*args, **kwargs):
            raise pygame.error("no audio device")

        monkeypatch.setattr(pygame.mixer, "get_init", lambda: None)
        monkeypatch.setattr(pygame.mixer, "init", no_device)
        board = SoundBoard(config, sound_dir=sound_dir)
        board.unlock()
        board.play("fire")
        assert board.unlocked


class TestGameSound:
    """Test the game driving the sound board."""

    def test_fire_plays_after_unlock(self, config, sound_dir, fake_mixer):
        """Game effects reach the board once audio is unlocked."""
        board = SoundBoard(config, sound_dir=sound_dir)
        game = GauntletGame(config=config, seed=0, sound=board)
        game.start(seed=0)
        game.fire()
        assert plays_for("fire") == 0

        game.tick()
        board.unlock()
        for _ in range(200):
            if game.aiming_orb is not None:
                break
            game.tick()
        game.fire()
        assert plays_for("fire") == 1
