"""
Sound Effects
=============

Fire-and-forget sound playback through pygame.mixer.

Nothing is audible until unlock() has been called from a user gesture;
earlier play() calls are dropped, not queued. A missing audio device,
missing files or playback errors never reach the game.
"""

from __future__ import annotations

import os
from typing import Dict, Optional

import pygame

from gauntlet.orb_core.config_loader import GameConfig, get_config

EFFECT_NAMES = ("fire", "snap", "match", "chevron_lock", "gate_open", "game_over")


class SoundBoard:
    """
    Named sound effects, silent until unlocked.

    Sounds are loaded on unlock and cached by effect name.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        sound_dir: Optional[str] = None
    ) -> None:
        """
        Initialize the sound board.

        Args:
            config: GameConfig instance. If None, loads from default location.
            sound_dir: Directory holding the effect files. Defaults to the
                config's audio.sound_dir beside game_config.yaml.
        """
        if config is None:
            config = get_config()

        audio = config.audio
        self.enabled = audio.enabled
        self.volume = max(0.0, min(1.0, float(audio.volume)))
        self.sound_dir = sound_dir or os.path.join(config.config_dir, audio.sound_dir)
        self._files: Dict[str, str] = audio.effect_files()
        self._cache: Dict[str, pygame.mixer.Sound] = {}
        self._unlocked = False

    @property
    def unlocked(self) -> bool:
        return self._unlocked

    def unlock(self) -> None:
        """Allow playback. Call from a click or key press."""
        if self._unlocked:
            return
        self._unlocked = True
        if not self.enabled:
            return
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
        except Exception:
            return
        for name in self._files:
            self._load(name)

    def set_volume(self, value: float) -> None:
        """Set playback volume, clamped to [0, 1]."""
        self.volume = max(0.0, min(1.0, float(value)))
        for sound in self._cache.values():
            try:
                sound.set_volume(self.volume)
            except Exception:
                pass

    def _load(self, name: str) -> Optional[pygame.mixer.Sound]:
        if name in self._cache:
            return self._cache[name]
        filename = self._files.get(name)
        if not filename:
            return None
        path = os.path.join(self.sound_dir, filename)
        if not os.path.exists(path):
            return None
        try:
            if not pygame.mixer.get_init():
                return None
            sound = pygame.mixer.Sound(path)
            sound.set_volume(self.volume)
        except Exception:
            return None
        self._cache[name] = sound
        return sound

    def play(self, name: str) -> None:
        """Play an effect by name. Dropped before unlock or when unavailable."""
        if not self._unlocked or not self.enabled:
            return
        sound = self._load(name)
        if sound is None:
            return
        try:
            sound.play()
        except Exception:
            pass


__all__ = ["SoundBoard", "EFFECT_NAMES"]
