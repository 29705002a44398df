from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import pygame

from inkspell.paths import resolve_asset

logger = logging.getLogger(__name__)


class SoundPlayer(Protocol):
    def play_success(self) -> None: ...

    def play_error(self) -> None: ...

    def play_click(self) -> None: ...


class SilentSoundPlayer:
    def play_success(self) -> None:
        pass

    def play_error(self) -> None:
        pass

    def play_click(self) -> None:
        pass


def _load_sound(path: Optional[Path]) -> Optional[pygame.mixer.Sound]:
    if path is None:
        return None
    try:
        return pygame.mixer.Sound(str(path))
    except (pygame.error, OSError):
        logger.warning("Could not load sound %s", path)
        return None


class PygameSoundPlayer:
    """Plays the configured feedback sounds; any missing file stays silent."""

    def __init__(self, config: Dict[str, Any]) -> None:
        sounds = config.get("sounds", {}) or {}
        self._success = _load_sound(resolve_asset(config, sounds.get("success")))
        self._error = _load_sound(resolve_asset(config, sounds.get("error")))
        self._click = _load_sound(resolve_asset(config, sounds.get("click")))

    @staticmethod
    def _play(sound: Optional[pygame.mixer.Sound]) -> None:
        if sound is not None:
            sound.play()

    def play_success(self) -> None:
        self._play(self._success)

    def play_error(self) -> None:
        self._play(self._error)

    def play_click(self) -> None:
        self._play(self._click)


def create_sound_player(config: Dict[str, Any]) -> SoundPlayer:
    try:
        if pygame.mixer.get_init() is None:
            pygame.mixer.init()
    except pygame.error:
        logger.info("Audio unavailable, feedback sounds disabled")
        return SilentSoundPlayer()
    return PygameSoundPlayer(config)
