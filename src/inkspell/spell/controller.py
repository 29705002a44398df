from __future__ import annotations

import enum
import logging
from typing import Callable, Optional

import pygame

from inkspell.config import SpellSettings
from inkspell.spell.ink import InkCapture, Point
from inkspell.spell.layout import LayoutOptions, SpellFont, TextLayout, layout_phrase, line_height_for, load_font
from inkspell.spell.mask import ReferenceMask
from inkspell.spell.scoring import Score, score
from inkspell.ui.common import POINTER_TOUCH
from inkspell.ui.sound import SilentSoundPlayer, SoundPlayer

logger = logging.getLogger(__name__)

PASS_MESSAGE = "Well done! Accuracy: {percent}%"
ROUND_MESSAGE = "Round {round} of {rounds} done ({percent}%). Keep going!"
FAIL_MESSAGE = "Accuracy: {percent}%. Try again!"


class SpellState(enum.Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    SCORING = "scoring"
    RETRY = "retry"
    COMPLETE = "complete"
    CLOSED = "closed"


_FINISHED_STATES = {SpellState.COMPLETE, SpellState.CLOSED}


class SpellGameController:
    def __init__(
        self,
        phrase: str,
        surface_width: int,
        font: pygame.font.Font,
        *,
        on_close: Callable[[], None],
        sounds: Optional[SoundPlayer] = None,
        notify: Optional[Callable[[str], None]] = None,
        stylus_only: bool = False,
        rounds: int = 1,
        layout_options: LayoutOptions = LayoutOptions(),
    ) -> None:
        if surface_width <= 0:
            raise ValueError(f"surface width must be positive, got {surface_width}")
        if rounds < 1:
            raise ValueError(f"rounds must be at least 1, got {rounds}")
        self.phrase = phrase
        self.surface_width = surface_width
        self.font = font
        self.layout_options = layout_options
        self.stylus_only = stylus_only
        self.rounds = rounds
        self.round = 1
        self.ink = InkCapture()
        self.state = SpellState.IDLE
        self.last_score: Optional[Score] = None
        self._on_close = on_close
        self._sounds: SoundPlayer = sounds or SilentSoundPlayer()
        self._notify = notify or (lambda _message: None)
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        phrase: str,
        settings: SpellSettings,
        *,
        on_close: Callable[[], None],
        surface_width: Optional[int] = None,
        sounds: Optional[SoundPlayer] = None,
        notify: Optional[Callable[[str], None]] = None,
    ) -> "SpellGameController":
        font = load_font(SpellFont(name=settings.font_name, size=settings.font_size, bold=settings.bold))
        options = LayoutOptions(
            padding=settings.padding,
            line_height=line_height_for(settings.font_size, settings.line_height_ratio),
            min_height=settings.min_height,
            footer_margin=settings.footer_margin,
        )
        return cls(
            phrase,
            surface_width or settings.surface_width,
            font,
            on_close=on_close,
            sounds=sounds,
            notify=notify,
            stylus_only=settings.stylus_only,
            rounds=settings.rounds,
            layout_options=options,
        )

    def layout(self) -> TextLayout:
        return layout_phrase(self.phrase, self.surface_width, self.font, self.layout_options)

    @property
    def surface_height(self) -> int:
        return self.layout().height

    @property
    def finished(self) -> bool:
        return self.state in _FINISHED_STATES

    def _accepts(self, pointer: str) -> bool:
        if self.finished:
            return False
        return not (self.stylus_only and pointer == POINTER_TOUCH)

    def pointer_down(self, point: Point, pointer: str = "mouse") -> bool:
        if not self._accepts(pointer):
            return False
        self.ink.begin_stroke(point)
        self.state = SpellState.DRAWING
        return True

    def pointer_move(self, point: Point, pointer: str = "mouse") -> bool:
        if not self._accepts(pointer):
            return False
        self.ink.extend_stroke(point)
        return self.ink.is_drawing

    def pointer_up(self, pointer: str = "mouse") -> bool:
        if not self._accepts(pointer):
            return False
        return self.ink.end_stroke() is not None

    def reset(self) -> None:
        if self.finished:
            return
        self.ink.reset()
        if self.state != SpellState.IDLE:
            self.state = SpellState.DRAWING

    def resize(self, surface_width: int) -> None:
        # Strokes keep their old coordinates; they are not reflowed.
        if surface_width <= 0 or surface_width == self.surface_width:
            return
        logger.debug("Relayout from width %d to %d", self.surface_width, surface_width)
        self.surface_width = surface_width

    def finish(self) -> Optional[Score]:
        if self.finished:
            return None
        self.state = SpellState.SCORING
        layout = self.layout()
        mask = ReferenceMask.rasterize(layout, self.surface_width, layout.height, self.font)
        result = score(self.ink, mask)
        self.last_score = result
        logger.info(
            "Spell attempt for %r scored %d%% (%d/%d points)",
            self.phrase,
            result.percent,
            result.hits,
            result.total,
        )

        if not result.passed:
            self._sounds.play_error()
            self._notify(FAIL_MESSAGE.format(percent=result.percent))
            self.ink.reset()
            self.state = SpellState.RETRY
            return result

        self._sounds.play_success()
        if self.round < self.rounds:
            self._notify(ROUND_MESSAGE.format(round=self.round, rounds=self.rounds, percent=result.percent))
            self.round += 1
            self.ink.reset()
            self.state = SpellState.DRAWING
            return result

        self._notify(PASS_MESSAGE.format(percent=result.percent))
        self.state = SpellState.COMPLETE
        self._signal_close()
        return result

    def close(self) -> None:
        if self.state != SpellState.COMPLETE:
            self.state = SpellState.CLOSED
        self._signal_close()

    def _signal_close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Spell session for %r closed in state %s", self.phrase, self.state.value)
        self._on_close()
