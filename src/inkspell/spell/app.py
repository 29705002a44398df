from __future__ import annotations

import logging
import sys
import time
from typing import Any, Dict, Optional, Sequence, Tuple

import pygame

from inkspell.config import load_config, spell_settings
from inkspell.log import configure_logging
from inkspell.phrase import phrase_from_config
from inkspell.spell.controller import SpellGameController, SpellState
from inkspell.spell.ink import Point, Stroke
from inkspell.spell.layout import TextLayout
from inkspell.spell.mask import render_glyph_ink
from inkspell.ui.common import (
    FINGER_EVENTS,
    Button,
    create_fullscreen_window,
    draw_close_button,
    is_pointer_motion,
    is_primary_pointer_event,
    is_resize_event,
    pointer_event_pos,
    pointer_type,
)
from inkspell.ui.sound import create_sound_player

logger = logging.getLogger(__name__)

UNDERLINE_GAP = 4
HEADER_HEIGHT = 60


def _split_alpha(color: Tuple[int, ...]) -> Tuple[Tuple[int, int, int], int]:
    if len(color) == 4:
        return (color[0], color[1], color[2]), color[3]
    return (color[0], color[1], color[2]), 255


def _draw_stroke(surface: pygame.Surface, points: Sequence[Point], color: Tuple[int, ...], width: int) -> None:
    if not points:
        return
    radius = max(1, width // 2)
    pixels = [(int(round(p.x)), int(round(p.y))) for p in points]
    if len(pixels) > 1:
        pygame.draw.lines(surface, color, False, pixels, width)
    # Round caps and joins.
    for pos in pixels:
        pygame.draw.circle(surface, color, pos, radius)


class SpellGameApp:
    def __init__(
        self,
        phrase: Optional[str] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
        screen: Optional[pygame.Surface] = None,
        screen_rect: Optional[pygame.Rect] = None,
        clock: Optional[pygame.time.Clock] = None,
    ) -> None:
        self.config = config or load_config()
        self.settings = spell_settings(self.config)
        self.phrase = phrase if phrase is not None else phrase_from_config(self.config)

        if screen is None:
            self.screen, self.screen_rect = create_fullscreen_window(resizable=self.settings.windowed)
        else:
            self.screen = screen
            self.screen_rect = screen_rect or screen.get_rect()
        self.clock = clock or pygame.time.Clock()

        self.margin = 16
        self.background = (244, 240, 232)
        self.ui_font = pygame.font.SysFont("sans", 22)
        self.message: Optional[str] = None
        self.message_until = 0.0
        self.close_at: Optional[float] = None
        self.running = True
        self.pointer_down = False

        self.controller = SpellGameController.from_settings(
            self.phrase,
            self.settings,
            on_close=self._on_close,
            surface_width=self._surface_width(),
            sounds=create_sound_player(self.config),
            notify=self._show_message,
        )
        self.canvas_rect = pygame.Rect(0, 0, 0, 0)
        self.finish_button = Button(rect=pygame.Rect(0, 0, 0, 0), label="Finish", fill=(120, 200, 120))
        self.reset_button = Button(rect=pygame.Rect(0, 0, 0, 0), label="Reset", fill=(245, 245, 245))
        self.close_button = Button(rect=pygame.Rect(0, 0, 0, 0), fill=(240, 240, 240))
        self._build_ui()

    def _surface_width(self) -> int:
        return max(1, min(self.settings.surface_width, self.screen_rect.width - 2 * self.margin))

    def _build_ui(self) -> None:
        width = self.controller.surface_width
        height = self.controller.surface_height
        self.canvas_rect = pygame.Rect(
            self.screen_rect.centerx - width // 2,
            self.margin + HEADER_HEIGHT,
            width,
            height,
        )
        button_w = 140
        button_h = self.ui_font.get_height() + 24
        gap = 20
        top = self.canvas_rect.bottom + gap
        self.finish_button.rect = pygame.Rect(self.screen_rect.centerx - button_w - gap // 2, top, button_w, button_h)
        self.reset_button.rect = pygame.Rect(self.screen_rect.centerx + gap // 2, top, button_w, button_h)
        close_size = 48
        self.close_button.rect = pygame.Rect(
            self.screen_rect.right - self.margin - close_size,
            self.margin,
            close_size,
            close_size,
        )

    def _show_message(self, message: str) -> None:
        self.message = message
        self.message_until = time.monotonic() + self.settings.message_seconds

    def _on_close(self) -> None:
        if self.controller.state == SpellState.COMPLETE:
            self.close_at = time.monotonic() + self.settings.message_seconds
        else:
            self.running = False

    def _check_close_timer(self) -> None:
        if self.close_at is not None and time.monotonic() >= self.close_at:
            self.running = False

    def _local_point(self, pos: Tuple[int, int]) -> Point:
        return Point(float(pos[0] - self.canvas_rect.left), float(pos[1] - self.canvas_rect.top))

    def _handle_resize(self) -> None:
        surface = pygame.display.get_surface()
        if surface is not None:
            self.screen = surface
            self.screen_rect = surface.get_rect()
        self.controller.resize(self._surface_width())
        self._build_ui()

    def _handle_pointer_down(self, event: pygame.event.Event) -> None:
        pos = pointer_event_pos(event, self.screen_rect)
        if pos is None:
            return
        if self.close_button.hit(pos):
            self.controller.close()
        elif self.finish_button.hit(pos):
            self.controller.finish()
        elif self.reset_button.hit(pos):
            self.controller.reset()
        elif self.canvas_rect.collidepoint(pos):
            self.pointer_down = self.controller.pointer_down(self._local_point(pos), pointer_type(event))

    def _handle_pointer_move(self, event: pygame.event.Event) -> None:
        if not self.pointer_down:
            return
        pos = pointer_event_pos(event, self.screen_rect)
        if pos is None:
            return
        self.controller.pointer_move(self._local_point(pos), pointer_type(event))

    def _handle_pointer_up(self, event: pygame.event.Event) -> None:
        if not self.pointer_down:
            return
        self.pointer_down = False
        self.controller.pointer_up(pointer_type(event))

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.controller.close()
            self.running = False
        elif event.type in FINGER_EVENTS:
            # Touches also arrive as emulated mouse events flagged with ``touch``.
            return
        elif is_resize_event(event):
            self._handle_resize()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.controller.close()
            elif event.key in {pygame.K_RETURN, pygame.K_KP_ENTER}:
                self.controller.finish()
            elif event.key == pygame.K_BACKSPACE:
                self.controller.reset()
        elif is_primary_pointer_event(event, is_down=True):
            self._handle_pointer_down(event)
        elif is_pointer_motion(event):
            self._handle_pointer_move(event)
        elif is_primary_pointer_event(event, is_down=False):
            self._handle_pointer_up(event)

    def _draw_ruling(self, canvas: pygame.Surface) -> None:
        layer = pygame.Surface(canvas.get_size(), pygame.SRCALPHA)
        spacing = self.settings.ruling_spacing
        width, height = canvas.get_size()
        for y in range(spacing, height, spacing):
            pygame.draw.line(layer, self.settings.ruling_color, (0, y), (width, y), 1)
        canvas.blit(layer, (0, 0))

    def _draw_guide(self, canvas: pygame.Surface, layout: TextLayout) -> None:
        rgb, alpha = _split_alpha(self.settings.guide_color)
        layer = pygame.Surface(canvas.get_size(), pygame.SRCALPHA)
        render_glyph_ink(layer, layout, self.controller.font, rgb)
        layer.set_alpha(alpha)
        canvas.blit(layer, (0, 0))

        baseline_offset = self.controller.font.get_height() + UNDERLINE_GAP
        for glyph in layout.glyphs():
            if glyph.hyphen:
                continue
            y = int(glyph.y) + baseline_offset
            start = (int(glyph.x), y)
            end = (int(glyph.right) - 1, y)
            pygame.draw.line(canvas, self.settings.underline_color, start, end, 2)

    def _draw_ink(self, canvas: pygame.Surface) -> None:
        color = self.settings.ink_color
        width = self.settings.ink_width
        strokes: Sequence[Stroke] = self.controller.ink.completed_strokes
        for stroke in strokes:
            _draw_stroke(canvas, stroke, color, width)
        _draw_stroke(canvas, self.controller.ink.active_stroke, color, width)

    def _draw_message(self) -> None:
        if self.message is None or time.monotonic() > self.message_until:
            self.message = None
            return
        text = self.ui_font.render(self.message, True, (255, 255, 255))
        box = text.get_rect(center=(self.screen_rect.centerx, self.margin + HEADER_HEIGHT // 2))
        pygame.draw.rect(self.screen, (40, 40, 40), box.inflate(32, 16), border_radius=12)
        self.screen.blit(text, box)

    def _render(self) -> None:
        layout = self.controller.layout()
        if layout.height != self.canvas_rect.height:
            self._build_ui()

        self.screen.fill(self.background)
        canvas = pygame.Surface(self.canvas_rect.size)
        canvas.fill(self.settings.paper_color)
        self._draw_ruling(canvas)
        self._draw_guide(canvas, layout)
        self._draw_ink(canvas)
        self.screen.blit(canvas, self.canvas_rect.topleft)
        pygame.draw.rect(self.screen, (0, 122, 217), self.canvas_rect, width=2, border_radius=8)

        self.finish_button.draw(self.screen, self.ui_font)
        self.reset_button.draw(self.screen, self.ui_font)
        draw_close_button(self.screen, self.close_button.rect)

        if self.controller.rounds > 1:
            label = self.ui_font.render(
                f"Round {self.controller.round} / {self.controller.rounds}", True, (60, 60, 60)
            )
            self.screen.blit(label, (self.margin, self.margin))
        self._draw_message()
        pygame.display.flip()

    def run(self, *, quit_on_exit: bool = True) -> None:
        self._render()
        while self.running:
            for event in pygame.event.get():
                self.handle_event(event)
            self._check_close_timer()
            self._render()
            self.clock.tick(60)

        if quit_on_exit:
            pygame.quit()


def main() -> None:
    config = load_config()
    configure_logging(config)
    phrase = " ".join(sys.argv[1:]) or None
    try:
        SpellGameApp(phrase, config=config).run(quit_on_exit=True)
    except Exception:
        logger.exception("Spell game stopped unexpectedly")
        pygame.quit()


def run_embedded(
    screen: pygame.Surface,
    screen_rect: pygame.Rect,
    clock: pygame.time.Clock,
    phrase: Optional[str] = None,
) -> None:
    SpellGameApp(phrase, screen=screen, screen_rect=screen_rect, clock=clock).run(quit_on_exit=False)


if __name__ == "__main__":
    main()
