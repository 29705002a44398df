from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

import pygame

from inkspell.config import load_config
from inkspell.log import configure_logging
from inkspell.phrase import phrase_from_config
from inkspell.typing.trainer import BACKSPACE, KeyResult, LetterColor, RoundSummary, TypingTrainer
from inkspell.ui.common import (
    Button,
    create_fullscreen_window,
    draw_close_button,
    is_primary_pointer_event,
    pointer_event_pos,
)
from inkspell.ui.sound import create_sound_player

logger = logging.getLogger(__name__)

CELL_COLORS = {
    LetterColor.GREEN: (144, 238, 144),
    LetterColor.RED: (255, 179, 179),
    LetterColor.YELLOW: (255, 255, 153),
}
CURRENT_CELL = (224, 224, 224)
MODIFIERS = pygame.KMOD_CTRL | pygame.KMOD_ALT | pygame.KMOD_META | pygame.KMOD_GUI


def _summary_lines(summary: RoundSummary) -> List[str]:
    lines = [f"Round {summary.round_number}: {summary.accuracy}% in {summary.seconds:.2f} s"]
    for mistake in summary.mistakes:
        status = "corrected" if mistake.corrected else "not corrected"
        lines.append(f"  Position {mistake.position}: expected '{mistake.expected}' -> {mistake.sequence} ({status})")
    if summary.all_corrected:
        lines.append("  All mistakes were corrected.")
    else:
        lines.append("  Some mistakes were never corrected.")
    return lines


class TypingTrainerApp:
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
        typing_config = self.config.get("typing", {}) or {}
        self.phrase = phrase if phrase is not None else phrase_from_config(self.config)
        self.trainer = TypingTrainer(
            self.phrase,
            pro_mode=bool(typing_config.get("pro_mode", False)),
            repeat_count=int(typing_config.get("repeat_count", 1) or 1),
        )

        if screen is None:
            self.screen, self.screen_rect = create_fullscreen_window()
        else:
            self.screen = screen
            self.screen_rect = screen_rect or screen.get_rect()
        self.clock = clock or pygame.time.Clock()
        self.sounds = create_sound_player(self.config)

        self.margin = 24
        self.ui_font = pygame.font.SysFont("sans", 22)
        self.cell_font = pygame.font.SysFont("monospace", 40)
        self.cell_w = self.cell_font.size("M")[0] + 10
        self.cell_h = self.cell_font.get_height() + 12
        self.cell_gap = 3

        button_h = self.ui_font.get_height() + 20
        bottom = self.screen_rect.bottom - self.margin - button_h
        self.restart_button = Button(
            rect=pygame.Rect(self.screen_rect.right - self.margin - 140, bottom, 140, button_h),
            label="Restart",
            fill=(245, 245, 245),
        )
        self.pro_button = Button(
            rect=pygame.Rect(self.margin, bottom, 160, button_h),
            label="Pro Mode",
            fill=(245, 245, 245),
        )
        self.repeat_down = Button(
            rect=pygame.Rect(self.pro_button.rect.right + 40, bottom, button_h, button_h),
            label="-",
            fill=(245, 245, 245),
        )
        self.repeat_up = Button(
            rect=pygame.Rect(self.repeat_down.rect.right + 90, bottom, button_h, button_h),
            label="+",
            fill=(245, 245, 245),
        )
        self.close_button = Button(
            rect=pygame.Rect(self.screen_rect.right - self.margin - 48, self.margin, 48, 48),
            fill=(240, 240, 240),
        )
        pygame.key.set_repeat(400, 30)

    def _cell_rect(self, index: int) -> pygame.Rect:
        usable = self.screen_rect.width - 2 * self.margin
        per_row = max(1, usable // (self.cell_w + self.cell_gap))
        row, col = divmod(index, per_row)
        top = self.margin + 140
        return pygame.Rect(
            self.margin + col * (self.cell_w + self.cell_gap),
            top + row * (self.cell_h + self.cell_gap),
            self.cell_w,
            self.cell_h,
        )

    def _play_feedback(self, result: KeyResult) -> None:
        if result is KeyResult.WRONG:
            self.sounds.play_error()
        elif result is not KeyResult.IGNORED:
            self.sounds.play_click()

    def handle_key(self, event: pygame.event.Event) -> bool:
        """Apply one KEYDOWN event; returns False when the app should close."""
        if event.key == pygame.K_ESCAPE:
            return False
        if (event.mod & pygame.KMOD_CTRL) and (event.mod & pygame.KMOD_ALT):
            self.trainer.reset_round()
            return True
        if event.key == pygame.K_BACKSPACE:
            self._play_feedback(self.trainer.press(BACKSPACE))
            return True
        if event.mod & MODIFIERS:
            return True
        if event.unicode and event.unicode.isprintable():
            self._play_feedback(self.trainer.press(event.unicode))
        return True

    def _handle_pointer_down(self, pos: Tuple[int, int]) -> bool:
        if self.close_button.hit(pos):
            self.sounds.play_click()
            return False
        if self.restart_button.hit(pos):
            self.sounds.play_click()
            self.trainer.restart()
        elif self.pro_button.hit(pos):
            self.trainer.pro_mode = not self.trainer.pro_mode
        elif self.repeat_down.hit(pos):
            self.trainer.set_repeat_count(self.trainer.repeat_count - 1)
        elif self.repeat_up.hit(pos):
            self.trainer.set_repeat_count(self.trainer.repeat_count + 1)
        return True

    def _draw_header(self) -> None:
        trainer = self.trainer
        lines = [f"Repeat: {trainer.round_number} / {trainer.repeat_count}"]
        if not trainer.finished:
            lines.append(f"Time: {trainer.elapsed():.1f} s    Accuracy: {trainer.live_accuracy()}%")
        y = self.margin
        for line in lines:
            surf = self.ui_font.render(line, True, (30, 30, 30))
            self.screen.blit(surf, (self.margin, y))
            y += self.ui_font.get_height() + 6

    def _draw_letters(self) -> None:
        trainer = self.trainer
        for idx, char in enumerate(trainer.phrase):
            rect = self._cell_rect(idx)
            color = trainer.colors[idx]
            is_current = idx == trainer.index and not trainer.finished
            if color is not None:
                pygame.draw.rect(self.screen, CELL_COLORS[color], rect, border_radius=3)
            elif is_current:
                pygame.draw.rect(self.screen, CURRENT_CELL, rect, border_radius=3)
            shown = "_" if char == " " else char
            ink = (170, 170, 170) if char == " " else (20, 20, 20)
            surf = self.cell_font.render(shown, True, ink)
            self.screen.blit(surf, surf.get_rect(center=rect.center))
            if is_current:
                pygame.draw.line(self.screen, (20, 20, 20), (rect.left + 4, rect.bottom - 4), (rect.right - 4, rect.bottom - 4), 3)

    def _draw_summary(self) -> None:
        if not self.trainer.finished:
            return
        lines = [f"Final summary ({len(self.trainer.summaries)} rounds)"]
        for summary in self.trainer.summaries:
            lines.extend(_summary_lines(summary))
        y = self._cell_rect(len(self.trainer.phrase) - 1).bottom + 30
        limit = self.restart_button.rect.top - 10
        for line in lines:
            if y + self.ui_font.get_height() > limit:
                break
            surf = self.ui_font.render(line, True, (40, 40, 40))
            self.screen.blit(surf, (self.margin, y))
            y += self.ui_font.get_height() + 4

    def _render(self) -> None:
        self.screen.fill((248, 248, 248))
        self._draw_header()
        self._draw_letters()
        self._draw_summary()

        self.pro_button.fill = (200, 230, 200) if self.trainer.pro_mode else (245, 245, 245)
        for button in (self.pro_button, self.repeat_down, self.repeat_up, self.restart_button):
            button.draw(self.screen, self.ui_font)
        count = self.ui_font.render(str(self.trainer.repeat_count), True, (30, 30, 30))
        gap_center = (self.repeat_down.rect.right + self.repeat_up.rect.left) // 2
        self.screen.blit(count, count.get_rect(center=(gap_center, self.repeat_down.rect.centery)))
        draw_close_button(self.screen, self.close_button.rect)
        pygame.display.flip()

    def run(self, *, quit_on_exit: bool = True) -> None:
        running = True
        self._render()
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self.handle_key(event)
                elif is_primary_pointer_event(event, is_down=True):
                    pos = pointer_event_pos(event, self.screen_rect)
                    if pos is not None:
                        running = self._handle_pointer_down(pos)
                if not running:
                    break

            self._render()
            self.clock.tick(60)

        if quit_on_exit:
            pygame.quit()


def main() -> None:
    config = load_config()
    configure_logging(config)
    phrase = " ".join(sys.argv[1:]) or None
    try:
        TypingTrainerApp(phrase, config=config).run(quit_on_exit=True)
    except Exception:
        logger.exception("Typing trainer stopped unexpectedly")
        pygame.quit()


def run_embedded(
    screen: pygame.Surface,
    screen_rect: pygame.Rect,
    clock: pygame.time.Clock,
    phrase: Optional[str] = None,
) -> None:
    TypingTrainerApp(phrase, screen=screen, screen_rect=screen_rect, clock=clock).run(quit_on_exit=False)


if __name__ == "__main__":
    main()
