from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import pygame


Color = Tuple[int, int, int]
PixelPos = Tuple[int, int]

FINGERDOWN = getattr(pygame, "FINGERDOWN", None)
FINGERMOTION = getattr(pygame, "FINGERMOTION", None)
FINGERUP = getattr(pygame, "FINGERUP", None)
FINGER_EVENTS = {event for event in (FINGERDOWN, FINGERMOTION, FINGERUP) if event is not None}
WINDOWSIZECHANGED = getattr(pygame, "WINDOWSIZECHANGED", None)

POINTER_MOUSE = "mouse"
POINTER_TOUCH = "touch"

logger = logging.getLogger(__name__)


@dataclass
class Button:
    rect: pygame.Rect
    label: str = ""
    image: Optional[pygame.Surface] = None
    fill: Optional[Color] = None
    text_color: Color = (20, 20, 20)
    border_color: Optional[Color] = (30, 30, 30)
    border_width: int = 0

    def draw(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None) -> None:
        if self.fill is not None:
            pygame.draw.rect(surface, self.fill, self.rect, border_radius=12)
        if self.image is not None:
            surface.blit(self.image, self.image.get_rect(center=self.rect.center))
        if self.border_color is not None and self.border_width > 0:
            pygame.draw.rect(
                surface,
                self.border_color,
                self.rect,
                width=self.border_width,
                border_radius=12,
            )
        if self.label and font is not None:
            text = font.render(self.label, True, self.text_color)
            if self.image is None:
                text_rect = text.get_rect(center=self.rect.center)
            else:
                text_rect = text.get_rect(center=(self.rect.centerx, self.rect.bottom - 18))
            surface.blit(text, text_rect)

    def hit(self, pos: PixelPos) -> bool:
        return self.rect.collidepoint(pos)


def create_fullscreen_window(*, resizable: bool = False) -> Tuple[pygame.Surface, pygame.Rect]:
    pygame.init()
    if resizable:
        screen = pygame.display.set_mode((0, 0), pygame.RESIZABLE)
    else:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    pygame.mouse.set_visible(True)
    return screen, screen.get_rect()


def load_image(path: str, size: Optional[Tuple[int, int]] = None) -> Optional[pygame.Surface]:
    if not path:
        return None
    resolved = Path(path)
    if not resolved.exists():
        return None
    try:
        image = pygame.image.load(str(resolved)).convert_alpha()
    except pygame.error:
        logger.warning("Could not load image %s", resolved)
        return None
    if size:
        image = pygame.transform.smoothscale(image, size)
    return image


def draw_placeholder_icon(
    surface: pygame.Surface,
    rect: pygame.Rect,
    label: str,
    *,
    border_width: int = 0,
    border_color: Color = (40, 40, 40),
) -> None:
    pygame.draw.rect(surface, (220, 220, 220), rect, border_radius=16)
    if border_width > 0:
        pygame.draw.rect(surface, border_color, rect, width=border_width, border_radius=16)
    font = pygame.font.SysFont("sans", 28)
    text = font.render(label, True, (30, 30, 30))
    surface.blit(text, text.get_rect(center=rect.center))


def draw_close_button(
    surface: pygame.Surface,
    rect: pygame.Rect,
    *,
    border_width: int = 0,
    border_color: Color = (30, 30, 30),
) -> None:
    pygame.draw.rect(surface, (240, 240, 240), rect, border_radius=10)
    if border_width > 0:
        pygame.draw.rect(surface, border_color, rect, width=border_width, border_radius=10)
    inset = max(6, rect.width // 4)
    cross = rect.inflate(-inset * 2, -inset * 2)
    thickness = max(2, rect.width // 12)
    pygame.draw.line(surface, (50, 50, 50), cross.topleft, cross.bottomright, thickness)
    pygame.draw.line(surface, (50, 50, 50), cross.topright, cross.bottomleft, thickness)


def is_escape_chord(event: pygame.event.Event) -> bool:
    if event.type != pygame.KEYDOWN:
        return False
    if event.key != pygame.K_HOME:
        return False
    mods = event.mod
    has_ctrl = bool(mods & pygame.KMOD_CTRL)
    has_alt = bool(mods & pygame.KMOD_ALT)
    disallowed = (
        pygame.KMOD_SHIFT
        | pygame.KMOD_META
        | pygame.KMOD_GUI
        | getattr(pygame, "KMOD_ALTGR", 0)
    )
    return has_ctrl and has_alt and (mods & disallowed) == 0


def is_primary_pointer_event(event: pygame.event.Event, *, is_down: bool) -> bool:
    expected_type = pygame.MOUSEBUTTONDOWN if is_down else pygame.MOUSEBUTTONUP
    if event.type == expected_type:
        # Some touch stacks emit emulated mouse events with button 0.
        button = getattr(event, "button", 1)
        if button in {0, 1}:
            return True
        return bool(getattr(event, "touch", False))
    finger_type = FINGERDOWN if is_down else FINGERUP
    return finger_type is not None and event.type == finger_type


def is_pointer_motion(event: pygame.event.Event) -> bool:
    if event.type == pygame.MOUSEMOTION:
        return True
    return FINGERMOTION is not None and event.type == FINGERMOTION


def pointer_type(event: pygame.event.Event) -> str:
    if event.type in FINGER_EVENTS or getattr(event, "touch", False):
        return POINTER_TOUCH
    return POINTER_MOUSE


def pointer_event_pos(event: pygame.event.Event, screen_rect: pygame.Rect) -> Optional[PixelPos]:
    if hasattr(event, "pos"):
        return event.pos
    if event.type in FINGER_EVENTS:
        return (
            int(event.x * screen_rect.width),
            int(event.y * screen_rect.height),
        )
    return None


def is_resize_event(event: pygame.event.Event) -> bool:
    if event.type == pygame.VIDEORESIZE:
        return True
    return WINDOWSIZECHANGED is not None and event.type == WINDOWSIZECHANGED


def ignore_system_shortcut(event: pygame.event.Event) -> bool:
    if event.type != pygame.KEYDOWN:
        return False
    function_keys = {getattr(pygame, f"K_F{idx}") for idx in range(1, 13)}
    return event.key in function_keys


def set_env_for_child() -> dict:
    env = os.environ.copy()
    env["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"
    return env
