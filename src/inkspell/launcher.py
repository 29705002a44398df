from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import pygame

from inkspell.config import load_config
from inkspell.log import configure_logging
from inkspell.phrase import phrase_from_config
from inkspell.spell.app import run_embedded as run_spell_embedded
from inkspell.typing.app import run_embedded as run_typing_embedded
from inkspell.ui.common import (
    FINGER_EVENTS,
    Button,
    create_fullscreen_window,
    draw_placeholder_icon,
    ignore_system_shortcut,
    is_escape_chord,
    is_primary_pointer_event,
    load_image,
    pointer_event_pos,
    set_env_for_child,
)

logger = logging.getLogger(__name__)

Runner = Callable[[pygame.Surface, pygame.Rect, pygame.time.Clock, Optional[str]], None]


@dataclass
class LauncherApp:
    name: str
    icon_path: str
    command: List[str]


_EMBEDDED_RUNNERS: Dict[str, Runner] = {
    "inkspell.spell.app": run_spell_embedded,
    "inkspell.typing.app": run_typing_embedded,
}


def _parse_command(cmd: Any) -> List[str]:
    if isinstance(cmd, list):
        return [str(part) for part in cmd]
    if isinstance(cmd, str):
        return shlex.split(cmd)
    return []


def _load_apps(config: Dict[str, Any]) -> List[LauncherApp]:
    apps = []
    for app in config.get("launcher", {}).get("apps", []):
        apps.append(
            LauncherApp(
                name=str(app.get("name", "App")),
                icon_path=str(app.get("icon_path", "")),
                command=_parse_command(app.get("command", "")),
            )
        )
    return apps


def _resolve_command(command: List[str]) -> List[str]:
    if not command:
        return []
    executable = command[0]
    if executable not in {"python", "python3"}:
        return command
    interpreter = sys.executable or shutil.which("python3") or shutil.which("python")
    if interpreter:
        return [interpreter, *command[1:]]
    return command


def _embedded_runner_for_command(command: List[str]) -> Optional[Runner]:
    if "-m" not in command:
        return None
    idx = command.index("-m")
    if idx + 1 >= len(command):
        return None
    return _EMBEDDED_RUNNERS.get(command[idx + 1])


def _build_buttons(apps: List[LauncherApp], screen_rect: pygame.Rect) -> List[Button]:
    icon_size = max(120, int(min(screen_rect.width, screen_rect.height) * 0.18))
    gap = int(icon_size * 0.3)
    total_width = icon_size * len(apps) + gap * (len(apps) - 1)
    start_x = screen_rect.centerx - total_width // 2
    y = screen_rect.centery - icon_size // 2
    buttons = []
    for idx, app in enumerate(apps):
        rect = pygame.Rect(start_x + idx * (icon_size + gap), y, icon_size, icon_size)
        buttons.append(
            Button(
                rect=rect,
                label=app.name,
                image=load_image(app.icon_path, (icon_size, icon_size)),
                fill=(245, 245, 245),
            )
        )
    return buttons


def _launch_app(
    app: LauncherApp,
    phrase: str,
    screen: pygame.Surface,
    screen_rect: pygame.Rect,
    clock: pygame.time.Clock,
) -> bool:
    runner = _embedded_runner_for_command(app.command)
    if runner is not None:
        try:
            runner(screen, screen_rect, clock, phrase)
        except Exception:
            logger.exception("%s stopped unexpectedly", app.name)
        return False

    command = _resolve_command(app.command)
    if not command:
        return False
    try:
        child = subprocess.Popen(
            [*command, phrase],
            env=set_env_for_child(),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        child.wait()
    except OSError:
        logger.exception("Could not start %s", command)
        return False
    return True


def _restore_launcher_window() -> tuple[pygame.Surface, pygame.Rect]:
    existing = pygame.display.get_surface()
    if existing is not None:
        return existing, existing.get_rect()
    return create_fullscreen_window()


def _draw_launcher_frame(
    screen: pygame.Surface,
    background: tuple[int, int, int],
    phrase: str,
    apps: List[LauncherApp],
    buttons: List[Button],
    font: pygame.font.Font,
) -> None:
    screen.fill(background)
    title = font.render(phrase or "(no phrase)", True, (30, 30, 30))
    screen.blit(title, title.get_rect(center=(screen.get_rect().centerx, screen.get_rect().height // 5)))
    for app, button in zip(apps, buttons):
        if button.image is None:
            draw_placeholder_icon(screen, button.rect, app.name)
        else:
            button.draw(screen, font)
    pygame.display.flip()


def main() -> None:
    config = load_config()
    configure_logging(config)
    phrase = " ".join(sys.argv[1:]) or phrase_from_config(config)
    apps = _load_apps(config)
    screen, screen_rect = create_fullscreen_window()
    clock = pygame.time.Clock()
    background = (248, 244, 236)
    font = pygame.font.SysFont("sans", 36)

    buttons = _build_buttons(apps, screen_rect)
    pointer_block_until = 0.0
    logger.info("Launcher ready for %r", phrase)

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif is_escape_chord(event):
                running = False
            elif ignore_system_shortcut(event):
                continue
            elif is_primary_pointer_event(event, is_down=True):
                if time.monotonic() < pointer_block_until:
                    continue
                pos = pointer_event_pos(event, screen_rect)
                if pos is None:
                    continue
                for app, button in zip(apps, buttons):
                    if not button.hit(pos):
                        continue
                    if _launch_app(app, phrase, screen, screen_rect, clock):
                        screen, screen_rect = _restore_launcher_window()
                        buttons = _build_buttons(apps, screen_rect)
                    # Drop taps that queued up while the game was open.
                    pygame.event.clear([pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, *FINGER_EVENTS])
                    pointer_block_until = time.monotonic() + 0.25
                    break

        _draw_launcher_frame(screen, background, phrase, apps, buttons, font)
        clock.tick(60)

    pygame.quit()


if __name__ == "__main__":
    main()
