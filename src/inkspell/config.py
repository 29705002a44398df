from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

Color = Tuple[int, int, int]

DEFAULT_CONFIG: Dict[str, Any] = {
    "assets_root": "assets",
    "log_level": "INFO",
    "launcher": {
        "apps": [
            {
                "name": "Spell",
                "icon_path": "assets/icons/spell.png",
                "command": "python -m inkspell.spell.app",
            },
            {
                "name": "Typing",
                "icon_path": "assets/icons/typing.png",
                "command": "python -m inkspell.typing.app",
            },
        ]
    },
    "practice": {
        "word": "cat",
        "explanation": "",
        "association": "",
    },
    "spell": {
        "surface_width": 650,
        "font_name": None,
        "font_size": 36,
        "bold": True,
        "line_height_ratio": 1.25,
        "padding": 30,
        "min_height": 400,
        "footer_margin": 40,
        "stylus_only": False,
        "windowed": False,
        "rounds": 1,
        "message_seconds": 1.5,
        "ink_color": [0, 122, 217],
        "ink_width": 4,
        "guide_color": [0, 0, 0, 64],
        "underline_color": [150, 150, 150],
        "ruling_color": [0, 0, 0, 38],
        "ruling_spacing": 30,
        "paper_color": [255, 248, 231],
    },
    "typing": {
        "pro_mode": False,
        "repeat_count": 1,
    },
    "sounds": {
        "success": "sounds/success.wav",
        "error": "sounds/error.wav",
        "click": "sounds/typewriter.wav",
    },
}


@dataclass(frozen=True)
class SpellSettings:
    surface_width: int = 650
    font_name: Optional[str] = None
    font_size: int = 36
    bold: bool = True
    line_height_ratio: float = 1.25
    padding: int = 30
    min_height: int = 400
    footer_margin: int = 40
    stylus_only: bool = False
    windowed: bool = False
    rounds: int = 1
    message_seconds: float = 1.5
    ink_color: Color = (0, 122, 217)
    ink_width: int = 4
    guide_color: Tuple[int, ...] = (0, 0, 0, 64)
    underline_color: Color = (150, 150, 150)
    ruling_color: Tuple[int, ...] = (0, 0, 0, 38)
    ruling_spacing: int = 30
    paper_color: Color = (255, 248, 231)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("INKSPELL_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("/opt/inkspell/config.yaml"),
    ])
    return paths


def load_config() -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config


def _coerce_int(value: object, default: int, *, minimum: int = 0) -> int:
    try:
        parsed = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= minimum else default


def _coerce_float(value: object, default: float, *, minimum: float = 0.0) -> float:
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return parsed if parsed > minimum else default


def _coerce_color(value: object, default: Tuple[int, ...]) -> Tuple[int, ...]:
    if not isinstance(value, (list, tuple)) or len(value) not in {3, 4}:
        return default
    try:
        channels = tuple(int(channel) for channel in value)
    except (TypeError, ValueError):
        return default
    if any(channel < 0 or channel > 255 for channel in channels):
        return default
    return channels


def spell_settings(config: Dict[str, Any]) -> SpellSettings:
    raw = config.get("spell", {}) or {}
    defaults = SpellSettings()
    font_name = raw.get("font_name")
    return SpellSettings(
        surface_width=_coerce_int(raw.get("surface_width"), defaults.surface_width, minimum=1),
        font_name=str(font_name) if font_name else None,
        font_size=_coerce_int(raw.get("font_size"), defaults.font_size, minimum=1),
        bold=bool(raw.get("bold", defaults.bold)),
        line_height_ratio=_coerce_float(raw.get("line_height_ratio"), defaults.line_height_ratio),
        padding=_coerce_int(raw.get("padding"), defaults.padding),
        min_height=_coerce_int(raw.get("min_height"), defaults.min_height, minimum=1),
        footer_margin=_coerce_int(raw.get("footer_margin"), defaults.footer_margin),
        stylus_only=bool(raw.get("stylus_only", defaults.stylus_only)),
        windowed=bool(raw.get("windowed", defaults.windowed)),
        rounds=_coerce_int(raw.get("rounds"), defaults.rounds, minimum=1),
        message_seconds=_coerce_float(raw.get("message_seconds"), defaults.message_seconds),
        ink_color=_coerce_color(raw.get("ink_color"), defaults.ink_color),  # type: ignore[arg-type]
        ink_width=_coerce_int(raw.get("ink_width"), defaults.ink_width, minimum=1),
        guide_color=_coerce_color(raw.get("guide_color"), defaults.guide_color),
        underline_color=_coerce_color(raw.get("underline_color"), defaults.underline_color),  # type: ignore[arg-type]
        ruling_color=_coerce_color(raw.get("ruling_color"), defaults.ruling_color),
        ruling_spacing=_coerce_int(raw.get("ruling_spacing"), defaults.ruling_spacing, minimum=1),
        paper_color=_coerce_color(raw.get("paper_color"), defaults.paper_color),  # type: ignore[arg-type]
    )
