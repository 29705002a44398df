from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional


def get_assets_root(config: Dict[str, Any]) -> Path:
    root = config.get("assets_root", "assets")
    return Path(root).expanduser().resolve()


def resolve_asset(config: Dict[str, Any], relative: Optional[str]) -> Optional[Path]:
    if not relative:
        return None
    candidate = Path(relative).expanduser()
    if not candidate.is_absolute():
        candidate = get_assets_root(config) / candidate
    if not candidate.exists():
        return None
    return candidate
