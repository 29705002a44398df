from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlparse


def is_valid_url(text: str) -> bool:
    try:
        parsed = urlparse(text.strip())
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def build_phrase(word: Optional[str], explanation: Optional[str] = None, association: Optional[str] = None) -> str:
    """Join a learning item into the phrase the practice games ask for.

    Parts are joined with `` - ``. An association that is a link is left out,
    since nobody should have to hand-write a URL.
    """
    parts = [word, explanation]
    if association and not is_valid_url(association):
        parts.append(association)
    raw = " - ".join(part for part in parts if part).strip()
    if not raw:
        return ""
    return raw[0].upper() + raw[1:]


def phrase_from_config(config: Dict[str, Any]) -> str:
    item = config.get("practice", {}) or {}
    return build_phrase(
        item.get("word"),
        item.get("explanation"),
        item.get("association"),
    )
