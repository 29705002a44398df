from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Union

from inkspell.spell.ink import InkCapture, InkState, Point
from inkspell.spell.mask import ReferenceMask

PASS_THRESHOLD = 80


@dataclass(frozen=True)
class Score:
    percent: int
    passed: bool
    hits: int = 0
    total: int = 0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_passing(percent: int) -> bool:
    return percent >= PASS_THRESHOLD


def _committed_points(ink: Union[InkCapture, InkState]) -> Iterable[Point]:
    if isinstance(ink, InkCapture):
        return ink.all_points()
    return ink.committed_points()


def score(ink: Union[InkCapture, InkState], mask: ReferenceMask) -> Score:
    """Share of committed ink points that land on reference glyph pixels.

    The stroke still in progress does not count. No ink scores 0.
    """
    hits = 0
    total = 0
    for point in _committed_points(ink):
        total += 1
        if mask.is_on_glyph(point.x, point.y):
            hits += 1
    percent = round_half_up(100 * hits / total) if total else 0
    return Score(percent=percent, passed=is_passing(percent), hits=hits, total=total)
