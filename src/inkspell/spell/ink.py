from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple


class Point(NamedTuple):
    x: float
    y: float


Stroke = Tuple[Point, ...]


@dataclass(frozen=True)
class InkState:
    completed_strokes: Tuple[Stroke, ...] = ()
    active_stroke: Stroke = ()

    def committed_points(self) -> List[Point]:
        return [point for stroke in self.completed_strokes for point in stroke]


class InkCapture:
    """Records freehand strokes for one game session.

    Pure recorder: callers decide which pointer events reach it.
    """

    def __init__(self) -> None:
        self._completed: List[Stroke] = []
        self._active: List[Point] = []
        self._drawing = False

    @property
    def completed_strokes(self) -> Tuple[Stroke, ...]:
        return tuple(self._completed)

    @property
    def active_stroke(self) -> Stroke:
        return tuple(self._active)

    @property
    def is_drawing(self) -> bool:
        return self._drawing

    def begin_stroke(self, point: Point) -> None:
        # A missed pointer-up leaves an unsealed stroke behind; drop it.
        self._active = [Point(float(point[0]), float(point[1]))]
        self._drawing = True

    def extend_stroke(self, point: Point) -> None:
        if not self._drawing:
            return
        self._active.append(Point(float(point[0]), float(point[1])))

    def end_stroke(self) -> Optional[Stroke]:
        sealed: Optional[Stroke] = None
        if self._drawing and self._active:
            sealed = tuple(self._active)
            self._completed.append(sealed)
        self._active = []
        self._drawing = False
        return sealed

    def reset(self) -> None:
        self._completed = []
        self._active = []
        self._drawing = False

    def all_points(self) -> List[Point]:
        return [point for stroke in self._completed for point in stroke]

    def state(self) -> InkState:
        return InkState(completed_strokes=self.completed_strokes, active_stroke=self.active_stroke)
