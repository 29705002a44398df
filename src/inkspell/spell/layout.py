from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Protocol, Tuple

import pygame

HYPHEN = "-"
SPACE = " "


class TextMetrics(Protocol):
    def size(self, text: str) -> Tuple[int, int]: ...


@dataclass(frozen=True)
class SpellFont:
    name: Optional[str] = None
    size: int = 36
    bold: bool = True


@dataclass(frozen=True)
class PlacedGlyph:
    char: str
    x: float
    y: float
    width: float
    hyphen: bool = False

    @property
    def right(self) -> float:
        return self.x + self.width


LayoutLine = Tuple[PlacedGlyph, ...]


@dataclass(frozen=True)
class LayoutOptions:
    padding: int = 30
    line_height: int = 45
    min_height: int = 400
    footer_margin: int = 40


@dataclass(frozen=True)
class TextLayout:
    lines: Tuple[LayoutLine, ...]
    height: int
    line_height: int
    padding: int
    surface_width: int

    def glyphs(self) -> Iterator[PlacedGlyph]:
        for line in self.lines:
            yield from line

    @property
    def right_limit(self) -> int:
        return self.surface_width - self.padding


_FONT_CACHE: Dict[SpellFont, pygame.font.Font] = {}


def load_font(wanted: SpellFont) -> pygame.font.Font:
    """Return the pygame font for ``wanted``, building it once per process.

    The display pass and the scorer must measure with identical metrics, so
    both go through this cache instead of creating their own font objects.
    """
    cached = _FONT_CACHE.get(wanted)
    if cached is not None:
        return cached
    if not pygame.font.get_init():
        pygame.font.init()
    if wanted.name:
        font = pygame.font.SysFont(wanted.name, wanted.size, bold=wanted.bold)
    else:
        font = pygame.font.Font(None, wanted.size)
        font.set_bold(wanted.bold)
    _FONT_CACHE[wanted] = font
    return font


def line_height_for(font_size: int, ratio: float = 1.25) -> int:
    return max(1, math.floor(font_size * ratio + 0.5))


class _LineBuilder:
    def __init__(self, left: float, top: float, line_height: int) -> None:
        self.left = left
        self.top = top
        self.line_height = line_height
        self.lines: List[LayoutLine] = []
        self.current: List[PlacedGlyph] = []
        self.x = left

    @property
    def y(self) -> float:
        return self.top + len(self.lines) * self.line_height

    def is_empty(self) -> bool:
        return not self.current

    def place(self, char: str, width: float, *, hyphen: bool = False) -> None:
        self.current.append(PlacedGlyph(char=char, x=self.x, y=self.y, width=width, hyphen=hyphen))
        self.x += width

    def break_line(self) -> None:
        self.lines.append(tuple(self.current))
        self.current = []
        self.x = self.left

    def wrap(self) -> None:
        """Start a new line before a word; a line of only spaces is dropped."""
        if all(glyph.char == SPACE for glyph in self.current):
            self.current = []
            self.x = self.left
        else:
            self.break_line()

    def finish(self) -> Tuple[LayoutLine, ...]:
        if self.current:
            self.break_line()
        return tuple(self.lines)


def _place_broken_word(
    builder: _LineBuilder,
    word: str,
    widths: List[float],
    hyphen_width: float,
    limit: float,
) -> None:
    last = len(word) - 1
    for idx, (char, width) in enumerate(zip(word, widths)):
        # Every non-final character needs room for a hyphen after it.
        reserve = 0.0 if idx == last else hyphen_width
        if not builder.is_empty() and builder.x + width + reserve > limit:
            # Too narrow for even one character plus a hyphen: break bare.
            if builder.x + hyphen_width <= limit:
                builder.place(HYPHEN, hyphen_width, hyphen=True)
            builder.break_line()
        builder.place(char, width)


def layout_phrase(
    phrase: str,
    surface_width: int,
    font: TextMetrics,
    options: LayoutOptions = LayoutOptions(),
) -> TextLayout:
    """Greedy word-wrap of ``phrase`` into per-character positions.

    Words move to a new line when they (plus the pending space) would cross
    ``surface_width - padding``. Words wider than the whole usable width are
    broken character by character with a hyphen marker. Spaces at a wrap
    point are dropped, as are leading spaces that would otherwise fill a line
    of their own; every other character is placed exactly once, in order.

    A line always takes at least one character, so a single glyph wider than
    the usable width still overflows. The hyphen marker is left out when it
    would not fit next to that glyph.
    """
    padding = options.padding
    limit = surface_width - padding
    usable = max(0, surface_width - 2 * padding)
    widths_cache: Dict[str, float] = {}

    def char_width(char: str) -> float:
        width = widths_cache.get(char)
        if width is None:
            width = float(font.size(char)[0])
            widths_cache[char] = width
        return width

    builder = _LineBuilder(float(padding), float(padding), options.line_height)
    words = phrase.split(SPACE) if phrase else []
    for idx, word in enumerate(words):
        widths = [char_width(char) for char in word]
        word_width = sum(widths)
        fits_line = word_width <= usable

        if idx > 0:
            space_width = char_width(SPACE)
            if not builder.is_empty() and (not fits_line or builder.x + space_width + word_width > limit):
                builder.wrap()
            elif not (builder.is_empty() and builder.lines):
                builder.place(SPACE, space_width)

        if fits_line:
            if not builder.is_empty() and builder.x + word_width > limit:
                builder.wrap()
            for char, width in zip(word, widths):
                builder.place(char, width)
            continue

        if not builder.is_empty():
            builder.wrap()
        _place_broken_word(builder, word, widths, char_width(HYPHEN), limit)

    lines = builder.finish()
    needed = len(lines) * options.line_height + 2 * padding + options.footer_margin
    return TextLayout(
        lines=lines,
        height=max(options.min_height, needed),
        line_height=options.line_height,
        padding=padding,
        surface_width=surface_width,
    )
