from __future__ import annotations

import math
from typing import Tuple

import pygame

from inkspell.spell.layout import SPACE, TextLayout

# Any alpha above this counts as glyph ink.
ALPHA_THRESHOLD = 0


def render_glyph_ink(
    surface: pygame.Surface,
    layout: TextLayout,
    font: pygame.font.Font,
    color: Tuple[int, ...],
) -> None:
    """Blit every placed glyph of ``layout`` onto ``surface``, nothing else."""
    for glyph in layout.glyphs():
        if glyph.char == SPACE:
            continue
        ink = font.render(glyph.char, True, color)
        surface.blit(ink, (int(glyph.x), int(glyph.y)))


class ReferenceMask:
    """Off-screen coverage map of the target phrase used for hit-testing."""

    def __init__(self, mask: pygame.mask.Mask) -> None:
        self._mask = mask

    @classmethod
    def rasterize(
        cls,
        layout: TextLayout,
        surface_width: int,
        surface_height: int,
        font: pygame.font.Font,
    ) -> "ReferenceMask":
        surface = pygame.Surface((max(1, surface_width), max(1, surface_height)), pygame.SRCALPHA)
        surface.fill((0, 0, 0, 0))
        render_glyph_ink(surface, layout, font, (0, 0, 0))
        return cls(pygame.mask.from_surface(surface, ALPHA_THRESHOLD))

    @property
    def size(self) -> Tuple[int, int]:
        return self._mask.get_size()

    def count(self) -> int:
        return self._mask.count()

    def is_on_glyph(self, x: float, y: float) -> bool:
        if not (math.isfinite(x) and math.isfinite(y)):
            return False
        px = math.floor(x)
        py = math.floor(y)
        width, height = self._mask.get_size()
        if px < 0 or py < 0 or px >= width or py >= height:
            return False
        return bool(self._mask.get_at((px, py)))
