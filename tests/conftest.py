import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame
import pytest

from inkspell.spell.layout import SpellFont, load_font


class FixedWidthFont:
    """Measures every character as ``char_width`` wide."""

    def __init__(self, char_width=10, height=20, widths=None):
        self.char_width = char_width
        self.height = height
        self.widths = widths or {}

    def size(self, text):
        return (sum(self.widths.get(char, self.char_width) for char in text), self.height)


@pytest.fixture
def fixed_font():
    return FixedWidthFont()


@pytest.fixture(scope="session")
def spell_font():
    pygame.font.init()
    return load_font(SpellFont(name=None, size=36, bold=True))
