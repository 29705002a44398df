import random
import string

import pytest

from inkspell.spell.layout import LayoutOptions, layout_phrase, line_height_for


def _random_phrase(rng, *, max_words=12, max_word_len=30):
    words = []
    for _ in range(rng.randint(1, max_words)):
        length = rng.randint(1, max_word_len)
        words.append("".join(rng.choice(string.ascii_letters + ".,!?'") for _ in range(length)))
    return " ".join(words)


def _chars(layout):
    return [glyph.char for glyph in layout.glyphs()]


def test_line_height_defaults_to_one_and_a_quarter_font_size():
    assert line_height_for(36) == 45
    assert line_height_for(32, 1.5) == 48


def test_empty_phrase_has_no_lines_and_minimum_height(fixed_font):
    layout = layout_phrase("", 650, fixed_font, LayoutOptions(min_height=400))
    assert layout.lines == ()
    assert layout.height == 400


def test_short_phrase_stays_on_one_line_with_spaces_placed(fixed_font):
    layout = layout_phrase("hello world", 200, fixed_font, LayoutOptions(padding=0))
    assert len(layout.lines) == 1
    assert "".join(_chars(layout)) == "hello world"
    space = layout.lines[0][5]
    assert space.char == " "
    assert space.x == 50


def test_wrap_moves_word_to_next_line_and_drops_space(fixed_font):
    options = LayoutOptions(padding=0, line_height=45)
    layout = layout_phrase("hello world", 60, fixed_font, options)
    assert ["".join(g.char for g in line) for line in layout.lines] == ["hello", "world"]
    second = layout.lines[1]
    assert second[0].x == 0
    assert second[0].y == 45


def test_long_word_breaks_with_hyphen_marker(fixed_font):
    layout = layout_phrase("abcdefghij", 40, fixed_font, LayoutOptions(padding=0))
    texts = ["".join(g.char for g in line) for line in layout.lines]
    assert texts == ["abc-", "def-", "ghij"]
    hyphens = [g for g in layout.glyphs() if g.hyphen]
    assert len(hyphens) == 2
    assert all(line[-1].hyphen for line in layout.lines[:-1])


def test_word_ending_exactly_at_boundary_gets_no_trailing_hyphen(fixed_font):
    layout = layout_phrase("abcdefgh", 40, fixed_font, LayoutOptions(padding=0))
    last_line = layout.lines[-1]
    assert not last_line[-1].hyphen
    assert last_line[-1].char == "h"


def test_long_word_after_short_word_starts_new_line(fixed_font):
    layout = layout_phrase("ab abcdefghij", 60, fixed_font, LayoutOptions(padding=0))
    texts = ["".join(g.char for g in line) for line in layout.lines]
    assert texts[0] == "ab"
    assert texts[1].startswith("abc")


def test_wrapped_lines_never_start_with_space(fixed_font):
    phrase = "one two three four five six seven eight nine ten"
    layout = layout_phrase(phrase, 100, fixed_font, LayoutOptions(padding=10))
    assert len(layout.lines) > 1
    for line in layout.lines[1:]:
        assert line[0].char != " "


def test_height_grows_with_line_count(fixed_font):
    options = LayoutOptions(padding=30, line_height=45, min_height=100, footer_margin=40)
    layout = layout_phrase("aa bb cc dd ee", 80, fixed_font, options)
    assert len(layout.lines) == 5
    assert layout.height == 5 * 45 + 2 * 30 + 40


def test_phrase_hyphens_are_not_marked_as_inserted(fixed_font):
    layout = layout_phrase("well-known", 650, fixed_font)
    assert "".join(_chars(layout)) == "well-known"
    assert not any(g.hyphen for g in layout.glyphs())


@pytest.mark.parametrize("seed", range(25))
def test_layout_is_deterministic(seed, fixed_font, spell_font):
    rng = random.Random(seed)
    phrase = _random_phrase(rng)
    width = rng.randint(120, 900)
    for font in (fixed_font, spell_font):
        assert layout_phrase(phrase, width, font) == layout_phrase(phrase, width, font)


@pytest.mark.parametrize("seed", range(25))
def test_every_character_is_placed_once_in_order(seed, spell_font):
    rng = random.Random(seed)
    phrase = _random_phrase(rng, max_word_len=60)
    layout = layout_phrase(phrase, rng.randint(150, 900), spell_font)
    placed = "".join(g.char for g in layout.glyphs() if not g.hyphen and g.char != " ")
    assert placed == phrase.replace(" ", "")
    spaces = sum(1 for g in layout.glyphs() if g.char == " ")
    assert spaces == phrase.count(" ") - (len(layout.lines) - 1) + sum(
        1 for line in layout.lines[:-1] if line[-1].hyphen
    )


@pytest.mark.parametrize("seed", range(25))
def test_glyphs_stay_inside_right_padding(seed, spell_font):
    rng = random.Random(seed)
    phrase = _random_phrase(rng, max_word_len=80)
    width = rng.randint(200, 900)
    layout = layout_phrase(phrase, width, spell_font)
    for glyph in layout.glyphs():
        assert glyph.x + glyph.width <= layout.right_limit
    assert layout.right_limit == width - layout.padding


@pytest.mark.parametrize("seed", range(10))
def test_lines_are_top_to_bottom(seed, fixed_font):
    rng = random.Random(seed)
    layout = layout_phrase(_random_phrase(rng), 300, fixed_font)
    for index, line in enumerate(layout.lines):
        assert {g.y for g in line} == {layout.padding + index * layout.line_height}
        xs = [g.x for g in line]
        assert xs == sorted(xs)


def test_leading_space_before_long_word_does_not_take_a_line(fixed_font):
    layout = layout_phrase(" abcdefghij", 40, fixed_font, LayoutOptions(padding=0))
    texts = ["".join(g.char for g in line) for line in layout.lines]
    assert texts == ["abc-", "def-", "ghij"]


def test_leading_spaces_before_wrapped_word_are_dropped(fixed_font):
    layout = layout_phrase("  abcd", 40, fixed_font, LayoutOptions(padding=0))
    texts = ["".join(g.char for g in line) for line in layout.lines]
    assert texts == ["abcd"]


def test_hyphen_is_left_out_when_it_cannot_fit(fixed_font):
    options = LayoutOptions(padding=30)
    layout = layout_phrase("aa", 70, fixed_font, options)
    texts = ["".join(g.char for g in line) for line in layout.lines]
    assert texts == ["a", "a"]
    assert not any(g.hyphen for g in layout.glyphs())
    for glyph in layout.glyphs():
        assert glyph.x + glyph.width <= layout.right_limit
