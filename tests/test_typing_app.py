import pygame

from inkspell.typing.app import TypingTrainerApp, _summary_lines
from inkspell.typing.trainer import MistakeDetail, RoundSummary, TypingTrainer
from inkspell.ui.sound import SilentSoundPlayer


class CountingSounds(SilentSoundPlayer):
    def __init__(self):
        self.errors = 0
        self.clicks = 0

    def play_error(self):
        self.errors += 1

    def play_click(self):
        self.clicks += 1


def _app(phrase):
    app = TypingTrainerApp.__new__(TypingTrainerApp)
    app.trainer = TypingTrainer(phrase)
    app.sounds = CountingSounds()
    return app


def _key(key, unicode="", mod=0):
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode=unicode, mod=mod)


def test_handle_key_types_and_plays_feedback():
    app = _app("hi")
    assert app.handle_key(_key(pygame.K_h, "h"))
    assert app.handle_key(_key(pygame.K_x, "x"))
    assert app.trainer.index == 2
    assert app.sounds.clicks == 1
    assert app.sounds.errors == 1


def test_handle_key_backspace_and_escape():
    app = _app("hi")
    app.handle_key(_key(pygame.K_h, "h"))
    assert app.handle_key(_key(pygame.K_BACKSPACE, "\b"))
    assert app.trainer.index == 0
    assert not app.handle_key(_key(pygame.K_ESCAPE))


def test_handle_key_ignores_modified_keys_and_resets_on_ctrl_alt():
    app = _app("hi")
    app.handle_key(_key(pygame.K_h, "h", mod=pygame.KMOD_LCTRL))
    assert app.trainer.index == 0

    app.handle_key(_key(pygame.K_h, "h"))
    app.handle_key(_key(pygame.K_r, "r", mod=pygame.KMOD_LCTRL | pygame.KMOD_LALT))
    assert app.trainer.index == 0


def test_summary_lines_describe_mistakes():
    summary = RoundSummary(
        round_number=1,
        accuracy=50,
        seconds=3.25,
        mistakes=(MistakeDetail(position=1, expected="a", sequence="x•⌫•a", corrected=True),),
        all_corrected=True,
    )
    lines = _summary_lines(summary)
    assert lines[0] == "Round 1: 50% in 3.25 s"
    assert "x•⌫•a" in lines[1]
    assert "(corrected)" in lines[1]
    assert lines[-1] == "  All mistakes were corrected."
