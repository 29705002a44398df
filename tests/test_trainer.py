import pytest

from inkspell.typing.trainer import (
    BACKSPACE,
    KeyResult,
    LetterColor,
    TypingTrainer,
    keystroke_sequence,
)


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def _type(trainer, text):
    return [trainer.press(char) for char in text]


def test_clean_round_is_all_green():
    clock = FakeClock()
    trainer = TypingTrainer("cat", clock=clock)
    clock.now = 102.5
    assert _type(trainer, "cat") == [KeyResult.CORRECT] * 3

    assert trainer.finished
    summary = trainer.summaries[0]
    assert summary.accuracy == 100
    assert summary.seconds == 2.5
    assert summary.mistakes == ()
    assert summary.all_corrected


def test_corrected_mistake_turns_yellow_and_is_reported():
    trainer = TypingTrainer("ab")
    assert trainer.press("x") is KeyResult.WRONG
    assert trainer.colors[0] is LetterColor.RED
    assert trainer.press(BACKSPACE) is KeyResult.BACK
    assert trainer.colors[0] is None
    assert trainer.press("a") is KeyResult.CORRECTED
    assert trainer.press("b") is KeyResult.CORRECT

    summary = trainer.summaries[0]
    assert summary.accuracy == 50
    assert summary.all_corrected
    (mistake,) = summary.mistakes
    assert mistake.position == 1
    assert mistake.expected == "a"
    assert mistake.sequence == "x•⌫•a"
    assert mistake.corrected


def test_uncorrected_mistake_is_red():
    trainer = TypingTrainer("a b")
    _type(trainer, "a_b")
    summary = trainer.summaries[0]
    assert not summary.all_corrected
    (mistake,) = summary.mistakes
    assert mistake.expected == "space"
    assert not mistake.corrected
    assert summary.accuracy == 67


def test_pro_mode_restarts_round_on_mistake():
    trainer = TypingTrainer("cat", pro_mode=True)
    _type(trainer, "cx")
    assert trainer.index == 0
    assert trainer.feedback == []
    assert trainer.summaries == []


def test_repeat_rounds_then_finish():
    trainer = TypingTrainer("hi", repeat_count=2)
    _type(trainer, "hi")
    assert not trainer.finished
    assert trainer.round_number == 2
    assert trainer.index == 0
    _type(trainer, "hi")
    assert trainer.finished
    assert [s.round_number for s in trainer.summaries] == [1, 2]
    assert trainer.press("h") is KeyResult.IGNORED


def test_restart_clears_summaries():
    trainer = TypingTrainer("hi")
    _type(trainer, "hi")
    trainer.restart()
    assert not trainer.finished
    assert trainer.summaries == []
    assert trainer.round_number == 1


def test_non_character_keys_are_ignored():
    trainer = TypingTrainer("hi")
    assert trainer.press("Shift") is KeyResult.IGNORED
    assert trainer.press(BACKSPACE) is KeyResult.BACK
    assert trainer.index == 0


def test_live_accuracy_counts_mistakes_so_far():
    trainer = TypingTrainer("abcd")
    _type(trainer, "ax")
    assert trainer.live_accuracy() == 75


def test_repeat_count_is_clamped():
    trainer = TypingTrainer("hi", repeat_count=50)
    assert trainer.repeat_count == 10
    trainer.set_repeat_count(0)
    assert trainer.repeat_count == 1


def test_keystroke_sequence_replays_backspaces():
    keys = ["a", "x", BACKSPACE, BACKSPACE, "a", " "]
    assert keystroke_sequence(keys, 0) == ["a", "⌫", "a"]
    assert keystroke_sequence(keys, 1) == ["x", "⌫", "␣"]


def test_empty_phrase_is_rejected():
    with pytest.raises(ValueError):
        TypingTrainer("")
