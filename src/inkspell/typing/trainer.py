from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from inkspell.spell.scoring import round_half_up

logger = logging.getLogger(__name__)

BACKSPACE = "Backspace"
MAX_REPEAT = 10


class LetterColor(enum.Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class KeyResult(enum.Enum):
    CORRECT = "correct"
    CORRECTED = "corrected"
    WRONG = "wrong"
    BACK = "back"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Feedback:
    expected: str
    typed: str
    color: LetterColor


@dataclass(frozen=True)
class MistakeDetail:
    position: int
    expected: str
    sequence: str
    corrected: bool


@dataclass(frozen=True)
class RoundSummary:
    round_number: int
    accuracy: int
    seconds: float
    mistakes: Tuple[MistakeDetail, ...]
    all_corrected: bool


def _is_mistake(feedback: Feedback) -> bool:
    return feedback.color in {LetterColor.RED, LetterColor.YELLOW}


def _display_key(key: str) -> str:
    return "␣" if key == " " else key


def keystroke_sequence(keystrokes: List[str], position: int) -> List[str]:
    """Replay ``keystrokes`` and collect what was typed at ``position``.

    Backspaces that step back onto the position show up as ``⌫``.
    """
    sequence: List[str] = []
    cursor = 0
    for key in keystrokes:
        if key == BACKSPACE:
            if cursor > 0:
                cursor -= 1
                if cursor == position:
                    sequence.append("⌫")
        elif len(key) == 1:
            if cursor == position:
                sequence.append(_display_key(key))
            cursor += 1
    return sequence


class TypingTrainer:
    def __init__(
        self,
        phrase: str,
        *,
        pro_mode: bool = False,
        repeat_count: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not phrase:
            raise ValueError("typing trainer needs a non-empty phrase")
        self.phrase = phrase
        self.pro_mode = pro_mode
        self.repeat_count = max(1, min(MAX_REPEAT, repeat_count))
        self._clock = clock
        self.summaries: List[RoundSummary] = []
        self.completed_rounds = 0
        self.finished = False
        self._start_round()

    def _start_round(self) -> None:
        self.index = 0
        self.feedback: List[Feedback] = []
        self.colors: List[Optional[LetterColor]] = [None] * len(self.phrase)
        self._mistyped = [False] * len(self.phrase)
        self._keystrokes: List[str] = []
        self.started_at = self._clock()
        self.finished_at: Optional[float] = None

    def restart(self) -> None:
        self.summaries = []
        self.completed_rounds = 0
        self.finished = False
        self._start_round()

    def reset_round(self) -> None:
        if not self.finished:
            self._start_round()

    def set_repeat_count(self, value: int) -> None:
        self.repeat_count = max(1, min(MAX_REPEAT, value))

    @property
    def round_number(self) -> int:
        return min(self.completed_rounds + 1, self.repeat_count)

    def elapsed(self) -> float:
        end = self.finished_at if self.finished_at is not None else self._clock()
        return max(0.0, end - self.started_at)

    def live_accuracy(self) -> int:
        mistakes = sum(1 for item in self.feedback if _is_mistake(item))
        return round_half_up((len(self.phrase) - mistakes) / len(self.phrase) * 100)

    def press(self, key: str) -> KeyResult:
        if self.finished:
            return KeyResult.IGNORED
        if key == BACKSPACE:
            self._keystrokes.append(key)
            if self.index > 0:
                self.index -= 1
                self.feedback.pop()
                self.colors[self.index] = None
            return KeyResult.BACK
        if len(key) != 1 or self.index >= len(self.phrase):
            return KeyResult.IGNORED

        self._keystrokes.append(key)
        expected = self.phrase[self.index]
        was_mistyped = self._mistyped[self.index]
        if key == expected:
            color = LetterColor.YELLOW if was_mistyped else LetterColor.GREEN
            result = KeyResult.CORRECTED if was_mistyped else KeyResult.CORRECT
        else:
            color = LetterColor.RED
            result = KeyResult.WRONG

        self._mistyped[self.index] = was_mistyped or color is LetterColor.RED
        self.feedback.append(Feedback(expected=expected, typed=key, color=color))
        self.colors[self.index] = color
        self.index += 1

        if self.pro_mode and color is LetterColor.RED:
            logger.debug("Pro mode restart after mistyping %r", expected)
            self._start_round()
            return result

        if self.index == len(self.phrase):
            self._complete_round()
        return result

    def _complete_round(self) -> None:
        self.finished_at = self._clock()
        positions = [pos for pos, item in enumerate(self.feedback) if _is_mistake(item)]
        mistakes = tuple(
            MistakeDetail(
                position=pos + 1,
                expected="space" if self.phrase[pos] == " " else self.phrase[pos],
                sequence="•".join(keystroke_sequence(self._keystrokes, pos)) or self.phrase[pos],
                corrected=self.feedback[pos].color is LetterColor.YELLOW,
            )
            for pos in positions
        )
        summary = RoundSummary(
            round_number=self.completed_rounds + 1,
            accuracy=round_half_up((len(self.phrase) - len(positions)) / len(self.phrase) * 100),
            seconds=round(self.elapsed(), 2),
            mistakes=mistakes,
            all_corrected=all(item.color is not LetterColor.RED for item in self.feedback),
        )
        self.summaries.append(summary)
        self.completed_rounds += 1
        logger.info(
            "Typing round %d finished: %d%% in %.2fs",
            summary.round_number,
            summary.accuracy,
            summary.seconds,
        )
        if self.completed_rounds < self.repeat_count:
            self._start_round()
        else:
            self.finished = True
