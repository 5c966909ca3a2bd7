"""Typing session state machine.

One ``SessionEngine`` owns one live session: the sampled words, their hidden
offsets, the cursor and the counters. Everything else is a collaborator that
only receives snapshots or commands:

- renderer: ``render(RenderState)`` and ``finish(SessionResult)``
- speaker: ``speak(word)`` / ``cancel()``; failures are logged and ignored
- reporter: ``report(wpm, level)``; see ``scoring.ScoreReporter``
- scheduler: ``schedule(delay_seconds, callback)`` for the pause between words

The advance callback carries the session ``generation`` it was scheduled for.
Every reset bumps the generation, so a timer left over from an abandoned
session finds a mismatch and does nothing.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import FrozenSet, List, Optional, Sequence

from .levels import DEFAULT_LEVEL, get_level
from .masker import build_masks, visible_text
from .sampler import sample
from .scoring import NullReporter, SessionResult, compute_wpm, elapsed_ms
from .word_pool import WordItem

logger = logging.getLogger(__name__)

ADVANCE_DELAY_MS = 1000


class SessionState(str, Enum):
    IDLE = 'idle'
    IN_PROGRESS = 'in_progress'
    AWAITING_ADVANCE = 'awaiting_advance'
    COMPLETED = 'completed'


@dataclass(frozen=True)
class RenderState:
    word: str
    meaning: str
    hidden_mask: FrozenSet[int]
    char_index: int
    show_wrong: bool
    remaining: int
    total: int
    display: str

    def to_dict(self):
        return {
            'word': self.word,
            'meaning': self.meaning,
            'hidden_mask': sorted(self.hidden_mask),
            'char_index': self.char_index,
            'show_wrong': self.show_wrong,
            'remaining': self.remaining,
            'total': self.total,
            'display': self.display,
        }


class InlineScheduler:
    """Runs the callback immediately; the pause between words is skipped."""

    def schedule(self, delay_seconds, callback):
        callback()


class _NullRenderer:
    def render(self, state):
        pass

    def finish(self, result):
        pass


class _NullSpeaker:
    def speak(self, word):
        pass

    def cancel(self):
        pass


def _wall_clock_ms() -> float:
    return time.time() * 1000


class SessionEngine:
    def __init__(
        self,
        pool: Sequence[WordItem] = (),
        renderer=None,
        speaker=None,
        reporter=None,
        scheduler=None,
        rng=None,
        clock=None,
        advance_delay_ms: float = ADVANCE_DELAY_MS,
        placeholder: str = '_',
        level: str = DEFAULT_LEVEL,
    ):
        self.pool = list(pool)
        self.renderer = renderer or _NullRenderer()
        self.speaker = speaker or _NullSpeaker()
        self.reporter = reporter or NullReporter()
        self.scheduler = scheduler or InlineScheduler()
        self.rng = rng
        self.clock = clock or _wall_clock_ms
        self.advance_delay_ms = advance_delay_ms
        self.placeholder = placeholder
        self.speech_enabled = True

        self.level = level
        self.words: List[WordItem] = []
        self.masks: List[FrozenSet[int]] = []
        self.word_index = 0
        self.char_index = 0
        self.correct_count = 0
        self.started_at: Optional[float] = None
        self.finished_at: Optional[float] = None
        self.awaiting_advance = False
        self.generation = 0
        self.result: Optional[SessionResult] = None

        self.reset_session(level)

    # ---- state ----

    @property
    def state(self) -> SessionState:
        if self.finished_at is not None:
            return SessionState.COMPLETED
        if self.awaiting_advance:
            return SessionState.AWAITING_ADVANCE
        if self.started_at is not None:
            return SessionState.IN_PROGRESS
        return SessionState.IDLE

    @property
    def total(self) -> int:
        return len(self.words)

    @property
    def current_item(self) -> Optional[WordItem]:
        if 0 <= self.word_index < len(self.words):
            return self.words[self.word_index]
        return None

    @property
    def current_mask(self) -> FrozenSet[int]:
        if 0 <= self.word_index < len(self.masks):
            return self.masks[self.word_index]
        return frozenset()

    def snapshot(self, show_wrong: bool = False) -> RenderState:
        item = self.current_item
        word = item.word if item else ''
        mask = self.current_mask
        return RenderState(
            word=word,
            meaning=item.meaning if item else '',
            hidden_mask=mask,
            char_index=self.char_index,
            show_wrong=show_wrong,
            remaining=max(self.total - self.word_index, 0),
            total=self.total,
            display=visible_text(word, mask, self.char_index, self.placeholder),
        )

    # ---- transitions ----

    def reset_session(self, level: Optional[str] = None) -> SessionState:
        """Start a fresh session for ``level`` (default: the active level).

        ``level`` must name a known preset; see ``levels.get_level``.
        """
        preset = get_level(self.level if level is None else level)
        self.level = preset.name
        self.generation += 1
        self.words = sample(self.pool, preset, self.rng)
        self.masks = build_masks(preset.mask_strategy, self.words, self.rng)
        self.word_index = 0
        self.char_index = 0
        self.correct_count = 0
        self.started_at = None
        self.finished_at = None
        self.awaiting_advance = False
        self.result = None
        logger.debug(
            f"[session-reset] level={self.level} generation={self.generation} words={len(self.words)}"
        )
        if self.words:
            self._render(False)
        else:
            self._finish()
        return self.state

    def select_level(self, level: str) -> SessionState:
        return self.reset_session(level)

    def restart(self) -> SessionState:
        return self.reset_session(self.level)

    def press(self, key) -> bool:
        """Feed one keystroke. Returns True when it matched the expected character."""
        if self.awaiting_advance or self.finished_at is not None:
            return False
        if not isinstance(key, str) or len(key) != 1 or not key.isprintable():
            return False

        if self.started_at is None:
            self.started_at = self.clock()
            self._speak_current()

        item = self.current_item
        if item is None or self.char_index >= len(item.word):
            return False
        expected = item.word[self.char_index]
        if key.lower() != expected.lower():
            self._render(True)
            return False

        self.char_index += 1
        self.correct_count += 1
        self._render(False)
        if self.char_index == len(item.word):
            self.awaiting_advance = True
            self.scheduler.schedule(
                self.advance_delay_ms / 1000,
                partial(self.advance, self.generation),
            )
        return True

    def advance(self, generation: int) -> bool:
        """Move past a finished word. Stale or unexpected calls are ignored."""
        if generation != self.generation or not self.awaiting_advance:
            logger.debug(
                f"[advance-stale] expected_generation={generation} live_generation={self.generation} "
                f"awaiting={self.awaiting_advance}"
            )
            return False
        self.word_index += 1
        self.char_index = 0
        self.awaiting_advance = False
        if self.word_index >= len(self.words):
            self._finish()
        else:
            self._render(False)
            self._speak_current()
        return True

    def set_speech_enabled(self, enabled: bool) -> None:
        self.speech_enabled = bool(enabled)
        if not self.speech_enabled:
            try:
                self.speaker.cancel()
            except Exception:
                logger.exception('[speech-cancel-failed]')
        elif self.finished_at is None:
            self._speak_current()

    # ---- internals ----

    def _render(self, show_wrong: bool) -> None:
        self.renderer.render(self.snapshot(show_wrong))

    def _speak_current(self) -> None:
        if not self.speech_enabled:
            return
        item = self.current_item
        if item is None:
            return
        try:
            self.speaker.speak(item.word)
        except Exception:
            logger.exception(f"[speech-failed] word={item.word!r}")

    def _finish(self) -> None:
        self.finished_at = self.clock()
        wpm = compute_wpm(self.correct_count, self.started_at, self.finished_at)
        self.result = SessionResult(
            wpm=wpm,
            correct_count=self.correct_count,
            elapsed_ms=elapsed_ms(self.started_at, self.finished_at),
            level=self.level,
        )
        logger.debug(f"[session-finish] level={self.level} wpm={wpm} correct={self.correct_count}")
        # report first so a failing renderer cannot lose the score
        self.reporter.report(wpm, self.level)
        self.renderer.finish(self.result)
