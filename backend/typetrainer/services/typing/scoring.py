import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

CHARS_PER_WORD = 5
MS_PER_MINUTE = 60000


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores round .5 upward
    return int(math.floor(value + 0.5))


def elapsed_ms(started_at: Optional[float], finished_at: float) -> float:
    """Session duration, floored at 1ms. An unset start counts as ``finished_at``."""
    start = finished_at if started_at is None else started_at
    return max(1, finished_at - start)


def compute_wpm(correct_count: int, started_at: Optional[float], finished_at: float) -> int:
    """WPM = (correct characters / 5) / minutes elapsed."""
    minutes = elapsed_ms(started_at, finished_at) / MS_PER_MINUTE
    return _round_half_up((correct_count / CHARS_PER_WORD) / minutes)


@dataclass(frozen=True)
class SessionResult:
    wpm: int
    correct_count: int
    elapsed_ms: float
    level: str

    @property
    def elapsed_seconds(self) -> float:
        return round(self.elapsed_ms / 1000, 1)

    def to_dict(self):
        return {
            'wpm': self.wpm,
            'correct_count': self.correct_count,
            'elapsed_ms': self.elapsed_ms,
            'elapsed_seconds': self.elapsed_seconds,
            'level': self.level,
        }


def run_inline(fn, *args) -> None:
    fn(*args)


def run_in_thread(fn, *args) -> None:
    threading.Thread(target=fn, args=args, daemon=True).start()


class ScoreReporter:
    """Hands a finished session's WPM to a persistence sink.

    The sink receives ``{'score': wpm, 'level': level}``. ``dispatch(fn, payload)``
    decides where the sink runs; pass ``run_in_thread`` (or the Flask layer's
    background dispatcher) so a slow sink never holds up the session.
    Failures inside the sink are logged and dropped.
    """

    def __init__(self, sink: Callable[[dict], object], dispatch: Optional[Callable] = None):
        self.sink = sink
        self.dispatch = dispatch or run_inline

    def report(self, wpm: int, level: str) -> None:
        self.dispatch(self._deliver, {'score': int(wpm), 'level': level})

    def _deliver(self, payload: dict) -> None:
        try:
            self.sink(payload)
        except Exception:
            logger.exception(f"[score-report-failed] payload={payload}")


class NullReporter:
    def report(self, wpm: int, level: str) -> None:
        pass
