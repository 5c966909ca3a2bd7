import random
from typing import List, MutableSequence, Sequence

from .levels import LevelPreset
from .word_pool import WordItem

_default_rng = random.Random()


def shuffle(items: MutableSequence, rng=None) -> MutableSequence:
    """In-place Fisher-Yates shuffle driven by ``rng.randrange``."""
    rng = rng or _default_rng
    for i in range(len(items) - 1, 0, -1):
        j = rng.randrange(i + 1)
        items[i], items[j] = items[j], items[i]
    return items


def sample(pool: Sequence[WordItem], preset: LevelPreset, rng=None) -> List[WordItem]:
    """Pick the session words for ``preset`` from its slice of ``pool``."""
    candidates = preset.slice(pool)
    shuffle(candidates, rng)
    return candidates[:preset.sample_count]
