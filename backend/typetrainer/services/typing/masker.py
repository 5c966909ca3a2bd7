"""Per-word hidden character offsets."""

import random
from typing import FrozenSet, List, Sequence

from .levels import MaskStrategy

_default_rng = random.Random()

PARTIAL_HIDE_COUNTS = (2, 3)


def build_mask(strategy: MaskStrategy, word: str, rng=None) -> FrozenSet[int]:
    rng = rng or _default_rng
    length = len(word)
    if strategy == MaskStrategy.NONE or length == 0:
        return frozenset()
    if strategy == MaskStrategy.HEAD_ONLY:
        return frozenset({0})
    if strategy == MaskStrategy.PARTIAL_RANDOM:
        hide_count = min(rng.choice(PARTIAL_HIDE_COUNTS), length)
        if hide_count == length:
            return frozenset(range(length))
        hidden = set()
        while len(hidden) < hide_count:
            hidden.add(rng.randrange(length))
        return frozenset(hidden)
    raise ValueError(f"unsupported mask strategy: {strategy!r}")


def build_masks(strategy: MaskStrategy, words: Sequence, rng=None) -> List[FrozenSet[int]]:
    return [build_mask(strategy, item.word, rng) for item in words]


def visible_text(word: str, mask, char_index: int, placeholder: str = '_') -> str:
    """Apply the masking rule: typed or unmasked offsets show their glyph."""
    return ''.join(
        ch if (i < char_index or i not in mask) else placeholder
        for i, ch in enumerate(word)
    )
