"""Difficulty presets."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional, Sequence, Tuple


class MaskStrategy(str, Enum):
    NONE = 'none'
    HEAD_ONLY = 'head_only'
    PARTIAL_RANDOM = 'partial_random'


class UnknownLevelError(KeyError):
    """Raised when a caller asks for a level that is not in ``LEVELS``."""


@dataclass(frozen=True)
class LevelPreset:
    name: str
    sample_count: int
    # [start, end); end=None means the whole pool
    pool_range: Tuple[int, Optional[int]]
    mask_strategy: MaskStrategy

    def slice(self, pool: Sequence) -> list:
        start, end = self.pool_range
        return list(pool[start:end])

    def to_dict(self):
        start, end = self.pool_range
        return {
            'name': self.name,
            'sample_count': self.sample_count,
            'pool_range': [start, end],
            'mask_strategy': self.mask_strategy.value,
        }


LEVELS = MappingProxyType({
    'beginner': LevelPreset('beginner', 30, (0, 300), MaskStrategy.NONE),
    'intermediate': LevelPreset('intermediate', 40, (0, None), MaskStrategy.HEAD_ONLY),
    'advanced': LevelPreset('advanced', 50, (0, None), MaskStrategy.PARTIAL_RANDOM),
})

DEFAULT_LEVEL = 'beginner'


def is_known_level(name) -> bool:
    return isinstance(name, str) and name in LEVELS


def get_level(name: str) -> LevelPreset:
    """Return the preset for ``name``.

    Passing an unknown name is a caller bug; transport code should check
    ``is_known_level`` first and report the problem to the client.
    """
    try:
        return LEVELS[name]
    except (KeyError, TypeError):
        raise UnknownLevelError(name) from None
