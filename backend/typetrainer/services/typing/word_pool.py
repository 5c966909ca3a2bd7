"""Word pool loading.

The pool source is untrusted: a hand-edited JSON file, a network payload, an
embedded list. Everything downstream assumes each ``WordItem`` has a
non-empty ``word`` and a string ``meaning``, so this module is the one place
that enforces it. None of the loaders raise; bad input degrades to a shorter
(possibly empty) pool.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordItem:
    word: str
    meaning: str = ''

    def to_dict(self):
        return {'word': self.word, 'meaning': self.meaning}


def load(raw: Any) -> List[WordItem]:
    """Normalize parsed input into a list of ``WordItem``.

    - non-list input -> []
    - entries that are not mappings with a non-empty string ``word`` are dropped
    - a missing or non-string ``meaning`` becomes ''
    """
    if not isinstance(raw, (list, tuple)):
        return []
    items: List[WordItem] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        word = entry.get('word')
        if not isinstance(word, str) or not word:
            continue
        meaning = entry.get('meaning')
        items.append(WordItem(word=word, meaning=meaning if isinstance(meaning, str) else ''))
    return items


def loads(text) -> List[WordItem]:
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        parsed = []
    return load(parsed)


def load_file(path) -> List[WordItem]:
    """Read a UTF-8 JSON word file; unreadable files yield an empty pool."""
    try:
        with open(path, 'r', encoding='utf-8') as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"[words] could not read {path}: {exc}")
        return []
    items = loads(text)
    logger.info(f"[words] loaded {len(items)} entries from {path}")
    return items
