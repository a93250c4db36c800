from __future__ import annotations

import random
from typing import Iterable


DEFAULT_WORDS = (
    "cat", "dog", "house", "tree", "car", "sun", "moon", "star", "fish", "bird",
    "apple", "banana", "pizza", "cake", "rainbow", "rocket", "castle", "dragon",
    "unicorn", "computer", "phone", "book", "mountain", "ocean", "giraffe",
    "elephant", "penguin", "butterfly", "flower", "heart", "smile", "fire",
)


def pick_words(words: Iterable[str], count: int, rng: random.Random | None = None) -> list[str]:
    # Dedup while keeping order so the sample is uniform over distinct words.
    pool = list(dict.fromkeys(w.strip() for w in words if w and w.strip()))
    if count <= 0 or not pool:
        return []
    return (rng or random).sample(pool, min(count, len(pool)))


class WordBank:
    """Immutable list of candidate words."""

    def __init__(self, words: Iterable[str] = DEFAULT_WORDS, rng: random.Random | None = None) -> None:
        self._words = tuple(dict.fromkeys(w.strip() for w in words if w and w.strip()))
        if not self._words:
            raise ValueError("word bank must not be empty")
        self._rng = rng

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def pick(self, count: int) -> list[str]:
        return pick_words(self._words, count, rng=self._rng)
