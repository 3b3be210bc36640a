"""Difficulty score helpers shared by analyzers and external group intake."""

from typing import Sequence

from ..models.items import Item

# Baseline from which average popularity is subtracted
DIFFICULTY_BASELINE = 10000

# Points per predefined difficulty level (1-5) when a group arrives with a level, not items
PREDEFINED_DIFFICULTY_STEP = 2000


def calculate_difficulty_score(items: Sequence[Item]) -> float:
    """Score items inversely to their average vote count; obscure items are harder."""
    if not items:
        return 0.0
    average_votes = sum(item.vote_count or 0 for item in items) / len(items)
    return DIFFICULTY_BASELINE - average_votes


def scale_predefined_difficulty(level: int) -> float:
    """Map a 1-5 difficulty level onto the analyzer score range."""
    return float(level * PREDEFINED_DIFFICULTY_STEP)


def normalize_difficulty_score(score: float) -> float:
    """Clamp a raw score to 0-10000 and express it as 0-100."""
    clamped = max(0.0, min(float(DIFFICULTY_BASELINE), score))
    return clamped / DIFFICULTY_BASELINE * 100
