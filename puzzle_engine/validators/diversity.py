"""Item diversity validator."""

from collections import Counter
from typing import List, Optional, Sequence

import numpy as np

from ..models.groups import CandidateGroup
from ..models.items import Item
from ..models.quality import DiversityWeights, ValidationResult
from .base import QualityValidator, round_score

NEUTRAL_SCORE = 5.0
IDEAL_DECADES = 4
PASS_MARK = 5


def score_era_diversity(items: Sequence[Item], weights: DiversityWeights) -> float:
    """Reward many distinct decades with no single dominant decade."""
    decades = Counter(item.decade for item in items if item.decade is not None)
    if not decades:
        return NEUTRAL_SCORE

    unique = len(decades)
    uniqueness = min(10.0, unique / IDEAL_DECADES * 10)
    # Undated items still count toward the total, as in the spread denominator
    average = len(items) / unique
    balance = 10 * (1 - (max(decades.values()) - average) / len(items))

    total_weight = weights.era_uniqueness + weights.era_balance
    if total_weight == 0:
        return NEUTRAL_SCORE
    return (uniqueness * weights.era_uniqueness + balance * weights.era_balance) / total_weight


def score_popularity_diversity(items: Sequence[Item]) -> float:
    """Coefficient of variation of vote counts; a CV of 1.0 or more scores 10."""
    votes = np.array([item.vote_count for item in items if item.vote_count > 0], dtype=float)
    if votes.size == 0:
        return NEUTRAL_SCORE

    cv = votes.std() / votes.mean()
    return float(min(10.0, cv * 10))


class DiversityValidator(QualityValidator):
    """Scores spread across release eras and popularity levels."""

    name = "diversity"
    weight = 0.2

    def __init__(self, weights: Optional[DiversityWeights] = None):
        self.weights = weights or DiversityWeights()

    def validate(self, groups: Sequence[CandidateGroup]) -> ValidationResult:
        if not groups:
            return self.empty_result()

        items: List[Item] = [item for group in groups for item in group.items]
        era = score_era_diversity(items, self.weights)
        popularity = score_popularity_diversity(items)

        total_weight = self.weights.era + self.weights.popularity
        if total_weight == 0:
            average = (era + popularity) / 2
        else:
            average = (era * self.weights.era + popularity * self.weights.popularity) / total_weight

        return ValidationResult(
            score=max(0.0, min(10.0, round_score(average))),
            passed=average >= PASS_MARK,
            reason=f"Era: {era:.1f}/10, Popularity: {popularity:.1f}/10",
            metadata={
                "era_score": era,
                "popularity_score": popularity,
                "item_count": len(items),
            },
        )
