"""Difficulty balance validator."""

from collections import Counter
from typing import Dict, List, Sequence

from ..core.selector import assign_tier
from ..models.groups import CandidateGroup
from ..models.quality import ValidationResult
from .base import QualityValidator, round_score

QUARTILES = ["Q1", "Q2", "Q3", "Q4"]
PASS_MARK = 6


class DifficultyBalanceValidator(QualityValidator):
    """Checks that groups spread evenly across difficulty quartiles.

    Quartiles are assigned by sorted position exactly as the selector does, so
    a selector-built puzzle of four groups always scores 10. Only quartiles
    that actually occur contribute to the deviation.
    """

    name = "difficulty"
    weight = 0.2

    def validate(self, groups: Sequence[CandidateGroup]) -> ValidationResult:
        if not groups:
            return self.empty_result()

        total = len(groups)
        ordered = sorted(groups, key=lambda group: group.difficulty_score)
        quartiles = [QUARTILES[assign_tier(index, total, 4)] for index in range(len(ordered))]
        distribution: Dict[str, int] = dict(Counter(quartiles))

        ideal = total / 4
        deviation = sum(abs(count - ideal) for count in distribution.values())
        score = round_score(10 * (1 - deviation / total))

        return ValidationResult(
            score=max(0.0, score),
            passed=score >= PASS_MARK,
            reason=self._reason(distribution, score),
            metadata={"distribution": distribution, "quartiles": quartiles},
        )

    @staticmethod
    def _reason(distribution: Dict[str, int], score: float) -> str:
        counts: List[str] = [str(distribution.get(quartile, 0)) for quartile in QUARTILES]
        summary = "-".join(counts)
        if score >= 9:
            return f"Excellent balance ({summary})"
        if score >= 7:
            return f"Good balance ({summary})"
        if score >= 5:
            return f"Moderate imbalance ({summary})"
        return f"Poor balance ({summary})"
