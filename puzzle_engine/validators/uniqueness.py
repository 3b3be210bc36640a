"""Connection uniqueness validator."""

from collections import Counter
from typing import Dict, Sequence

from ..models.groups import CandidateGroup
from ..models.quality import ValidationResult
from .base import QualityValidator, round_score

# Interest of each connection type; common types score lower
CONNECTION_RARITY: Dict[str, float] = {
    "director": 5,
    "actor": 5,
    "decade": 6,
    "theme": 7,
    "wordplay": 8,
    "year": 8,
}
DEFAULT_RARITY = 7
PASS_MARK = 5


class UniquenessValidator(QualityValidator):
    """Rewards rare connection types and a mix of types."""

    name = "uniqueness"
    weight = 0.15

    def validate(self, groups: Sequence[CandidateGroup]) -> ValidationResult:
        if not groups:
            return self.empty_result()

        type_count = Counter(group.connection_type for group in groups)
        rarity = sum(CONNECTION_RARITY.get(group.connection_type, DEFAULT_RARITY) for group in groups) / len(groups)
        variety = len(type_count) / len(groups) * 10
        average = (rarity + variety) / 2

        return ValidationResult(
            score=round_score(average),
            passed=average >= PASS_MARK,
            reason=self._reason(list(type_count), average),
            metadata={
                "type_count": dict(type_count),
                "rarity_score": rarity,
                "variety_score": variety,
            },
        )

    @staticmethod
    def _reason(types, score: float) -> str:
        summary = ", ".join(types)
        if score >= 8:
            return f"Excellent variety: {summary}"
        if score >= 6:
            return f"Good variety: {summary}"
        if score >= 4:
            return f"Limited variety: {summary}"
        return f"Poor variety: {summary}"
