"""Base class for quality validators."""

import math
from abc import ABC, abstractmethod
from typing import Sequence

from ..models.groups import CandidateGroup
from ..models.quality import ValidationResult


def round_score(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


class QualityValidator(ABC):
    """Scores one aspect of a set of groups on a 0-10 scale."""

    name: str = ""
    weight: float = 0.0

    @abstractmethod
    def validate(self, groups: Sequence[CandidateGroup]) -> ValidationResult:
        """Score the groups and explain the score."""
        pass

    def empty_result(self) -> ValidationResult:
        return ValidationResult(score=0.0, passed=False, reason="No groups to validate")
