"""Quality scorer combining the five validators into one 0-100 score."""

import logging
from typing import Any, Dict, Optional, Sequence

from ..models.groups import CandidateGroup
from ..models.quality import QualityConfig, QualityMetrics
from ..utils.config import merge_config
from .base import round_score
from .clarity import ClarityValidator
from .difficulty_balance import DifficultyBalanceValidator
from .diversity import DiversityValidator
from .overlap import OverlapValidator
from .uniqueness import UniquenessValidator

logger = logging.getLogger(__name__)


class QualityScorer:
    """Scores a set of groups and decides whether it meets the quality bar.

    Clarity, difficulty balance, diversity and uniqueness are combined by
    weight. Overlap is a veto: with ``require_no_overlap`` set, any shared
    item forces the overall score to zero.
    """

    def __init__(self, config: Optional[QualityConfig] = None, **overrides: Any):
        self.config = merge_config(config or QualityConfig(), overrides)
        self.clarity = ClarityValidator()
        self.difficulty = DifficultyBalanceValidator()
        self.diversity = DiversityValidator(self.config.diversity)
        self.uniqueness = UniquenessValidator()
        self.overlap = OverlapValidator()

    def score(self, groups: Sequence[CandidateGroup]) -> QualityMetrics:
        """Run every validator over ``groups`` and combine the results."""
        clarity = self.clarity.validate(groups)
        difficulty = self.difficulty.validate(groups)
        diversity = self.diversity.validate(groups)
        uniqueness = self.uniqueness.validate(groups)
        overlap = self.overlap.validate(groups)

        weights = self.config.weights
        weighted_sum = (
            clarity.score * weights.clarity
            + difficulty.score * weights.difficulty
            + diversity.score * weights.diversity
            + uniqueness.score * weights.uniqueness
        )
        overall = weighted_sum / weights.total * 10 if weights.total > 0 else 0.0

        if self.config.require_no_overlap and not overlap.passed:
            logger.debug(f"Overlap veto applied: {overlap.reason}")
            overall = 0.0

        return QualityMetrics(
            clarity_score=clarity.score,
            difficulty_score=difficulty.score,
            diversity_score=diversity.score,
            uniqueness_score=uniqueness.score,
            overlap_passed=overlap.passed,
            overall_score=round_score(overall),
            meets_threshold=overall >= self.config.min_score,
            details={
                "clarity": clarity.reason,
                "difficulty": difficulty.reason,
                "diversity": diversity.reason,
                "uniqueness": uniqueness.reason,
                "overlap": overlap.reason,
            },
        )

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        """Merge a partial config; partial weight dicts keep the other weights."""
        self.config = merge_config(self.config, overrides, **kwargs)
        self.diversity.weights = self.config.diversity

    def get_config(self) -> QualityConfig:
        return self.config.model_copy(deep=True)
