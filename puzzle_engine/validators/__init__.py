"""Quality validators for the Puzzle Engine."""

from .base import QualityValidator, round_score
from .clarity import ClarityValidator, score_connection
from .difficulty_balance import DifficultyBalanceValidator
from .diversity import DiversityValidator
from .uniqueness import UniquenessValidator
from .overlap import OverlapValidator
from .scorer import QualityScorer

__all__ = [
    "QualityValidator",
    "round_score",
    "ClarityValidator",
    "score_connection",
    "DifficultyBalanceValidator",
    "DiversityValidator",
    "UniquenessValidator",
    "OverlapValidator",
    "QualityScorer"
]
