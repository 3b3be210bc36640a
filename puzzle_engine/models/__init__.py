"""Data models for the Puzzle Engine."""

from .items import Item, Genre, CastCredit, CrewCredit, Credits
from .quality import (
    ValidationResult,
    QualityMetrics,
    QualityWeights,
    DiversityWeights,
    QualityConfig
)
from .groups import (
    CandidateGroup,
    SelectedGroup,
    PuzzleGroup,
    GeneratedPuzzle,
    PuzzleWithMetrics,
    BatchGenerationResult,
    DifficultyColor,
    DifficultyLevel,
    DIFFICULTY_TIERS
)
from .config import AnalyzerConfig, EngineConfig, PoolFilter, GeneratorConfig

__all__ = [
    "Item",
    "Genre",
    "CastCredit",
    "CrewCredit",
    "Credits",
    "ValidationResult",
    "QualityMetrics",
    "QualityWeights",
    "DiversityWeights",
    "QualityConfig",
    "CandidateGroup",
    "SelectedGroup",
    "PuzzleGroup",
    "GeneratedPuzzle",
    "PuzzleWithMetrics",
    "BatchGenerationResult",
    "DifficultyColor",
    "DifficultyLevel",
    "DIFFICULTY_TIERS",
    "AnalyzerConfig",
    "EngineConfig",
    "PoolFilter",
    "GeneratorConfig"
]
