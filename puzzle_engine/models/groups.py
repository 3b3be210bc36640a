"""Group and puzzle data models for the Puzzle Engine."""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .items import Item
from .quality import QualityMetrics


class DifficultyColor(str, Enum):
    """Display color of a difficulty tier."""
    YELLOW = "yellow"  # Easiest
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"  # Hardest


class DifficultyLevel(str, Enum):
    """Named difficulty of a tier."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    HARDEST = "hardest"


# Ordered easiest to hardest; tier N uses entry N - 1
DIFFICULTY_TIERS: List[Tuple[DifficultyColor, DifficultyLevel]] = [
    (DifficultyColor.YELLOW, DifficultyLevel.EASY),
    (DifficultyColor.GREEN, DifficultyLevel.MEDIUM),
    (DifficultyColor.BLUE, DifficultyLevel.HARD),
    (DifficultyColor.PURPLE, DifficultyLevel.HARDEST),
]


class CandidateGroup(BaseModel):
    """A single connection hypothesis produced by an analyzer or an external source."""

    model_config = ConfigDict(frozen=True)

    items: List[Item] = Field(..., description="Items sharing the connection")
    connection: str = Field(..., description="Human-readable connection label")
    connection_type: str = Field(..., description="Tag such as director, decade or wordplay")
    difficulty_score: float = Field(0.0, description="Higher is harder, unbounded")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def item_ids(self) -> List[int]:
        return [item.id for item in self.items]


class SelectedGroup(CandidateGroup):
    """A candidate group placed into a difficulty tier by the selector."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    tier: int = Field(..., ge=1, description="1 is easiest")
    color: DifficultyColor
    difficulty: DifficultyLevel


class PuzzleGroup(BaseModel):
    """Display-ready group inside a generated puzzle."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str = Field(..., description="Synthetic id built from connection type and position")
    items: List[Item]
    connection: str
    connection_type: str
    difficulty: DifficultyLevel
    color: DifficultyColor
    tier: int = Field(..., ge=1)
    difficulty_score: float = 0.0
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_selected(cls, group: SelectedGroup, index: int) -> "PuzzleGroup":
        return cls(
            id=f"{group.connection_type}-{index}",
            items=group.items,
            connection=group.connection,
            connection_type=group.connection_type,
            difficulty=group.difficulty,
            color=group.color,
            tier=group.tier,
            difficulty_score=group.difficulty_score,
            metadata=group.metadata,
        )

    def to_candidate(self) -> CandidateGroup:
        """Convert back to scorable form without losing item metadata."""
        return CandidateGroup(
            items=self.items,
            connection=self.connection,
            connection_type=self.connection_type,
            difficulty_score=self.difficulty_score,
            metadata=self.metadata,
        )


class GeneratedPuzzle(BaseModel):
    """A complete puzzle: its groups plus every item in shuffled display order."""

    model_config = ConfigDict(frozen=True)

    groups: List[PuzzleGroup]
    items: List[Item] = Field(..., description="All items across groups, shuffled")

    @property
    def item_ids(self) -> List[int]:
        return [item.id for item in self.items]

    @property
    def connections(self) -> List[str]:
        return [group.connection for group in self.groups]


class PuzzleWithMetrics(GeneratedPuzzle):
    """A generated puzzle together with its quality outcome."""

    quality_score: float = Field(..., ge=0.0, le=100.0)
    meets_threshold: bool
    attempt_number: int = Field(..., ge=1)
    metrics: Optional[QualityMetrics] = None


class BatchGenerationResult(BaseModel):
    """Summary of a best-effort batch generation run."""

    puzzles: List[PuzzleWithMetrics] = Field(default_factory=list)
    succeeded: int = 0
    failed: int = 0
    total_attempts: int = 0
    average_quality: float = 0.0
