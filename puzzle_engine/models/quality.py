"""Quality scoring models for the Puzzle Engine."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ValidationResult(BaseModel):
    """Outcome of a single quality validator."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0, le=10.0, description="Validator score on a 0-10 scale")
    passed: bool = Field(..., description="Whether the validator's own pass mark was reached")
    reason: str = Field(..., description="Human-readable explanation")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class QualityMetrics(BaseModel):
    """Score report for a set of puzzle groups."""

    model_config = ConfigDict(frozen=True)

    clarity_score: float = Field(..., ge=0.0, le=10.0)
    difficulty_score: float = Field(..., ge=0.0, le=10.0)
    diversity_score: float = Field(..., ge=0.0, le=10.0)
    uniqueness_score: float = Field(..., ge=0.0, le=10.0)
    overlap_passed: bool
    overall_score: float = Field(..., ge=0.0, le=100.0, description="Combined score on a 0-100 scale")
    meets_threshold: bool
    details: Dict[str, str] = Field(default_factory=dict, description="Explanation per metric name")


class QualityWeights(BaseModel):
    """Relative weights of the four scored validators."""

    model_config = ConfigDict(extra="forbid")

    clarity: float = Field(0.25, ge=0.0)
    difficulty: float = Field(0.2, ge=0.0)
    diversity: float = Field(0.2, ge=0.0)
    uniqueness: float = Field(0.15, ge=0.0)

    @property
    def total(self) -> float:
        return self.clarity + self.difficulty + self.diversity + self.uniqueness


class DiversityWeights(BaseModel):
    """Weights used inside the diversity validator."""

    model_config = ConfigDict(extra="forbid")

    era: float = Field(0.5, ge=0.0, description="Share of the era sub-score in the final diversity score")
    popularity: float = Field(0.5, ge=0.0, description="Share of the popularity sub-score")
    era_uniqueness: float = Field(0.5, ge=0.0, description="Share of distinct-decade count in the era score")
    era_balance: float = Field(0.5, ge=0.0, description="Share of decade evenness in the era score")


class QualityConfig(BaseModel):
    """Configuration for the quality scorer."""

    model_config = ConfigDict(extra="forbid")

    min_score: float = Field(35.0, ge=0.0, le=100.0, description="Overall score needed to meet the threshold")
    require_no_overlap: bool = Field(True, description="Force the overall score to zero when items overlap")
    weights: QualityWeights = Field(default_factory=QualityWeights)
    diversity: DiversityWeights = Field(default_factory=DiversityWeights)
