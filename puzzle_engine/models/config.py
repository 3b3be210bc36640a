"""Component configuration models for the Puzzle Engine.

Every component accepts a partial override at construction and through
``configure``; the models here hold the defaults those overrides merge into.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .quality import QualityConfig


class AnalyzerConfig(BaseModel):
    """Settings shared by every analyzer."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(True, description="Disabled analyzers always return no groups")
    min_group_size: int = Field(4, ge=1, description="Smallest group an analyzer may emit")
    max_group_size: int = Field(4, ge=1, description="Matching items are truncated to this size")

    @model_validator(mode="after")
    def check_group_bounds(self):
        if self.min_group_size > self.max_group_size:
            raise ValueError(
                f"min_group_size ({self.min_group_size}) exceeds max_group_size ({self.max_group_size})"
            )
        return self


class EngineConfig(BaseModel):
    """Settings for a single puzzle engine run."""

    model_config = ConfigDict(extra="forbid")

    pool_size: int = Field(150, ge=1, description="Nominal pool size requested from callers")
    groups_needed: int = Field(4, ge=1)
    avoid_recent_content: bool = True
    max_retries: int = Field(3, ge=0)
    min_filtered_pool_size: int = Field(
        100, ge=0, description="Below this, recency filtering is abandoned for the full pool"
    )
    analyzer_names: Optional[List[str]] = Field(
        None, description="Restrict runs to these registered analyzers"
    )


class PoolFilter(BaseModel):
    """Pre-filter applied to a pool before generation. Unset bounds are ignored."""

    model_config = ConfigDict(extra="forbid")

    min_year: Optional[int] = None
    max_year: Optional[int] = None
    min_vote_count: Optional[int] = None
    max_vote_count: Optional[int] = None
    min_popularity: Optional[float] = None
    allowed_genres: List[int] = Field(default_factory=list)
    excluded_genres: List[int] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self == PoolFilter()


class GeneratorConfig(BaseModel):
    """Settings for the retrying puzzle generator."""

    model_config = ConfigDict(extra="forbid")

    pool_size: int = Field(150, ge=1)
    groups_per_puzzle: int = Field(4, ge=1)
    quality_threshold: float = Field(35.0, ge=0.0, le=100.0)
    max_attempts: int = Field(10, ge=1)
    min_pool_size: int = Field(50, ge=0, description="Filtered pools smaller than this fail fast")
    fallback_ratio: float = Field(
        0.8, ge=0.0, le=1.0, description="Best attempt is returned if it reaches this share of the threshold"
    )
    avoid_recent_content: bool = True
    enabled_analyzers: Optional[List[str]] = None
    pool_filter: PoolFilter = Field(default_factory=PoolFilter)
    quality: QualityConfig = Field(default_factory=QualityConfig)

    @classmethod
    def from_settings(cls, settings) -> "GeneratorConfig":
        """Build defaults from application settings."""
        return cls(
            quality_threshold=settings.quality_threshold,
            max_attempts=settings.max_generation_attempts,
            min_pool_size=settings.min_pool_size,
            quality=QualityConfig(min_score=settings.quality_threshold),
        )
