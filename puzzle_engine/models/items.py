"""Item data models for the Puzzle Engine."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Genre(BaseModel):
    """A named genre attached to an item."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class CastCredit(BaseModel):
    """A billed performer on an item."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Stable contributor identifier")
    name: str = Field(..., description="Display name of the performer")
    character: Optional[str] = Field(None, description="Character played, if known")
    order: int = Field(0, ge=0, description="Billing position, 0 is top billed")
    popularity: float = Field(0.0, description="Contributor popularity as reported by the provider")


class CrewCredit(BaseModel):
    """A crew member, artist or author credited on an item."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Stable contributor identifier")
    name: str = Field(..., description="Display name of the contributor")
    job: str = Field(..., description="Credited job, e.g. Director or Artist")
    department: Optional[str] = Field(None, description="Department grouping for the job")


class Credits(BaseModel):
    """Contributor credits used by the credit-based analyzers."""

    model_config = ConfigDict(frozen=True)

    cast: List[CastCredit] = Field(default_factory=list)
    crew: List[CrewCredit] = Field(default_factory=list)


class Item(BaseModel):
    """A film or track in a pool.

    Items are immutable inputs: analyzers group and filter them but never change them.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Identifier, unique within a pool")
    title: str = Field(..., description="Display title")
    release_date: Optional[str] = Field(None, description="ISO-like date, the first four characters are the year")
    vote_count: int = Field(0, ge=0, description="Popularity metric that drives difficulty")
    popularity: float = Field(0.0, description="Provider popularity score")
    overview: str = Field("", description="Synopsis searched by the theme analyzer")
    genre_ids: List[int] = Field(default_factory=list)
    genres: List[Genre] = Field(default_factory=list)
    credits: Credits = Field(default_factory=Credits)
    poster_path: Optional[str] = None

    @field_validator("vote_count", "popularity", mode="before")
    @classmethod
    def _missing_metric_is_zero(cls, value):
        return 0 if value is None else value

    @field_validator("overview", mode="before")
    @classmethod
    def _missing_overview_is_empty(cls, value):
        return "" if value is None else value

    @property
    def year(self) -> Optional[int]:
        """Release year, or None when the date is missing or malformed."""
        if not self.release_date:
            return None
        try:
            return int(self.release_date[:4])
        except ValueError:
            return None

    @property
    def decade(self) -> Optional[int]:
        year = self.year
        return None if year is None else year // 10 * 10
