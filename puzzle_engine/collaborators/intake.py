"""Intake of groups produced outside the analyzer path, e.g. by an LLM."""

import logging
import zlib
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..models.groups import CandidateGroup
from ..models.items import CrewCredit, Credits, Item
from ..utils.difficulty import scale_predefined_difficulty
from .verifiers import ExternalItem, ItemVerifier, NoOpVerifier, VerifiedItem, normalize_title

logger = logging.getLogger(__name__)


class ExternalDifficulty(str, Enum):
    """Difficulty levels used by the external group generator."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


# Predefined difficulty level (1-5 scale) for each external label
DIFFICULTY_LEVELS: Dict[str, int] = {
    ExternalDifficulty.EASY.value: 1,
    ExternalDifficulty.MEDIUM.value: 2,
    ExternalDifficulty.HARD.value: 3,
    ExternalDifficulty.EXPERT.value: 4,
}


class ExternalGroup(BaseModel):
    """A group as returned by the external generator."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    items: List[ExternalItem] = Field(..., description="Proposed members of the group")
    connection: str = Field(..., description="Connection label")
    connection_type: str = Field("theme", description="Connection type tag")
    explanation: str = Field("", description="Why the items belong together")
    difficulty: ExternalDifficulty = ExternalDifficulty.MEDIUM


def derive_item_id(verified: VerifiedItem) -> int:
    """Use the provider id when known, otherwise a stable hash of title and year."""
    if verified.external_id is not None:
        return verified.external_id
    key = f"{normalize_title(verified.title)}|{verified.year or ''}"
    return zlib.crc32(key.encode("utf-8"))


class GroupIntake:
    """Converts external groups into candidate groups the selector and scorer accept.

    Items are verified but never dropped for failing verification; the
    resulting metadata lists which titles could not be confirmed.
    """

    def __init__(self, verifier: Optional[ItemVerifier] = None, min_group_size: int = 4,
                 max_group_size: int = 4):
        self.verifier = verifier or NoOpVerifier()
        self.min_group_size = min_group_size
        self.max_group_size = max_group_size

    def to_candidates(self, groups: Sequence[ExternalGroup]) -> List[CandidateGroup]:
        candidates = []
        for group in groups:
            candidate = self.to_candidate(group)
            if candidate is not None:
                candidates.append(candidate)
        logger.info(f"Accepted {len(candidates)} of {len(groups)} external groups")
        return candidates

    def to_candidate(self, group: ExternalGroup) -> Optional[CandidateGroup]:
        if not group.connection.strip():
            logger.debug("Dropping external group with a blank connection")
            return None
        if not self.min_group_size <= len(group.items) <= self.max_group_size:
            logger.debug(f"Dropping external group '{group.connection}' with {len(group.items)} items")
            return None

        verified = self.verifier.verify_items(group.items)
        items = [self._to_item(source, result) for source, result in zip(group.items, verified)]
        unverified = [result.title for result in verified if not result.verified]

        metadata: Dict[str, Any] = {
            "source": "external",
            "explanation": group.explanation,
            "external_difficulty": group.difficulty,
            "all_items_verified": not unverified,
        }
        if unverified:
            metadata["unverified_titles"] = unverified

        return CandidateGroup(
            items=items,
            connection=group.connection,
            connection_type=group.connection_type,
            difficulty_score=scale_predefined_difficulty(DIFFICULTY_LEVELS[group.difficulty]),
            metadata=metadata,
        )

    @staticmethod
    def _to_item(source: ExternalItem, verified: VerifiedItem) -> Item:
        year = verified.year or source.year
        credits = Credits()
        if source.artist:
            credits = Credits(crew=[CrewCredit(
                id=zlib.crc32(normalize_title(source.artist).encode("utf-8")),
                name=source.artist,
                job="Artist",
            )])
        return Item(
            id=derive_item_id(verified),
            title=verified.title,
            release_date=f"{year}-01-01" if year else None,
            credits=credits,
        )
