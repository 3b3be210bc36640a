"""Item overlap validator: a binary veto on items used by more than one group."""

from typing import List, Sequence, Set

from ..models.groups import CandidateGroup
from ..models.quality import ValidationResult
from .base import QualityValidator

MAX_LISTED_DUPLICATES = 3


class OverlapValidator(QualityValidator):
    """Fails any set of groups that shares an item id.

    Runs even for selector output, since groups may also come from external
    sources that never passed through the selector.
    """

    name = "overlap"
    weight = 0.2

    def validate(self, groups: Sequence[CandidateGroup]) -> ValidationResult:
        if not groups:
            return ValidationResult(score=10.0, passed=True, reason="No groups to check for overlap")

        seen: Set[int] = set()
        duplicates: List[int] = []
        for group in groups:
            for item_id in group.item_ids:
                if item_id in seen and item_id not in duplicates:
                    duplicates.append(item_id)
                seen.add(item_id)

        if not duplicates:
            reason = "No item overlap detected"
        else:
            listed = ", ".join(str(item_id) for item_id in duplicates[:MAX_LISTED_DUPLICATES])
            extra = len(duplicates) - MAX_LISTED_DUPLICATES
            more = f" (+{extra} more)" if extra > 0 else ""
            reason = f"{len(duplicates)} item(s) appear in multiple groups: {listed}{more}"

        return ValidationResult(
            score=0.0 if duplicates else 10.0,
            passed=not duplicates,
            reason=reason,
            metadata={
                "total_items": len(seen),
                "duplicate_count": len(duplicates),
                "duplicate_item_ids": duplicates,
            },
        )
