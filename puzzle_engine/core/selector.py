"""Greedy selection of non-overlapping groups across difficulty tiers."""

import logging
from typing import Dict, List, Sequence, Set

from ..models.groups import DIFFICULTY_TIERS, CandidateGroup, SelectedGroup
from ..utils.shuffle import shuffle_array

logger = logging.getLogger(__name__)


def assign_tier(index: int, total: int, count: int) -> int:
    """Zero-based tier of the candidate at ``index`` in a list sorted by difficulty."""
    return min(index * count // total, count - 1)


class GroupSelector:
    """Picks one group per difficulty tier so that no item is used twice.

    The walk is greedy and never backtracks: a tier whose candidates all clash
    with earlier picks is skipped, even when a different earlier pick would
    have left room for it. Callers treat a short result as a failed attempt.
    """

    def select_groups(self, candidates: Sequence[CandidateGroup], count: int = 4) -> List[SelectedGroup]:
        if count < 1 or len(candidates) < count:
            return []

        ordered = sorted(candidates, key=lambda group: group.difficulty_score)
        tiers: Dict[int, List[CandidateGroup]] = {tier: [] for tier in range(count)}
        for index, candidate in enumerate(ordered):
            tiers[assign_tier(index, len(ordered), count)].append(candidate)

        selected: List[SelectedGroup] = []
        used_ids: Set[int] = set()

        for tier in range(count):
            for candidate in shuffle_array(tiers[tier]):
                ids = set(candidate.item_ids)
                if ids & used_ids:
                    continue
                selected.append(self._to_selected(candidate, tier))
                used_ids |= ids
                break
            else:
                logger.debug(f"No disjoint candidate in tier {tier + 1}, skipping")

        return selected

    @staticmethod
    def _to_selected(candidate: CandidateGroup, tier: int) -> SelectedGroup:
        color, difficulty = DIFFICULTY_TIERS[min(tier, len(DIFFICULTY_TIERS) - 1)]
        return SelectedGroup(
            items=candidate.items,
            connection=candidate.connection,
            connection_type=candidate.connection_type,
            difficulty_score=candidate.difficulty_score,
            metadata=candidate.metadata,
            tier=tier + 1,
            color=color,
            difficulty=difficulty,
        )
