"""Shared helpers for the Puzzle Engine."""

from .shuffle import shuffle_array, shuffle_arrays_in_sync
from .difficulty import (
    calculate_difficulty_score,
    scale_predefined_difficulty,
    normalize_difficulty_score
)
from .filters import (
    filter_recent_items,
    filter_by_vote_count,
    filter_by_year_range,
    filter_by_genres,
    has_minimum_vote_count,
    apply_pool_filter
)
from .config import merge_config

__all__ = [
    "shuffle_array",
    "shuffle_arrays_in_sync",
    "calculate_difficulty_score",
    "scale_predefined_difficulty",
    "normalize_difficulty_score",
    "filter_recent_items",
    "filter_by_vote_count",
    "filter_by_year_range",
    "filter_by_genres",
    "has_minimum_vote_count",
    "apply_pool_filter",
    "merge_config"
]
