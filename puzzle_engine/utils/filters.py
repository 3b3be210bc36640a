"""Pool filtering helpers."""

from typing import AbstractSet, Iterable, List, Optional, Sequence

from ..models.config import PoolFilter
from ..models.items import Item


def filter_recent_items(items: Sequence[Item], recent_ids: Optional[AbstractSet[int]]) -> List[Item]:
    if not recent_ids:
        return list(items)
    return [item for item in items if item.id not in recent_ids]


def has_minimum_vote_count(item: Item, min_votes: int = 500) -> bool:
    return (item.vote_count or 0) >= min_votes


def filter_by_vote_count(items: Sequence[Item], min_votes: int = 500) -> List[Item]:
    return [item for item in items if has_minimum_vote_count(item, min_votes)]


def filter_by_year_range(items: Sequence[Item], min_year: Optional[int] = None,
                         max_year: Optional[int] = None) -> List[Item]:
    """Keep items released within the inclusive range; undated items count as year 0."""
    def in_range(item: Item) -> bool:
        year = item.year or 0
        if min_year is not None and year < min_year:
            return False
        if max_year is not None and year > max_year:
            return False
        return True

    return [item for item in items if in_range(item)]


def filter_by_genres(items: Sequence[Item], allowed: Iterable[int] = (),
                     excluded: Iterable[int] = ()) -> List[Item]:
    """Keep items with at least one allowed genre (if any given) and no excluded genre."""
    allowed_set = set(allowed)
    excluded_set = set(excluded)

    def matches(item: Item) -> bool:
        genres = set(item.genre_ids)
        if allowed_set and not genres & allowed_set:
            return False
        if excluded_set and genres & excluded_set:
            return False
        return True

    return [item for item in items if matches(item)]


def apply_pool_filter(items: Sequence[Item], pool_filter: Optional[PoolFilter]) -> List[Item]:
    """Apply every bound set on ``pool_filter``."""
    if pool_filter is None or pool_filter.is_empty:
        return list(items)

    filtered = list(items)
    if pool_filter.min_year is not None or pool_filter.max_year is not None:
        filtered = filter_by_year_range(filtered, pool_filter.min_year, pool_filter.max_year)
    if pool_filter.min_vote_count is not None:
        filtered = filter_by_vote_count(filtered, pool_filter.min_vote_count)
    if pool_filter.max_vote_count is not None:
        filtered = [item for item in filtered if (item.vote_count or 0) <= pool_filter.max_vote_count]
    if pool_filter.min_popularity is not None:
        filtered = [item for item in filtered if (item.popularity or 0) >= pool_filter.min_popularity]
    return filter_by_genres(filtered, pool_filter.allowed_genres, pool_filter.excluded_genres)
