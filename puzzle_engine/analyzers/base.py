"""Analyzer interface and the shared helpers every analyzer composes."""

import inspect
import logging
from typing import (
    Any, Awaitable, Callable, Dict, Hashable, Iterable, List, Optional, Protocol, Sequence, Union,
    runtime_checkable
)

from ..models.config import AnalyzerConfig
from ..models.groups import CandidateGroup
from ..models.items import Item
from ..utils.difficulty import calculate_difficulty_score
from ..utils.shuffle import shuffle_array

logger = logging.getLogger(__name__)

FindConnections = Callable[
    [Sequence[Item]], Union[List[CandidateGroup], Awaitable[List[CandidateGroup]]]
]


@runtime_checkable
class Analyzer(Protocol):
    """Capability interface for connection finders.

    An analyzer holds a config and turns a pool into candidate groups. It keeps
    no per-call state, so one instance may run concurrently with itself.
    """

    name: str
    connection_type: str
    config: AnalyzerConfig

    async def analyze(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        ...

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        ...


def validate_result(result: CandidateGroup, config: AnalyzerConfig) -> bool:
    """Check a group's size bounds and label."""
    size = len(result.items)
    if size < config.min_group_size or size > config.max_group_size:
        return False
    return bool(result.connection.strip())


async def run_analysis(config: AnalyzerConfig, pool: Sequence[Item],
                       find_connections: FindConnections) -> List[CandidateGroup]:
    """Skip disabled analyzers and tiny pools, then drop invalid results."""
    if not config.enabled or len(pool) < config.min_group_size:
        return []

    results = find_connections(pool)
    if inspect.isawaitable(results):
        results = await results

    valid = [result for result in results if validate_result(result, config)]
    if len(valid) < len(results):
        logger.debug(f"Dropped {len(results) - len(valid)} invalid candidate groups")
    return valid


def group_by(pool: Iterable[Item], keys: Callable[[Item], Iterable[Hashable]]) -> Dict[Hashable, List[Item]]:
    """Bucket items under every key ``keys`` yields for them.

    An item is added to a bucket at most once, and bucket order follows first appearance.
    """
    buckets: Dict[Hashable, List[Item]] = {}
    for item in pool:
        for key in dict.fromkeys(keys(item)):
            bucket = buckets.setdefault(key, [])
            if not bucket or bucket[-1].id != item.id:
                bucket.append(item)
    return buckets


def build_group(matches: Sequence[Item], config: AnalyzerConfig, connection: str, connection_type: str,
                bonus: float = 0.0, metadata: Optional[Dict[str, Any]] = None) -> CandidateGroup:
    """Shuffle the matches, keep ``max_group_size`` of them and score the selection."""
    selected = shuffle_array(matches)[:config.max_group_size]
    return CandidateGroup(
        items=selected,
        connection=connection,
        connection_type=connection_type,
        difficulty_score=calculate_difficulty_score(selected) + bonus,
        metadata=metadata or {},
    )
