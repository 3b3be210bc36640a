"""Puzzle engine: runs analyzers, filters candidates and assembles one puzzle."""

import asyncio
import logging
from typing import AbstractSet, Any, Dict, List, Optional, Sequence

from ..analyzers import Analyzer
from ..core.registry import AnalyzerRegistry
from ..core.selector import GroupSelector
from ..exceptions import ConfigurationError, InsufficientDataError
from ..models.config import EngineConfig
from ..models.groups import CandidateGroup, GeneratedPuzzle, PuzzleGroup
from ..models.items import Item
from ..utils.config import merge_config
from ..utils.filters import filter_recent_items
from ..utils.shuffle import shuffle_array

logger = logging.getLogger(__name__)


class PuzzleEngine:
    """Builds a single puzzle from a pool.

    The engine holds a registry and a selector but owns neither; both are
    passed in so one registry can serve several engines.
    """

    def __init__(self, registry: AnalyzerRegistry, selector: Optional[GroupSelector] = None,
                 config: Optional[EngineConfig] = None, **overrides: Any):
        self.registry = registry
        self.selector = selector or GroupSelector()
        self.config = merge_config(config or EngineConfig(), overrides)

    async def generate_puzzle(self, pool: Sequence[Item],
                              recent_item_ids: Optional[AbstractSet[int]] = None,
                              recent_connections: Optional[AbstractSet[str]] = None) -> GeneratedPuzzle:
        """Generate one puzzle.

        Raises:
            ConfigurationError: no analyzer is registered and enabled.
            InsufficientDataError: too few candidates, or the selector could
                not find enough non-overlapping groups.
        """
        working_pool = self._apply_recency_filter(pool, recent_item_ids)

        analyzers = self._active_analyzers()
        if not analyzers:
            raise ConfigurationError("No analyzers are registered or enabled")

        candidates = await self._collect_candidates(analyzers, working_pool)

        if recent_connections:
            candidates = [group for group in candidates if group.connection not in recent_connections]

        needed = self.config.groups_needed
        if len(candidates) < needed:
            raise InsufficientDataError(
                f"Not enough potential groups found. Need {needed}, found {len(candidates)}",
                needed=needed,
                found=len(candidates),
            )

        selected = self.selector.select_groups(candidates, needed)
        if len(selected) < needed:
            raise InsufficientDataError(
                f"Failed to select enough non-overlapping groups. Need {needed}, selected {len(selected)}",
                needed=needed,
                found=len(selected),
            )

        groups = [PuzzleGroup.from_selected(group, index) for index, group in enumerate(selected)]
        items = shuffle_array([item for group in groups for item in group.items])
        logger.info(f"Assembled puzzle from {len(candidates)} candidates: {[g.connection for g in groups]}")
        return GeneratedPuzzle(groups=groups, items=items)

    def _apply_recency_filter(self, pool: Sequence[Item],
                              recent_item_ids: Optional[AbstractSet[int]]) -> List[Item]:
        if not self.config.avoid_recent_content or not recent_item_ids:
            return list(pool)

        filtered = filter_recent_items(pool, recent_item_ids)
        if len(filtered) < self.config.min_filtered_pool_size:
            logger.warning(
                f"Recency filter left {len(filtered)} items (minimum {self.config.min_filtered_pool_size}), "
                f"using the full pool of {len(pool)}"
            )
            return list(pool)
        return filtered

    def _active_analyzers(self) -> List[Analyzer]:
        analyzers = self.registry.get_enabled()
        if self.config.analyzer_names is not None:
            allowed = set(self.config.analyzer_names)
            analyzers = [analyzer for analyzer in analyzers if analyzer.name in allowed]
        return analyzers

    async def _collect_candidates(self, analyzers: List[Analyzer], pool: List[Item]) -> List[CandidateGroup]:
        results = await asyncio.gather(*(analyzer.analyze(pool) for analyzer in analyzers))

        candidates: List[CandidateGroup] = []
        for analyzer, groups in zip(analyzers, results):
            logger.debug(f"Analyzer '{analyzer.name}' produced {len(groups)} candidates")
            candidates.extend(groups)
        return candidates

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        self.config = merge_config(self.config, overrides, **kwargs)

    def get_config(self) -> EngineConfig:
        return self.config.model_copy(deep=True)
