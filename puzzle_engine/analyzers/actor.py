"""Actor analyzer: groups items by a shared top-billed performer."""

from typing import Any, Dict, List, Optional, Sequence

from pydantic import Field

from ..models.config import AnalyzerConfig
from ..models.groups import CandidateGroup
from ..models.items import Item
from ..utils.config import merge_config
from .base import build_group, group_by, run_analysis


class ActorAnalyzerConfig(AnalyzerConfig):
    cast_depth: int = Field(5, ge=1, description="Only cast with billing order below this count")
    min_actor_popularity: float = Field(0.0, ge=0.0, description="Ignore performers less popular than this")


class ActorAnalyzer:
    """Finds items that share a performer in their top billing slots."""

    name = "actor"
    connection_type = "actor"

    def __init__(self, config: Optional[ActorAnalyzerConfig] = None, **overrides: Any):
        self.config = merge_config(config or ActorAnalyzerConfig(), overrides)

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        self.config = merge_config(self.config, overrides, **kwargs)

    async def analyze(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        return await run_analysis(self.config, pool, self.find_connections)

    def find_connections(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        names: Dict[int, str] = {}

        def billed(item: Item):
            for member in item.credits.cast:
                if member.order >= self.config.cast_depth:
                    continue
                if member.popularity < self.config.min_actor_popularity:
                    continue
                names.setdefault(member.id, member.name)
                yield member.id

        results = []
        for actor_id, matches in group_by(pool, billed).items():
            if len(matches) < self.config.min_group_size:
                continue
            results.append(build_group(
                matches,
                self.config,
                connection=f"Starring {names[actor_id]}",
                connection_type=self.connection_type,
                metadata={
                    "person_id": actor_id,
                    "person_name": names[actor_id],
                    "total_items": len(matches),
                },
            ))
        return results
