"""Decade analyzer: groups items released in the same decade."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from pydantic import Field

from ..models.config import AnalyzerConfig
from ..models.groups import CandidateGroup
from ..models.items import Item
from ..utils.config import merge_config
from .base import build_group, group_by, run_analysis

# Points added per full decade between the group's decade and the current year
AGE_BONUS_PER_DECADE = 200


class DecadeAnalyzerConfig(AnalyzerConfig):
    enabled_decades: List[int] = Field(default_factory=lambda: [1970, 1980, 1990, 2000, 2010, 2020])
    item_label: str = Field("Films", description="Plural noun used in the connection label")
    current_year: Optional[int] = Field(None, description="Reference year for the age bonus, defaults to today")


class DecadeAnalyzer:
    """Finds items from the same decade, with older decades scoring harder."""

    name = "decade"
    connection_type = "decade"

    def __init__(self, config: Optional[DecadeAnalyzerConfig] = None, **overrides: Any):
        self.config = merge_config(config or DecadeAnalyzerConfig(), overrides)

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        self.config = merge_config(self.config, overrides, **kwargs)

    async def analyze(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        return await run_analysis(self.config, pool, self.find_connections)

    def find_connections(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        enabled = set(self.config.enabled_decades)
        current_year = self.config.current_year or datetime.now().year

        def decade_of(item: Item):
            if item.decade is not None and item.decade in enabled:
                yield item.decade

        results = []
        for decade, matches in group_by(pool, decade_of).items():
            if len(matches) < self.config.min_group_size:
                continue
            results.append(build_group(
                matches,
                self.config,
                connection=f"{self.config.item_label} from the {decade}s",
                connection_type=self.connection_type,
                bonus=((current_year - decade) // 10) * AGE_BONUS_PER_DECADE,
                metadata={"decade": decade, "total_items": len(matches)},
            ))
        return results
