"""Year analyzer: groups items released in a notable year."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from pydantic import Field

from ..models.config import AnalyzerConfig
from ..models.groups import CandidateGroup
from ..models.items import Item
from ..utils.config import merge_config
from .base import build_group, group_by, run_analysis

AGE_BONUS_PER_YEAR = 50

DEFAULT_INTERESTING_YEARS = [
    1939, 1972, 1977, 1982, 1984, 1994, 1995, 1999,
    2001, 2007, 2008, 2010, 2014, 2017, 2019,
]


class YearAnalyzerConfig(AnalyzerConfig):
    interesting_years: List[int] = Field(default_factory=lambda: list(DEFAULT_INTERESTING_YEARS))
    item_label: str = "Films"
    current_year: Optional[int] = None


class YearAnalyzer:
    """Finds items released in the same notable year."""

    name = "year"
    connection_type = "year"

    def __init__(self, config: Optional[YearAnalyzerConfig] = None, **overrides: Any):
        self.config = merge_config(config or YearAnalyzerConfig(), overrides)

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        self.config = merge_config(self.config, overrides, **kwargs)

    async def analyze(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        return await run_analysis(self.config, pool, self.find_connections)

    def find_connections(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        interesting = set(self.config.interesting_years)
        current_year = self.config.current_year or datetime.now().year

        def year_of(item: Item):
            if item.year in interesting:
                yield item.year

        results = []
        for year, matches in group_by(pool, year_of).items():
            if len(matches) < self.config.min_group_size:
                continue
            results.append(build_group(
                matches,
                self.config,
                connection=f"{self.config.item_label} from {year}",
                connection_type=self.connection_type,
                bonus=(current_year - year) * AGE_BONUS_PER_YEAR,
                metadata={"year": year, "total_items": len(matches)},
            ))
        return results
