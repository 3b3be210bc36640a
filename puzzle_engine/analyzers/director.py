"""Director analyzer: groups items by a shared crew credit."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import Field

from ..models.config import AnalyzerConfig
from ..models.groups import CandidateGroup
from ..models.items import Item
from ..utils.config import merge_config
from .base import build_group, group_by, run_analysis

logger = logging.getLogger(__name__)


class DirectorAnalyzerConfig(AnalyzerConfig):
    """Director analyzer settings.

    ``job`` and ``label_template`` let the same analyzer group music by artist,
    e.g. ``job="Artist"`` with ``label_template="By {name}"``.
    """

    job: str = Field("Director", description="Crew job that identifies the grouping contributor")
    label_template: str = Field("Directed by {name}", description="Connection label, {name} is substituted")


class DirectorAnalyzer:
    """Finds items that share a director."""

    name = "director"
    connection_type = "director"

    def __init__(self, config: Optional[DirectorAnalyzerConfig] = None, **overrides: Any):
        self.config = merge_config(config or DirectorAnalyzerConfig(), overrides)

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        self.config = merge_config(self.config, overrides, **kwargs)

    async def analyze(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        return await run_analysis(self.config, pool, self.find_connections)

    def find_connections(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        names: Dict[int, str] = {}

        def credited(item: Item):
            for member in item.credits.crew:
                if member.job == self.config.job:
                    names.setdefault(member.id, member.name)
                    yield member.id

        results = []
        for person_id, matches in group_by(pool, credited).items():
            if len(matches) < self.config.min_group_size:
                continue

            name = names[person_id]
            results.append(build_group(
                matches,
                self.config,
                connection=self.config.label_template.format(name=name),
                connection_type=self.connection_type,
                metadata={
                    "person_id": person_id,
                    "person_name": name,
                    "total_items": len(matches),
                },
            ))

        logger.debug(f"{self.name} analyzer found {len(results)} groups in {len(pool)} items")
        return results
