"""Theme analyzer: groups items whose title or synopsis matches a theme."""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import Field

from ..models.config import AnalyzerConfig
from ..models.groups import CandidateGroup
from ..models.items import Item
from ..utils.config import merge_config
from .base import build_group, run_analysis
from .themes import Theme, ThemeCatalog

logger = logging.getLogger(__name__)

# Points added per theme difficulty level
THEME_DIFFICULTY_BONUS = 500

LEADING_ARTICLE = re.compile(r"^(the|a|an)\s+", re.IGNORECASE)
NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9\s]")
DIGIT = re.compile(r"\d")


def has_one_word_title(item: Item) -> bool:
    title = LEADING_ARTICLE.sub("", item.title)
    title = NON_ALPHANUMERIC.sub("", title).strip()
    return " " not in title


def has_number_in_title(item: Item) -> bool:
    return DIGIT.search(item.title) is not None


# Themes without keywords, matched by a predicate instead
SPECIAL_THEMES: Dict[str, Callable[[Item], bool]] = {
    "one-word-titles": has_one_word_title,
    "numbers-in-title": has_number_in_title,
}


class ThemeAnalyzerConfig(AnalyzerConfig):
    min_keyword_matches: int = Field(1, ge=1, description="Distinct keywords an item must contain")
    search_overview: bool = True
    search_title: bool = True


class ThemeAnalyzer:
    """Finds items sharing a theme from an explicitly supplied catalog."""

    name = "theme"
    connection_type = "theme"

    def __init__(self, catalog: Optional[ThemeCatalog] = None,
                 config: Optional[ThemeAnalyzerConfig] = None, **overrides: Any):
        self.catalog = catalog if catalog is not None else ThemeCatalog.default()
        self.config = merge_config(config or ThemeAnalyzerConfig(), overrides)

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        self.config = merge_config(self.config, overrides, **kwargs)

    async def analyze(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        return await run_analysis(self.config, pool, self.find_connections)

    def find_connections(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        results = []
        for theme in self.catalog.get_enabled():
            matches = self.find_matching_items(pool, theme)
            if len(matches) < self.config.min_group_size:
                continue

            results.append(build_group(
                matches,
                self.config,
                connection=theme.name,
                connection_type=self.connection_type,
                bonus=theme.difficulty * THEME_DIFFICULTY_BONUS,
                metadata={
                    "theme_id": theme.id,
                    "theme_name": theme.name,
                    "theme_category": theme.category,
                    "total_items": len(matches),
                },
            ))
        return results

    def find_matching_items(self, pool: Sequence[Item], theme: Theme) -> List[Item]:
        if not theme.keywords:
            predicate = SPECIAL_THEMES.get(theme.id)
            if predicate is None:
                logger.debug(f"Theme '{theme.id}' has no keywords and no special matcher")
                return []
            return [item for item in pool if predicate(item)]

        return [
            item for item in pool
            if self.count_matches(item, theme) >= self.config.min_keyword_matches
        ]

    def count_matches(self, item: Item, theme: Theme) -> int:
        text = self._search_text(item, theme).lower()
        return sum(1 for keyword in theme.keywords if keyword.lower() in text)

    def _search_text(self, item: Item, theme: Theme) -> str:
        if theme.title_only:
            return item.title

        parts = []
        if self.config.search_title:
            parts.append(item.title)
        if self.config.search_overview:
            parts.append(item.overview)
        return " ".join(parts)
