"""Wordplay analyzer: groups items whose titles share a word."""

import re
from typing import Any, Dict, List, Optional, Sequence

from pydantic import Field

from ..models.config import AnalyzerConfig
from ..models.groups import CandidateGroup
from ..models.items import Item
from ..utils.config import merge_config
from .base import build_group, group_by, run_analysis

DEFAULT_STOP_WORDS = [
    "the", "a", "an", "of", "in", "on", "at", "to", "for", "with", "from", "by",
    "and", "or", "but", "is", "it", "as", "was", "are",
    "part", "chapter", "vol", "volume",
]

# Shared words found in fewer titles score harder
RARITY_BONUS_CEILING = 1000
RARITY_BONUS_STEP = 100

NON_WORD = re.compile(r"[^a-z0-9\s]")


class WordplayAnalyzerConfig(AnalyzerConfig):
    min_word_length: int = Field(4, ge=1)
    stop_words: List[str] = Field(default_factory=lambda: list(DEFAULT_STOP_WORDS))


class WordplayAnalyzer:
    """Finds items whose titles contain the same significant word."""

    name = "wordplay"
    connection_type = "wordplay"

    def __init__(self, config: Optional[WordplayAnalyzerConfig] = None, **overrides: Any):
        self.config = merge_config(config or WordplayAnalyzerConfig(), overrides)

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        self.config = merge_config(self.config, overrides, **kwargs)

    async def analyze(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        return await run_analysis(self.config, pool, self.find_connections)

    def extract_words(self, title: str) -> List[str]:
        """Lowercase significant words of a title, in order."""
        stop_words = {word.lower() for word in self.config.stop_words}
        words = NON_WORD.sub(" ", title.lower()).split()
        return [
            word for word in words
            if len(word) >= self.config.min_word_length and word not in stop_words
        ]

    def find_connections(self, pool: Sequence[Item]) -> List[CandidateGroup]:
        results = []
        for word, matches in group_by(pool, lambda item: self.extract_words(item.title)).items():
            if len(matches) < self.config.min_group_size:
                continue
            results.append(build_group(
                matches,
                self.config,
                connection=f'"{word}" in the title',
                connection_type=self.connection_type,
                bonus=max(0, RARITY_BONUS_CEILING - len(matches) * RARITY_BONUS_STEP),
                metadata={"word": word, "total_items": len(matches)},
            ))
        return results
