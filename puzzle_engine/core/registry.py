"""Catalog of analyzer instances consulted by the engine."""

import logging
import threading
from typing import Dict, List, Optional

from ..analyzers import (
    ActorAnalyzer,
    Analyzer,
    DecadeAnalyzer,
    DirectorAnalyzer,
    ThemeAnalyzer,
    ThemeCatalog,
    WordplayAnalyzer,
    YearAnalyzer
)

logger = logging.getLogger(__name__)


class AnalyzerRegistry:
    """Holds analyzers by name.

    Construct one at startup and pass it to the engine. Lookups and mutations
    share a lock so a threaded host can register while another thread reads.
    """

    def __init__(self, analyzers: Optional[List[Analyzer]] = None):
        self._analyzers: Dict[str, Analyzer] = {}
        self._lock = threading.RLock()
        for analyzer in analyzers or []:
            self.register(analyzer)

    def register(self, analyzer: Analyzer) -> None:
        """Add an analyzer; an existing name is kept and the newcomer ignored."""
        with self._lock:
            if analyzer.name in self._analyzers:
                logger.warning(f"Analyzer '{analyzer.name}' is already registered, skipping")
                return
            self._analyzers[analyzer.name] = analyzer
        logger.debug(f"Registered analyzer '{analyzer.name}'")

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._analyzers.pop(name, None) is not None

    def get(self, name: str) -> Optional[Analyzer]:
        with self._lock:
            return self._analyzers.get(name)

    def get_all(self) -> List[Analyzer]:
        with self._lock:
            return list(self._analyzers.values())

    def get_enabled(self) -> List[Analyzer]:
        return [analyzer for analyzer in self.get_all() if analyzer.config.enabled]

    def get_by_type(self, connection_type: str) -> List[Analyzer]:
        return [analyzer for analyzer in self.get_all() if analyzer.connection_type == connection_type]

    def get_names(self) -> List[str]:
        with self._lock:
            return list(self._analyzers)

    def count(self) -> int:
        with self._lock:
            return len(self._analyzers)

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._analyzers

    def clear(self) -> None:
        """Remove every analyzer. Intended for resetting state between tests."""
        with self._lock:
            self._analyzers.clear()


def create_default_registry(theme_catalog: Optional[ThemeCatalog] = None) -> AnalyzerRegistry:
    """Build a registry holding one instance of every built-in analyzer."""
    return AnalyzerRegistry([
        DirectorAnalyzer(),
        ActorAnalyzer(),
        DecadeAnalyzer(),
        YearAnalyzer(),
        ThemeAnalyzer(catalog=theme_catalog),
        WordplayAnalyzer(),
    ])
