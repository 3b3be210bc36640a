"""Connection analyzers for the Puzzle Engine."""

from .base import Analyzer, run_analysis, validate_result, group_by, build_group
from .director import DirectorAnalyzer, DirectorAnalyzerConfig
from .actor import ActorAnalyzer, ActorAnalyzerConfig
from .decade import DecadeAnalyzer, DecadeAnalyzerConfig
from .year import YearAnalyzer, YearAnalyzerConfig
from .theme import ThemeAnalyzer, ThemeAnalyzerConfig
from .themes import Theme, ThemeCatalog, ThemeCategory
from .wordplay import WordplayAnalyzer, WordplayAnalyzerConfig

__all__ = [
    "Analyzer",
    "run_analysis",
    "validate_result",
    "group_by",
    "build_group",
    "DirectorAnalyzer",
    "DirectorAnalyzerConfig",
    "ActorAnalyzer",
    "ActorAnalyzerConfig",
    "DecadeAnalyzer",
    "DecadeAnalyzerConfig",
    "YearAnalyzer",
    "YearAnalyzerConfig",
    "ThemeAnalyzer",
    "ThemeAnalyzerConfig",
    "Theme",
    "ThemeCatalog",
    "ThemeCategory",
    "WordplayAnalyzer",
    "WordplayAnalyzerConfig"
]
