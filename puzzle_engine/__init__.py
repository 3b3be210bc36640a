"""Puzzle Engine: connection discovery, group selection and quality scoring
for Connections-style puzzles."""

from .core import AnalyzerRegistry, GroupSelector, create_default_registry
from .exceptions import (
    PuzzleEngineError,
    ConfigurationError,
    InsufficientDataError,
    GenerationExhaustedError
)
from .pipeline import PuzzleEngine, PuzzleGenerator
from .validators import QualityScorer

__version__ = "1.0.0"

__all__ = [
    "AnalyzerRegistry",
    "GroupSelector",
    "create_default_registry",
    "PuzzleEngineError",
    "ConfigurationError",
    "InsufficientDataError",
    "GenerationExhaustedError",
    "PuzzleEngine",
    "PuzzleGenerator",
    "QualityScorer"
]
