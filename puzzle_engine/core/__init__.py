"""Registry and selection core of the Puzzle Engine."""

from .registry import AnalyzerRegistry, create_default_registry
from .selector import GroupSelector, assign_tier

__all__ = ["AnalyzerRegistry", "create_default_registry", "GroupSelector", "assign_tier"]
