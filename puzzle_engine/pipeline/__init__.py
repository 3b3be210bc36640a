"""Pipeline orchestration for the Puzzle Engine."""

from .engine import PuzzleEngine
from .generator import PuzzleGenerator, RetryTracker, GenerationState

__all__ = ["PuzzleEngine", "PuzzleGenerator", "RetryTracker", "GenerationState"]
