"""Error taxonomy for the Puzzle Engine."""


class PuzzleEngineError(Exception):
    """Base class for all puzzle engine errors."""


class ConfigurationError(PuzzleEngineError):
    """Raised when the engine is set up in a way that can never produce a puzzle."""


class InsufficientDataError(PuzzleEngineError):
    """Raised when a pool or candidate list is too small to build a puzzle.

    Recoverable at the generator level, where each attempt re-runs the analyzers.
    """

    def __init__(self, message: str, needed: int = 0, found: int = 0):
        super().__init__(message)
        self.needed = needed
        self.found = found


class GenerationExhaustedError(PuzzleEngineError):
    """Raised when the retry loop runs out of attempts without an acceptable puzzle."""

    def __init__(self, message: str, attempts: int, best_score: float = 0.0):
        super().__init__(message)
        self.attempts = attempts
        self.best_score = best_score
