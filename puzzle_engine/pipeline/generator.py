"""Puzzle generator: retries the engine until a puzzle clears the quality bar."""

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import AbstractSet, Any, Dict, Optional, Sequence, Set

from ..core.registry import AnalyzerRegistry
from ..core.selector import GroupSelector
from ..exceptions import GenerationExhaustedError, InsufficientDataError, PuzzleEngineError
from ..models.config import EngineConfig, GeneratorConfig
from ..models.groups import BatchGenerationResult, GeneratedPuzzle, PuzzleWithMetrics
from ..models.items import Item
from ..models.quality import QualityMetrics
from ..utils.config import merge_config
from ..utils.filters import apply_pool_filter
from ..validators.base import round_score
from ..validators.scorer import QualityScorer
from .engine import PuzzleEngine

logger = logging.getLogger(__name__)


class GenerationState(str, Enum):
    """States of a single-puzzle retry loop."""
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED_WITH_FALLBACK = "exhausted_with_fallback"
    EXHAUSTED_FAILED = "exhausted_failed"


class RetryTracker:
    """Explicit state machine for the bounded retry loop.

    ATTEMPTING moves to SUCCEEDED as soon as an attempt meets the threshold.
    A missed or failed attempt stays in ATTEMPTING while attempts remain,
    remembering the best-scoring puzzle. Once attempts run out the tracker
    lands in EXHAUSTED_WITH_FALLBACK if the best score reaches
    ``fallback_ratio * threshold`` and EXHAUSTED_FAILED otherwise.
    """

    def __init__(self, max_attempts: int, threshold: float, fallback_ratio: float):
        self.max_attempts = max_attempts
        self.threshold = threshold
        self.fallback_ratio = fallback_ratio

        self.state = GenerationState.ATTEMPTING
        self.attempts = 0
        self.last_error: Optional[str] = None
        self.best_puzzle: Optional[GeneratedPuzzle] = None
        self.best_metrics: Optional[QualityMetrics] = None
        self.result: Optional[PuzzleWithMetrics] = None

    @property
    def best_score(self) -> float:
        return self.best_metrics.overall_score if self.best_metrics else 0.0

    @property
    def fallback_floor(self) -> float:
        return self.threshold * self.fallback_ratio

    @property
    def finished(self) -> bool:
        return self.state is not GenerationState.ATTEMPTING

    def begin_attempt(self) -> int:
        if self.finished:
            raise RuntimeError(f"Retry loop already finished in state {self.state.value}")
        self.attempts += 1
        return self.attempts

    def record_success(self, puzzle: GeneratedPuzzle, metrics: QualityMetrics) -> None:
        self.result = _with_metrics(puzzle, metrics, meets_threshold=True, attempt_number=self.attempts)
        self.state = GenerationState.SUCCEEDED

    def record_miss(self, puzzle: GeneratedPuzzle, metrics: QualityMetrics) -> None:
        if metrics.overall_score > self.best_score:
            self.best_puzzle = puzzle
            self.best_metrics = metrics
        self._advance()

    def record_failure(self, error: Exception) -> None:
        self.last_error = str(error)
        self._advance()

    def _advance(self) -> None:
        if self.attempts < self.max_attempts:
            return

        if self.best_puzzle is not None and self.best_score >= self.fallback_floor:
            self.result = _with_metrics(
                self.best_puzzle, self.best_metrics, meets_threshold=False, attempt_number=self.max_attempts
            )
            self.state = GenerationState.EXHAUSTED_WITH_FALLBACK
        else:
            self.state = GenerationState.EXHAUSTED_FAILED


def _with_metrics(puzzle: GeneratedPuzzle, metrics: QualityMetrics, meets_threshold: bool,
                  attempt_number: int) -> PuzzleWithMetrics:
    return PuzzleWithMetrics(
        groups=puzzle.groups,
        items=puzzle.items,
        quality_score=metrics.overall_score,
        meets_threshold=meets_threshold,
        attempt_number=attempt_number,
        metrics=metrics,
    )


class PuzzleGenerator:
    """Wraps the engine with pool filtering, quality scoring and retries."""

    def __init__(self, registry: AnalyzerRegistry, config: Optional[GeneratorConfig] = None,
                 scorer: Optional[QualityScorer] = None, selector: Optional[GroupSelector] = None,
                 min_filtered_pool_size: int = 100, **overrides: Any):
        self.config = merge_config(config or GeneratorConfig(), overrides)
        self.scorer = scorer or QualityScorer(self.config.quality)
        self.engine = PuzzleEngine(
            registry,
            selector=selector,
            config=EngineConfig(
                pool_size=self.config.pool_size,
                groups_needed=self.config.groups_per_puzzle,
                avoid_recent_content=self.config.avoid_recent_content,
                min_filtered_pool_size=min_filtered_pool_size,
                analyzer_names=self.config.enabled_analyzers,
            ),
        )

        # Generator statistics
        self.stats = {
            "total_puzzles_generated": 0,
            "successful_generations": 0,
            "fallback_generations": 0,
            "failed_generations": 0,
            "total_attempts": 0,
            "average_quality_score": 0.0,
            "average_processing_time": 0.0,
            "last_generation_time": None
        }

    async def generate_single(self, pool: Sequence[Item],
                              recent_item_ids: Optional[AbstractSet[int]] = None,
                              recent_connections: Optional[AbstractSet[str]] = None) -> PuzzleWithMetrics:
        """Generate one puzzle, retrying until it meets the quality threshold.

        Returns the best near-miss, marked ``meets_threshold=False``, when no
        attempt clears the bar but one comes close enough.

        Raises:
            InsufficientDataError: the filtered pool is below ``min_pool_size``.
            ConfigurationError: the engine has no analyzers to run.
            GenerationExhaustedError: attempts ran out without an acceptable puzzle.
        """
        start_time = time.time()

        filtered_pool = apply_pool_filter(pool, self.config.pool_filter)
        if len(filtered_pool) < self.config.min_pool_size:
            raise InsufficientDataError(
                f"Filtered pool too small: {len(filtered_pool)} items (minimum: {self.config.min_pool_size})",
                needed=self.config.min_pool_size,
                found=len(filtered_pool),
            )

        threshold = self.config.quality_threshold
        tracker = RetryTracker(self.config.max_attempts, threshold, self.config.fallback_ratio)

        while not tracker.finished:
            attempt = tracker.begin_attempt()
            try:
                puzzle = await self.engine.generate_puzzle(filtered_pool, recent_item_ids, recent_connections)
            except InsufficientDataError as e:
                logger.warning(f"Puzzle generation failed (attempt {attempt}/{tracker.max_attempts}): {e}")
                tracker.record_failure(e)
                continue

            metrics = self.scorer.score([group.to_candidate() for group in puzzle.groups])
            if metrics.meets_threshold and metrics.overall_score >= threshold:
                tracker.record_success(puzzle, metrics)
            else:
                logger.warning(
                    f"Puzzle quality below threshold ({metrics.overall_score}/{threshold}), "
                    f"attempt {attempt}/{tracker.max_attempts}"
                )
                tracker.record_miss(puzzle, metrics)

        processing_time = time.time() - start_time
        self._update_stats(tracker, processing_time)

        if tracker.state is GenerationState.SUCCEEDED:
            logger.info(f"Generated puzzle with quality {tracker.result.quality_score} on attempt {tracker.attempts}")
            return tracker.result

        if tracker.state is GenerationState.EXHAUSTED_WITH_FALLBACK:
            percent = round(tracker.best_score / threshold * 100) if threshold else 100
            logger.warning(f"Returning best attempt with quality score {tracker.best_score} ({percent}% of threshold)")
            return tracker.result

        last_error = tracker.last_error or (
            f"best quality score {tracker.best_score} below fallback floor {tracker.fallback_floor:g}"
        )
        raise GenerationExhaustedError(
            f"Failed to generate quality puzzle after {tracker.max_attempts} attempts. Last error: {last_error}",
            attempts=tracker.max_attempts,
            best_score=tracker.best_score,
        )

    async def generate_batch(self, pool: Sequence[Item], count: int) -> BatchGenerationResult:
        """Generate up to ``count`` puzzles that share no items or connection labels.

        Failures are counted, never raised.
        """
        puzzles = []
        used_item_ids: Set[int] = set()
        used_connections: Set[str] = set()
        failed = 0
        total_attempts = 0

        for index in range(count):
            try:
                puzzle = await self.generate_single(pool, used_item_ids, used_connections)
            except PuzzleEngineError as e:
                failed += 1
                logger.error(f"Failed to generate puzzle {index + 1}/{count}: {e}")
                continue

            puzzles.append(puzzle)
            total_attempts += puzzle.attempt_number
            used_item_ids.update(puzzle.item_ids)
            used_connections.update(puzzle.connections)
            logger.info(
                f"Generated puzzle {index + 1}/{count} "
                f"(quality: {puzzle.quality_score}, attempts: {puzzle.attempt_number})"
            )

        average_quality = sum(p.quality_score for p in puzzles) / len(puzzles) if puzzles else 0.0
        return BatchGenerationResult(
            puzzles=puzzles,
            succeeded=len(puzzles),
            failed=failed,
            total_attempts=total_attempts,
            average_quality=round_score(average_quality),
        )

    def _update_stats(self, tracker: RetryTracker, processing_time: float) -> None:
        """Update generator statistics."""
        self.stats["total_puzzles_generated"] += 1
        self.stats["total_attempts"] += tracker.attempts
        self.stats["last_generation_time"] = datetime.now(timezone.utc).isoformat()

        if tracker.state is GenerationState.SUCCEEDED:
            self.stats["successful_generations"] += 1
        elif tracker.state is GenerationState.EXHAUSTED_WITH_FALLBACK:
            self.stats["fallback_generations"] += 1
        else:
            self.stats["failed_generations"] += 1
            return

        delivered = self.stats["successful_generations"] + self.stats["fallback_generations"]
        current_avg = self.stats["average_quality_score"]
        self.stats["average_quality_score"] = (current_avg * (delivered - 1) + tracker.result.quality_score) / delivered

        current_time = self.stats["average_processing_time"]
        self.stats["average_processing_time"] = (current_time * (delivered - 1) + processing_time) / delivered

    def configure(self, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        """Merge a partial config and push the relevant parts to the engine and scorer."""
        updates = dict(overrides or {})
        updates.update(kwargs)
        if not updates:
            return

        self.config = merge_config(self.config, updates)
        if "quality" in updates:
            self.scorer.configure(self.config.quality.model_dump())
        self.engine.configure(
            pool_size=self.config.pool_size,
            groups_needed=self.config.groups_per_puzzle,
            avoid_recent_content=self.config.avoid_recent_content,
            analyzer_names=self.config.enabled_analyzers,
        )

    def get_config(self) -> GeneratorConfig:
        return self.config.model_copy(deep=True)

    def get_status(self) -> Dict[str, Any]:
        """Get current generator status and statistics."""
        registry = self.engine.registry
        return {
            "generator_status": "operational",
            "analyzers": {
                analyzer.name: {
                    "status": "enabled" if analyzer.config.enabled else "disabled",
                    "connection_type": analyzer.connection_type,
                }
                for analyzer in registry.get_all()
            },
            "statistics": dict(self.stats),
            "configuration": {
                "quality_threshold": self.config.quality_threshold,
                "max_attempts": self.config.max_attempts,
                "groups_per_puzzle": self.config.groups_per_puzzle,
                "min_pool_size": self.config.min_pool_size,
                "fallback_ratio": self.config.fallback_ratio,
                "enabled_analyzers": self.config.enabled_analyzers,
            }
        }
