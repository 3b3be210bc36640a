"""Integration tests for the puzzle engine and generator."""

import logging
from unittest.mock import Mock

import pytest

from puzzle_engine.analyzers import DecadeAnalyzer, DirectorAnalyzer
from puzzle_engine.core import AnalyzerRegistry, GroupSelector
from puzzle_engine.exceptions import ConfigurationError, GenerationExhaustedError, InsufficientDataError
from puzzle_engine.models import GeneratedPuzzle, QualityMetrics
from puzzle_engine.pipeline import GenerationState, PuzzleEngine, PuzzleGenerator, RetryTracker
from puzzle_engine.validators import QualityScorer

from conftest import build_director_pool, make_item


def make_metrics(overall, meets=False):
    return QualityMetrics(
        clarity_score=5.0,
        difficulty_score=5.0,
        diversity_score=5.0,
        uniqueness_score=5.0,
        overlap_passed=True,
        overall_score=overall,
        meets_threshold=meets,
    )


class TestPuzzleEngine:
    """Tests for single puzzle assembly."""

    @pytest.fixture
    def engine(self, director_registry):
        return PuzzleEngine(director_registry)

    @pytest.mark.asyncio
    async def test_generate_puzzle(self, engine, director_pool):
        """Test assembling a complete puzzle from a rich pool."""
        puzzle = await engine.generate_puzzle(director_pool)

        assert len(puzzle.groups) == 4
        assert len(puzzle.items) == 16
        assert [group.tier for group in puzzle.groups] == [1, 2, 3, 4]
        assert [group.id for group in puzzle.groups] == [f"director-{i}" for i in range(4)]
        assert len(set(puzzle.item_ids)) == 16
        assert set(puzzle.item_ids) == {i for group in puzzle.groups for i in (item.id for item in group.items)}

    @pytest.mark.asyncio
    async def test_no_analyzers(self, director_pool):
        """Test that an empty or fully disabled registry is a configuration error."""
        with pytest.raises(ConfigurationError, match="No analyzers"):
            await PuzzleEngine(AnalyzerRegistry()).generate_puzzle(director_pool)

        disabled = AnalyzerRegistry([DirectorAnalyzer(enabled=False)])
        with pytest.raises(ConfigurationError):
            await PuzzleEngine(disabled).generate_puzzle(director_pool)

    @pytest.mark.asyncio
    async def test_not_enough_candidates(self, engine):
        """Test a pool that yields fewer candidates than groups needed."""
        pool = build_director_pool(directors=2)

        with pytest.raises(InsufficientDataError, match="Need 4, found 2") as exc_info:
            await engine.generate_puzzle(pool)

        assert exc_info.value.needed == 4
        assert exc_info.value.found == 2

    @pytest.mark.asyncio
    async def test_recent_connections_excluded(self, engine, director_pool):
        """Test that recently used labels are removed before selection."""
        recent = {f"Directed by Director {k}" for k in range(1, 38)}

        with pytest.raises(InsufficientDataError, match="found 3"):
            await engine.generate_puzzle(director_pool, recent_connections=recent)

        puzzle = await engine.generate_puzzle(director_pool, recent_connections={"Directed by Director 1"})
        assert "Directed by Director 1" not in puzzle.connections

    @pytest.mark.asyncio
    async def test_recent_items_excluded(self, engine, director_pool):
        """Test that recently used items are filtered out of a large pool."""
        recent_ids = {item.id for item in director_pool[:40]}

        puzzle = await engine.generate_puzzle(director_pool, recent_item_ids=recent_ids)

        assert not set(puzzle.item_ids) & recent_ids

    def test_recency_filter_falls_back_to_full_pool(self, engine, director_pool, caplog):
        """Test that an over-aggressive recency filter is abandoned."""
        recent_ids = {item.id for item in director_pool[:100]}

        with caplog.at_level(logging.WARNING, logger="puzzle_engine.pipeline.engine"):
            working = engine._apply_recency_filter(director_pool, recent_ids)

        assert len(working) == len(director_pool)
        assert "using the full pool" in caplog.text

    def test_recency_filter_disabled(self, director_registry, director_pool):
        """Test that recency avoidance can be switched off."""
        engine = PuzzleEngine(director_registry, avoid_recent_content=False)

        assert len(engine._apply_recency_filter(director_pool, {10, 11})) == len(director_pool)

    @pytest.mark.asyncio
    async def test_selector_shortfall(self, director_registry, director_pool):
        """Test that an under-filled selection is reported as insufficient data."""
        selector = Mock(spec=GroupSelector)
        selector.select_groups.return_value = []
        engine = PuzzleEngine(director_registry, selector=selector)

        with pytest.raises(InsufficientDataError, match="Failed to select enough non-overlapping groups"):
            await engine.generate_puzzle(director_pool)

    def test_analyzer_names_restrict_run(self):
        """Test limiting a run to named analyzers."""
        registry = AnalyzerRegistry([DirectorAnalyzer(), DecadeAnalyzer()])
        engine = PuzzleEngine(registry, analyzer_names=["decade"])

        assert [analyzer.name for analyzer in engine._active_analyzers()] == ["decade"]

    def test_configure(self, engine):
        """Test partial engine configuration."""
        engine.configure(groups_needed=3)

        config = engine.get_config()
        assert config.groups_needed == 3
        assert config.min_filtered_pool_size == 100


class TestRetryTracker:
    """Tests for the retry state machine."""

    @pytest.fixture
    def puzzle(self):
        return GeneratedPuzzle(groups=[], items=[])

    def test_success(self, puzzle):
        """Test ATTEMPTING to SUCCEEDED."""
        tracker = RetryTracker(max_attempts=3, threshold=50, fallback_ratio=0.8)
        tracker.begin_attempt()
        tracker.record_success(puzzle, make_metrics(60, meets=True))

        assert tracker.state is GenerationState.SUCCEEDED
        assert tracker.result.attempt_number == 1
        assert tracker.result.meets_threshold is True

    def test_miss_with_attempts_left(self, puzzle):
        """Test that a miss keeps the loop running and tracks the best puzzle."""
        tracker = RetryTracker(max_attempts=3, threshold=50, fallback_ratio=0.8)
        tracker.begin_attempt()
        tracker.record_miss(puzzle, make_metrics(30))
        tracker.begin_attempt()
        tracker.record_miss(puzzle, make_metrics(20))

        assert tracker.state is GenerationState.ATTEMPTING
        assert tracker.best_score == 30

    def test_exhausted_with_fallback(self, puzzle):
        """Test that a near miss is returned once attempts run out."""
        tracker = RetryTracker(max_attempts=2, threshold=50, fallback_ratio=0.8)
        tracker.begin_attempt()
        tracker.record_failure(InsufficientDataError("no groups"))
        tracker.begin_attempt()
        tracker.record_miss(puzzle, make_metrics(40))

        assert tracker.state is GenerationState.EXHAUSTED_WITH_FALLBACK
        assert tracker.result.meets_threshold is False
        assert tracker.result.attempt_number == 2
        assert tracker.result.quality_score == 40

    def test_exhausted_failed(self, puzzle):
        """Test that a best score below the floor fails."""
        tracker = RetryTracker(max_attempts=1, threshold=50, fallback_ratio=0.8)
        tracker.begin_attempt()
        tracker.record_miss(puzzle, make_metrics(39.9))

        assert tracker.state is GenerationState.EXHAUSTED_FAILED
        assert tracker.result is None
        assert tracker.fallback_floor == pytest.approx(40)

    def test_only_failures(self):
        """Test that attempts without any puzzle end in failure."""
        tracker = RetryTracker(max_attempts=2, threshold=50, fallback_ratio=0.8)
        for _ in range(2):
            tracker.begin_attempt()
            tracker.record_failure(InsufficientDataError("no groups"))

        assert tracker.state is GenerationState.EXHAUSTED_FAILED
        assert tracker.last_error == "no groups"

    def test_no_attempts_after_finish(self, puzzle):
        """Test that a finished loop cannot be restarted."""
        tracker = RetryTracker(max_attempts=1, threshold=50, fallback_ratio=0.8)
        tracker.begin_attempt()
        tracker.record_success(puzzle, make_metrics(90, meets=True))

        with pytest.raises(RuntimeError):
            tracker.begin_attempt()


class TestPuzzleGenerator:
    """Tests for the retrying generator."""

    @pytest.fixture
    def generator(self, director_registry):
        return PuzzleGenerator(director_registry)

    @pytest.mark.asyncio
    async def test_generate_single(self, generator, director_pool):
        """Test generating a puzzle that clears the default threshold."""
        puzzle = await generator.generate_single(director_pool)

        assert puzzle.meets_threshold is True
        assert puzzle.attempt_number == 1
        assert puzzle.quality_score >= 35
        assert puzzle.metrics.overlap_passed is True
        assert generator.stats["successful_generations"] == 1
        assert generator.stats["total_attempts"] == 1

    @pytest.mark.asyncio
    async def test_pool_too_small(self, generator):
        """Test failing fast on a small pool."""
        pool = build_director_pool(directors=10)

        with pytest.raises(InsufficientDataError, match=r"Filtered pool too small: 40 items \(minimum: 50\)"):
            await generator.generate_single(pool)

    @pytest.mark.asyncio
    async def test_pool_filter_applied(self, director_registry, director_pool):
        """Test that the pool filter runs before the size check."""
        generator = PuzzleGenerator(director_registry, pool_filter={"min_year": 2100})

        with pytest.raises(InsufficientDataError, match="0 items"):
            await generator.generate_single(director_pool)

    @pytest.mark.asyncio
    async def test_fallback_to_best_attempt(self, director_registry, director_pool):
        """Test returning a near miss when the threshold is unreachable."""
        scorer = Mock(spec=QualityScorer)
        scorer.score.return_value = make_metrics(80)
        generator = PuzzleGenerator(director_registry, scorer=scorer, quality_threshold=95, max_attempts=2)

        puzzle = await generator.generate_single(director_pool)

        assert puzzle.meets_threshold is False
        assert puzzle.attempt_number == 2
        assert puzzle.quality_score == 80
        assert scorer.score.call_count == 2
        assert generator.stats["fallback_generations"] == 1

    @pytest.mark.asyncio
    async def test_exhausted_below_fallback_floor(self, director_registry, director_pool):
        """Test failing when the best attempt is too far below the threshold."""
        scorer = Mock(spec=QualityScorer)
        scorer.score.return_value = make_metrics(50)
        generator = PuzzleGenerator(director_registry, scorer=scorer, quality_threshold=95, max_attempts=2)

        with pytest.raises(GenerationExhaustedError, match="after 2 attempts") as exc_info:
            await generator.generate_single(director_pool)

        assert exc_info.value.attempts == 2
        assert exc_info.value.best_score == 50
        assert generator.stats["failed_generations"] == 1

    @pytest.mark.asyncio
    async def test_best_attempt_kept(self, director_registry, director_pool):
        """Test that the highest scoring attempt is the one returned."""
        scorer = Mock(spec=QualityScorer)
        scorer.score.side_effect = [make_metrics(70), make_metrics(85), make_metrics(78)]
        generator = PuzzleGenerator(director_registry, scorer=scorer, quality_threshold=95, max_attempts=3)

        puzzle = await generator.generate_single(director_pool)

        assert puzzle.quality_score == 85
        assert puzzle.attempt_number == 3

    @pytest.mark.asyncio
    async def test_engine_failures_are_retried(self, director_registry):
        """Test that insufficient data on every attempt exhausts the loop."""
        pool = [make_item(i) for i in range(60)]
        generator = PuzzleGenerator(director_registry, max_attempts=3)

        with pytest.raises(GenerationExhaustedError, match="Last error: Not enough potential groups found"):
            await generator.generate_single(pool)

        assert generator.stats["total_attempts"] == 3

    @pytest.mark.asyncio
    async def test_configuration_error_not_retried(self, director_pool):
        """Test that a missing analyzer set aborts immediately."""
        generator = PuzzleGenerator(AnalyzerRegistry(), max_attempts=5)

        with pytest.raises(ConfigurationError):
            await generator.generate_single(director_pool)

    @pytest.mark.asyncio
    async def test_generate_batch(self, generator, director_pool):
        """Test that batch puzzles share no items or connection labels."""
        result = await generator.generate_batch(director_pool, 2)

        assert result.succeeded == 2
        assert result.failed == 0
        assert result.total_attempts == 2

        first, second = result.puzzles
        assert not set(first.item_ids) & set(second.item_ids)
        assert not set(first.connections) & set(second.connections)

    @pytest.mark.asyncio
    async def test_batch_counts_failures(self, generator):
        """Test that batch failures are counted rather than raised."""
        result = await generator.generate_batch(build_director_pool(directors=5), 3)

        assert result.puzzles == []
        assert result.failed == 3
        assert result.average_quality == 0

    def test_configure_propagates(self, generator):
        """Test that quality and analyzer settings reach the scorer and engine."""
        generator.configure({"quality": {"min_score": 50}, "enabled_analyzers": ["director"], "groups_per_puzzle": 3})

        assert generator.scorer.config.min_score == 50
        assert generator.scorer.config.weights.clarity == 0.25
        assert generator.engine.config.analyzer_names == ["director"]
        assert generator.engine.config.groups_needed == 3
        assert generator.get_config().groups_per_puzzle == 3

    def test_get_status(self, generator):
        """Test the status report."""
        status = generator.get_status()

        assert status["generator_status"] == "operational"
        assert status["analyzers"]["director"]["status"] == "enabled"
        assert status["statistics"]["total_puzzles_generated"] == 0
        assert status["configuration"]["quality_threshold"] == 35
