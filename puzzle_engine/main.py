"""Main FastAPI application for the Puzzle Engine."""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
import structlog

from .analyzers import ThemeCatalog
from .collaborators import (
    ExternalGroup,
    GroupIntake,
    InMemoryPuzzleStorage,
    PuzzleStorage,
    SavedPuzzle,
    create_verifier
)
from .config import settings
from .core import AnalyzerRegistry, create_default_registry
from .exceptions import ConfigurationError, GenerationExhaustedError, InsufficientDataError
from .models import (
    BatchGenerationResult,
    CandidateGroup,
    GeneratorConfig,
    Item,
    PuzzleWithMetrics,
    QualityMetrics
)
from .pipeline import PuzzleGenerator
from .validators import QualityScorer

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = structlog.get_logger(__name__)

# Global components
registry: Optional[AnalyzerRegistry] = None
puzzle_generator: Optional[PuzzleGenerator] = None
puzzle_storage: Optional[PuzzleStorage] = None


class GenerateRequest(BaseModel):
    pool: List[Item] = Field(..., description="Candidate items for the puzzle")
    recent_item_ids: List[int] = Field(default_factory=list)
    recent_connections: List[str] = Field(default_factory=list)
    avoid_stored_content: bool = Field(True, description="Also avoid items and labels of stored puzzles")
    puzzle_date: Optional[date] = None


class GenerateResponse(BaseModel):
    puzzle_id: str
    puzzle: PuzzleWithMetrics
    message: str


class BatchRequest(BaseModel):
    pool: List[Item]
    count: int = Field(..., ge=1, le=31)


class ScoreRequest(BaseModel):
    groups: List[CandidateGroup]


class ImportRequest(BaseModel):
    groups: List[ExternalGroup]
    domain: str = Field("films", description="Content domain, selects the verifier")


class ImportResponse(BaseModel):
    candidates: List[CandidateGroup]
    rejected: int
    metrics: Optional[QualityMetrics] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    logger.info("Starting Puzzle Engine...")

    global registry, puzzle_generator, puzzle_storage

    try:
        theme_catalog = ThemeCatalog.from_file(settings.themes_path) if settings.themes_path else ThemeCatalog.default()
        registry = create_default_registry(theme_catalog)
        puzzle_generator = PuzzleGenerator(
            registry,
            config=GeneratorConfig.from_settings(settings),
            min_filtered_pool_size=settings.min_filtered_pool_size,
        )
        puzzle_storage = InMemoryPuzzleStorage()

        logger.info("Puzzle Engine started", analyzers=registry.get_names(), themes=theme_catalog.count())

        yield

    except Exception as e:
        logger.error(f"Failed to start application: {e}")
        raise

    finally:
        logger.info("Puzzle Engine shut down")


# Create FastAPI app
app = FastAPI(
    title="Puzzle Engine",
    description="Connection discovery, group selection and quality scoring for Connections puzzles",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependency injection
def get_registry() -> AnalyzerRegistry:
    """Get analyzer registry dependency."""
    if registry is None:
        raise HTTPException(status_code=503, detail="Analyzer registry not available")
    return registry


def get_generator() -> PuzzleGenerator:
    """Get puzzle generator dependency."""
    if puzzle_generator is None:
        raise HTTPException(status_code=503, detail="Puzzle generator not available")
    return puzzle_generator


def get_storage() -> PuzzleStorage:
    """Get puzzle storage dependency."""
    if puzzle_storage is None:
        raise HTTPException(status_code=503, detail="Puzzle storage not available")
    return puzzle_storage


def get_scorer(generator: PuzzleGenerator = Depends(get_generator)) -> QualityScorer:
    return generator.scorer


# Health check endpoints
@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "Puzzle Engine"}


@app.get("/api/v1/analyzers")
async def list_analyzers(reg: AnalyzerRegistry = Depends(get_registry)):
    """List registered analyzers and their configuration."""
    return {
        "analyzers": [
            {
                "name": analyzer.name,
                "connection_type": analyzer.connection_type,
                "enabled": analyzer.config.enabled,
                "config": analyzer.config.model_dump(),
            }
            for analyzer in reg.get_all()
        ],
        "count": reg.count()
    }


# Puzzle generation endpoints
@app.post("/api/v1/puzzles/generate", response_model=GenerateResponse)
async def generate_puzzle(
    request: GenerateRequest,
    generator: PuzzleGenerator = Depends(get_generator),
    storage: PuzzleStorage = Depends(get_storage)
):
    """Generate a puzzle from the supplied pool and store it."""
    recent_ids = set(request.recent_item_ids)
    recent_connections = set(request.recent_connections)
    if request.avoid_stored_content:
        stored_ids, stored_connections = storage.recent_content()
        recent_ids |= stored_ids
        recent_connections |= stored_connections

    logger.info("Generating puzzle", pool_size=len(request.pool), recent_items=len(recent_ids))

    try:
        puzzle = await generator.generate_single(request.pool, recent_ids, recent_connections)
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=f"Generator misconfigured: {e}")
    except InsufficientDataError as e:
        raise HTTPException(status_code=422, detail=f"No puzzle could be generated from this pool: {e}")
    except GenerationExhaustedError as e:
        raise HTTPException(status_code=422, detail=f"No puzzle reached the quality bar: {e}")

    saved = SavedPuzzle.from_puzzle(
        puzzle,
        puzzle_date=request.puzzle_date,
        quality_score=puzzle.quality_score,
        meets_threshold=puzzle.meets_threshold,
    )
    puzzle_id = storage.save_puzzle(saved)

    message = "Puzzle generated successfully"
    if not puzzle.meets_threshold:
        message = "Puzzle generated below the quality threshold (best attempt returned)"
    return GenerateResponse(puzzle_id=puzzle_id, puzzle=puzzle, message=message)


@app.post("/api/v1/puzzles/batch", response_model=BatchGenerationResult)
async def generate_batch(
    request: BatchRequest,
    generator: PuzzleGenerator = Depends(get_generator),
    storage: PuzzleStorage = Depends(get_storage)
):
    """Generate several puzzles that share no items or connections."""
    logger.info("Generating puzzle batch", pool_size=len(request.pool), count=request.count)
    result = await generator.generate_batch(request.pool, request.count)
    for puzzle in result.puzzles:
        storage.save_puzzle(SavedPuzzle.from_puzzle(puzzle, quality_score=puzzle.quality_score))
    return result


@app.get("/api/v1/puzzles/{puzzle_id}", response_model=SavedPuzzle)
async def get_puzzle(puzzle_id: str, storage: PuzzleStorage = Depends(get_storage)):
    """Retrieve a stored puzzle by ID."""
    puzzle = storage.load_puzzle(puzzle_id)
    if puzzle is None:
        raise HTTPException(status_code=404, detail="Puzzle not found")
    return puzzle


@app.get("/api/v1/puzzles/daily/{puzzle_date}", response_model=SavedPuzzle)
async def get_daily_puzzle(puzzle_date: date, storage: PuzzleStorage = Depends(get_storage)):
    """Retrieve the puzzle scheduled for a date."""
    puzzle = storage.get_daily_puzzle(puzzle_date)
    if puzzle is None:
        raise HTTPException(status_code=404, detail=f"No puzzle scheduled for {puzzle_date}")
    return puzzle


# Quality endpoints
@app.post("/api/v1/quality/score", response_model=QualityMetrics)
async def score_groups(request: ScoreRequest, scorer: QualityScorer = Depends(get_scorer)):
    """Score an externally assembled set of groups."""
    return scorer.score(request.groups)


@app.post("/api/v1/groups/import", response_model=ImportResponse)
def import_groups(request: ImportRequest, scorer: QualityScorer = Depends(get_scorer)):
    """Verify externally generated groups and convert them into candidates.

    Runs in the threadpool since verification makes blocking HTTP calls.
    """
    intake = GroupIntake(create_verifier(request.domain))
    candidates = intake.to_candidates(request.groups)
    metrics = scorer.score(candidates) if candidates else None
    return ImportResponse(
        candidates=candidates,
        rejected=len(request.groups) - len(candidates),
        metrics=metrics
    )


# Pipeline management endpoints
@app.get("/api/v1/generator/status")
async def get_generator_status(generator: PuzzleGenerator = Depends(get_generator)):
    """Get current generator status and metrics."""
    return {"generator_status": generator.get_status()}


# Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Handle HTTP exceptions."""
    logger.error(f"HTTP exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "status_code": exc.status_code}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "puzzle_engine.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development"
    )
