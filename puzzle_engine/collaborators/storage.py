"""Persistence contract for generated puzzles."""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from ..models.groups import GeneratedPuzzle, PuzzleGroup
from ..models.items import Item

logger = logging.getLogger(__name__)


class SavedPuzzle(BaseModel):
    """A stored puzzle. Keeps group structure and the flat item order."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    groups: List[PuzzleGroup]
    items: List[Item]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    puzzle_date: Optional[date] = Field(None, description="Day the puzzle is scheduled for")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_puzzle(cls, puzzle: GeneratedPuzzle, puzzle_date: Optional[date] = None,
                    **metadata: Any) -> "SavedPuzzle":
        return cls(groups=puzzle.groups, items=puzzle.items, puzzle_date=puzzle_date, metadata=metadata)


class PuzzleStorage(ABC):
    """Read/write contract the engine expects from a persistence layer."""

    @abstractmethod
    def save_puzzle(self, puzzle: SavedPuzzle) -> str:
        """Store a puzzle and return its id."""
        pass

    @abstractmethod
    def load_puzzle(self, puzzle_id: str) -> Optional[SavedPuzzle]:
        pass

    @abstractmethod
    def get_daily_puzzle(self, puzzle_date: date) -> Optional[SavedPuzzle]:
        pass

    @abstractmethod
    def list_puzzles(self, limit: int = 50) -> List[SavedPuzzle]:
        pass

    def recent_content(self, limit: int = 30) -> Tuple[Set[int], Set[str]]:
        """Item ids and connection labels of the most recent puzzles."""
        item_ids: Set[int] = set()
        connections: Set[str] = set()
        for puzzle in self.list_puzzles(limit):
            item_ids.update(item.id for item in puzzle.items)
            connections.update(group.connection for group in puzzle.groups)
        return item_ids, connections


class InMemoryPuzzleStorage(PuzzleStorage):
    """Process-local storage, suitable for development and tests."""

    def __init__(self):
        self._puzzles: Dict[str, SavedPuzzle] = {}
        self._lock = threading.Lock()

    def save_puzzle(self, puzzle: SavedPuzzle) -> str:
        with self._lock:
            self._puzzles[puzzle.id] = puzzle
        logger.debug(f"Saved puzzle {puzzle.id}")
        return puzzle.id

    def load_puzzle(self, puzzle_id: str) -> Optional[SavedPuzzle]:
        with self._lock:
            return self._puzzles.get(puzzle_id)

    def get_daily_puzzle(self, puzzle_date: date) -> Optional[SavedPuzzle]:
        with self._lock:
            for puzzle in self._puzzles.values():
                if puzzle.puzzle_date == puzzle_date:
                    return puzzle
        return None

    def list_puzzles(self, limit: int = 50) -> List[SavedPuzzle]:
        with self._lock:
            puzzles = sorted(self._puzzles.values(), key=lambda p: p.created_at, reverse=True)
        return puzzles[:limit]

