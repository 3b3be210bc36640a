"""External collaborators: verification, external group intake and storage."""

from .verifiers import (
    ExternalItem,
    VerifiedItem,
    ItemVerifier,
    NoOpVerifier,
    TMDBVerifier,
    MusicBrainzVerifier,
    create_verifier
)
from .intake import ExternalGroup, ExternalDifficulty, GroupIntake, derive_item_id
from .storage import SavedPuzzle, PuzzleStorage, InMemoryPuzzleStorage

__all__ = [
    "ExternalItem",
    "VerifiedItem",
    "ItemVerifier",
    "NoOpVerifier",
    "TMDBVerifier",
    "MusicBrainzVerifier",
    "create_verifier",
    "ExternalGroup",
    "ExternalDifficulty",
    "GroupIntake",
    "derive_item_id",
    "SavedPuzzle",
    "PuzzleStorage",
    "InMemoryPuzzleStorage"
]
