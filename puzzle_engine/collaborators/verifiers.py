"""Item verification against external metadata providers.

A verifier confirms that a (title, year) pair exists. Verification failure
never blocks a group; unverified items are flagged and kept.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

import requests
from pydantic import BaseModel, ConfigDict

from ..config import settings

logger = logging.getLogger(__name__)


class ExternalItem(BaseModel):
    """An item as supplied by the AI group generator."""

    model_config = ConfigDict(frozen=True)

    title: str
    year: Optional[int] = None
    artist: Optional[str] = None


class VerifiedItem(BaseModel):
    """Verification outcome for a single item."""

    model_config = ConfigDict(frozen=True)

    title: str
    year: Optional[int] = None
    external_id: Optional[int] = None
    verified: bool = False


def extract_year(date_string: Optional[str]) -> Optional[int]:
    if not date_string or len(date_string) < 4:
        return None
    try:
        return int(date_string[:4])
    except ValueError:
        return None


def normalize_title(title: str) -> str:
    return title.lower().strip()


class ItemVerifier(ABC):
    """Base class for item verifiers."""

    @abstractmethod
    def verify_item(self, title: str, year: Optional[int] = None) -> VerifiedItem:
        """Verify a single item."""
        pass

    def verify_items(self, items: Iterable[ExternalItem]) -> List[VerifiedItem]:
        return [self.verify_item(item.title, item.year) for item in items]

    @staticmethod
    def unverified(title: str, year: Optional[int] = None) -> VerifiedItem:
        return VerifiedItem(title=title, year=year, external_id=None, verified=False)


class NoOpVerifier(ItemVerifier):
    """Marks everything as verified, for domains without a metadata provider."""

    def verify_item(self, title: str, year: Optional[int] = None) -> VerifiedItem:
        return VerifiedItem(title=title, year=year, external_id=None, verified=True)


class TMDBVerifier(ItemVerifier):
    """Verifies films through the TMDB search API."""

    year_tolerance = 1

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key or settings.tmdb_api_key
        self.base_url = (base_url or settings.tmdb_base_url).rstrip("/")
        self.timeout = timeout or settings.verification_timeout_seconds
        self.session = session or requests.Session()

    def search(self, title: str) -> List[dict]:
        response = self.session.get(
            f"{self.base_url}/search/movie",
            params={"api_key": self.api_key, "query": title},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json().get("results") or []

    def verify_item(self, title: str, year: Optional[int] = None) -> VerifiedItem:
        try:
            results = self.search(title)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Failed to verify film \"{title}\" ({year}): {e}")
            return self.unverified(title, year)

        dated = [(movie, extract_year(movie.get("release_date"))) for movie in results]
        dated = [(movie, release_year) for movie, release_year in dated if release_year is not None]

        def year_matches(release_year: int) -> bool:
            return year is None or abs(release_year - year) <= self.year_tolerance

        wanted = normalize_title(title)
        for movie, release_year in dated:
            if year_matches(release_year) and normalize_title(movie.get("title", "")) == wanted:
                return VerifiedItem(title=movie["title"], year=release_year, external_id=movie["id"], verified=True)

        # No title match: accept the first result within the year tolerance
        if year is not None:
            for movie, release_year in dated:
                if year_matches(release_year):
                    return VerifiedItem(
                        title=movie.get("title", title), year=release_year, external_id=movie["id"], verified=True
                    )

        return self.unverified(title, year)


class MusicBrainzVerifier(ItemVerifier):
    """Verifies song titles through the MusicBrainz recording search."""

    base_url = "https://musicbrainz.org/ws/2"
    user_agent = "puzzle-engine/1.0"
    # MusicBrainz allows roughly one request per second
    request_delay_seconds = 0.3

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.timeout = timeout or settings.verification_timeout_seconds
        self.session = session or requests.Session()

    def verify_item(self, title: str, year: Optional[int] = None) -> VerifiedItem:
        try:
            response = self.session.get(
                f"{self.base_url}/recording",
                params={"query": f'recording:"{title}"', "fmt": "json", "limit": 10},
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            recordings = response.json().get("recordings") or []
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Failed to verify song \"{title}\": {e}")
            return self.unverified(title, year)

        wanted = normalize_title(title)
        for recording in recordings:
            if normalize_title(recording.get("title", "")) == wanted:
                return VerifiedItem(
                    title=title, year=extract_year(recording.get("first-release-date")), verified=True
                )
        return self.unverified(title, year)

    def verify_items(self, items: Iterable[ExternalItem]) -> List[VerifiedItem]:
        results = []
        for index, item in enumerate(items):
            if index:
                time.sleep(self.request_delay_seconds)
            results.append(self.verify_item(item.title, item.year))
        return results


# Verifier kind per content domain
DOMAIN_VERIFIERS = {
    "films": "tmdb",
    "music": "none",
    "books": "none",
    "sports": "none",
}


def create_verifier(domain: str, kind: Optional[str] = None) -> ItemVerifier:
    """Pick the verifier for a content domain.

    ``kind`` ("tmdb", "musicbrainz" or "none") overrides the domain default.
    Films fall back to the no-op verifier when no TMDB key is configured.
    """
    kind = kind or DOMAIN_VERIFIERS.get(domain, "none")
    if kind == "tmdb":
        if not settings.tmdb_api_key:
            logger.warning("TMDB_API_KEY not set, film verification disabled")
            return NoOpVerifier()
        return TMDBVerifier()
    if kind == "musicbrainz":
        return MusicBrainzVerifier()
    return NoOpVerifier()
