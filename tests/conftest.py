"""Shared fixtures for the Puzzle Engine tests."""

import pytest

from puzzle_engine.analyzers import DirectorAnalyzer
from puzzle_engine.core import AnalyzerRegistry
from puzzle_engine.models import CastCredit, CandidateGroup, Credits, CrewCredit, Item


def make_item(item_id, title=None, year=2000, vote_count=1000, director=None, cast=(),
              overview="", genre_ids=(), popularity=10.0):
    """Build an item; ``director`` is an (id, name) pair, ``cast`` a list of them in billing order."""
    crew = []
    if director is not None:
        crew.append(CrewCredit(id=director[0], name=director[1], job="Director", department="Directing"))
    return Item(
        id=item_id,
        title=title or f"Item {item_id}",
        release_date=f"{year}-06-01" if year else None,
        vote_count=vote_count,
        popularity=popularity,
        overview=overview,
        genre_ids=list(genre_ids),
        credits=Credits(
            cast=[CastCredit(id=actor_id, name=name, order=order) for order, (actor_id, name) in enumerate(cast)],
            crew=crew,
        ),
    )


def make_group(items, connection="Directed by Someone", connection_type="director", difficulty_score=0.0):
    return CandidateGroup(
        items=items,
        connection=connection,
        connection_type=connection_type,
        difficulty_score=difficulty_score,
    )


def build_director_pool(directors=40, per_director=4):
    """Pool where every director credits exactly ``per_director`` items and nothing else is shared."""
    pool = []
    for k in range(1, directors + 1):
        for j in range(per_director):
            pool.append(make_item(
                k * 10 + j,
                year=1970 + (k * 7 + j * 11) % 50,
                vote_count=300 + k * 200 + j * 150,
                director=(1000 + k, f"Director {k}"),
            ))
    return pool


@pytest.fixture
def item_factory():
    """Factory for test items."""
    return make_item


@pytest.fixture
def group_factory():
    """Factory for candidate groups."""
    return make_group


@pytest.fixture
def director_pool():
    """160 items: 40 directors with four items each."""
    return build_director_pool()


@pytest.fixture
def director_registry():
    """Registry holding only the director analyzer."""
    return AnalyzerRegistry([DirectorAnalyzer()])


@pytest.fixture
def partitioned_groups():
    """Four disjoint groups of four with widely different popularity."""
    groups = []
    for index, votes in enumerate([20000, 8000, 2000, 100]):
        items = [
            make_item(index * 10 + j, year=1970 + index * 15 + j, vote_count=votes + j * 50,
                      director=(500 + index, f"Director {index}"))
            for j in range(4)
        ]
        groups.append(make_group(
            items,
            connection=f"Directed by Director {index}",
            difficulty_score=10000 - votes,
        ))
    return groups
