"""Tests for the FastAPI service."""

import pytest
from fastapi.testclient import TestClient

from puzzle_engine.main import app

from conftest import build_director_pool, make_item


def dump(models):
    return [model.model_dump(mode="json") for model in models]


@pytest.fixture
def client():
    """Client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pool_payload():
    return dump(build_director_pool())


class TestHealthAndAnalyzers:
    """Tests for informational endpoints."""

    def test_health(self, client):
        """Test the health check."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_analyzers(self, client):
        """Test listing the default analyzers."""
        response = client.get("/api/v1/analyzers")

        data = response.json()
        assert response.status_code == 200
        assert data["count"] == 6
        assert {a["name"] for a in data["analyzers"]} == {"director", "actor", "decade", "year", "theme", "wordplay"}

    def test_generator_status(self, client):
        """Test the generator status endpoint."""
        response = client.get("/api/v1/generator/status")

        assert response.status_code == 200
        assert response.json()["generator_status"]["generator_status"] == "operational"


class TestPuzzleEndpoints:
    """Tests for puzzle generation and retrieval."""

    def test_generate_and_fetch(self, client, pool_payload):
        """Test generating, storing and fetching a puzzle."""
        response = client.post(
            "/api/v1/puzzles/generate",
            json={"pool": pool_payload, "puzzle_date": "2024-03-01"},
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["puzzle"]["groups"]) == 4
        assert len(data["puzzle"]["items"]) == 16
        assert data["puzzle"]["meets_threshold"] is True

        stored = client.get(f"/api/v1/puzzles/{data['puzzle_id']}")
        assert stored.status_code == 200
        assert stored.json()["metadata"]["quality_score"] == data["puzzle"]["quality_score"]

        daily = client.get("/api/v1/puzzles/daily/2024-03-01")
        assert daily.status_code == 200
        assert daily.json()["id"] == data["puzzle_id"]

    def test_stored_content_avoided(self, client, pool_payload):
        """Test that a second puzzle avoids the first one's items and labels."""
        first = client.post("/api/v1/puzzles/generate", json={"pool": pool_payload}).json()["puzzle"]
        second = client.post("/api/v1/puzzles/generate", json={"pool": pool_payload}).json()["puzzle"]

        first_ids = {item["id"] for item in first["items"]}
        second_ids = {item["id"] for item in second["items"]}
        assert not first_ids & second_ids

    def test_generate_from_small_pool(self, client):
        """Test that an unusable pool is reported as 422."""
        response = client.post("/api/v1/puzzles/generate", json={"pool": dump([make_item(i) for i in range(5)])})

        assert response.status_code == 422
        assert "Filtered pool too small" in response.json()["error"]

    def test_batch(self, client, pool_payload):
        """Test batch generation."""
        response = client.post("/api/v1/puzzles/batch", json={"pool": pool_payload, "count": 2})

        assert response.status_code == 200
        assert response.json()["succeeded"] == 2

    def test_batch_count_bounds(self, client, pool_payload):
        """Test request validation of the batch size."""
        response = client.post("/api/v1/puzzles/batch", json={"pool": pool_payload, "count": 0})

        assert response.status_code == 422

    def test_missing_puzzle(self, client):
        """Test fetching unknown puzzles."""
        assert client.get("/api/v1/puzzles/unknown").status_code == 404
        assert client.get("/api/v1/puzzles/daily/1999-01-01").status_code == 404


class TestQualityEndpoints:
    """Tests for scoring and external group import."""

    def test_score_groups(self, client, partitioned_groups):
        """Test scoring a posted set of groups."""
        response = client.post("/api/v1/quality/score", json={"groups": dump(partitioned_groups)})

        assert response.status_code == 200
        assert response.json()["overall_score"] == 88.4
        assert response.json()["overlap_passed"] is True

    def test_import_groups(self, client):
        """Test importing external groups for a domain without a verifier."""
        groups = [
            {
                "items": [{"title": f"Novel {i}", "year": 1950 + i} for i in range(4)],
                "connection": "Books by Orwell",
                "difficulty": "easy",
            },
            {
                "items": [{"title": "Lonely"}],
                "connection": "Too short",
            },
        ]

        response = client.post("/api/v1/groups/import", json={"groups": groups, "domain": "books"})

        data = response.json()
        assert response.status_code == 200
        assert len(data["candidates"]) == 1
        assert data["rejected"] == 1
        assert data["candidates"][0]["metadata"]["all_items_verified"] is True
        assert data["metrics"] is not None
