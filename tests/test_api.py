"""Tests for the drill extraction HTTP endpoints."""

from unittest.mock import patch

import pytest

from tests.fixtures.drill_messages import PASSING_SQUARE, RONDO_MESSAGE, fenced


def _get_app():
    """Create a FastAPI app with drill routes."""
    from fastapi import FastAPI
    from src.api.routes.drills import router

    app = FastAPI()
    app.include_router(router)
    return app


@pytest.fixture
def client():
    from starlette.testclient import TestClient

    return TestClient(_get_app())


def test_extract_rondo_message(client):
    response = client.post("/api/drills/extract", json={"content": RONDO_MESSAGE})
    assert response.status_code == 200
    result = response.json()
    assert result["cleanContent"] == "Here's your session:"
    assert result["count"] == 1
    drill = result["drill"]
    assert drill == result["drills"][0]
    assert drill["pitch"]["width"] == 20
    assert drill["players"][0]["team"] == "red"
    assert drill["players"][0]["hasBall"] is False
    assert drill["sequence"][0]["duration"] == 1500


def test_extract_no_drills(client):
    response = client.post("/api/drills/extract", json={"content": "Rest day."})
    assert response.status_code == 200
    result = response.json()
    assert result == {"cleanContent": "Rest day.", "drill": None, "drills": [], "count": 0}


def test_extract_serializes_action_aliases(client):
    response = client.post(
        "/api/drills/extract", json={"content": fenced(PASSING_SQUARE)}
    )
    action = response.json()["drill"]["sequence"][0]["actions"][0]
    assert action["type"] == "pass"
    assert action["from"] == {"x": 10, "y": 10}
    assert action["transferBall"] is True


def test_extract_missing_content_returns_422(client):
    response = client.post("/api/drills/extract", json={})
    assert response.status_code == 422


def test_extract_oversize_content_returns_413(client):
    with patch("src.api.routes.drills.settings.max_content_chars", 10):
        response = client.post(
            "/api/drills/extract", json={"content": "x" * 11}
        )
    assert response.status_code == 413


def test_normalize_valid_drill(client):
    response = client.post("/api/drills/normalize", json=PASSING_SQUARE)
    assert response.status_code == 200
    drill = response.json()
    assert drill["id"] == "passing-square"
    assert drill["ageGroup"] == "U12"
    assert len(drill["players"]) == 4


def test_normalize_not_a_drill(client):
    response = client.post("/api/drills/normalize", json={"formation": "4-3-3"})
    assert response.status_code == 422
    assert response.json()["detail"] == "Not a drill-shaped object"


def test_sanitize_endpoint(client):
    response = client.post("/api/drills/sanitize", json={"text": '{"a": 1, // x\n}'})
    assert response.status_code == 200
    result = response.json()
    assert result["parseable"] is True
    assert result["text"] == '{"a": 1}'


def test_sanitize_endpoint_unparseable(client):
    response = client.post("/api/drills/sanitize", json={"text": "{name: 'x'}"})
    assert response.json()["parseable"] is False


def test_health():
    from starlette.testclient import TestClient
    from src.api.main import app

    with TestClient(app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
