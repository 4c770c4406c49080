"""Tests for FastAPI app entry point."""
from fastapi.testclient import TestClient


def test_health_endpoint_returns_200() -> None:
    """Health check endpoint should return HTTP 200."""
    from moodboard.main import app
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200


def test_health_endpoint_reports_services() -> None:
    """Without a GCP project the moodboard runs on placeholder photos."""
    from moodboard.main import app
    with TestClient(app) as client:
        data = client.get("/health").json()

    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"
    assert data["services"]["moodboard"] == "ok"
    assert data["services"]["image_generation"] == "fallback"


def test_app_has_correct_title() -> None:
    """FastAPI app should have the project title."""
    from moodboard.main import app
    assert app.title == "Wedding Moodboard"


def test_app_registers_moodboard_routes() -> None:
    from moodboard.main import app
    paths = app.openapi()["paths"]
    assert "/api/moodboard/preview" in paths
    assert "/api/moodboard/generate" in paths


def test_app_has_cors_middleware() -> None:
    """App should allow requests from frontend origin."""
    from moodboard.main import app
    from starlette.middleware.cors import CORSMiddleware
    middleware_classes = [m.cls for m in app.user_middleware]
    assert CORSMiddleware in middleware_classes
