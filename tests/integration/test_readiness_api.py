"""
Integration tests for Readiness API

Tests check-in scoring, validation errors and change classification through
the FastAPI application.
"""
import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture(scope="module")
def client():
    """Test client for the API"""
    with TestClient(app) as test_client:
        yield test_client


class TestServiceEndpoints:
    """Test health and root endpoints"""

    def test_health_check(self, client):
        """Test /health reports ok"""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["service"] == "readiness-monitor-api"

    def test_root(self, client):
        """Test root describes the API"""
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/api/docs"
        assert "/api/v1/readiness" in response.json()["endpoints"]


class TestScoreEndpoint:
    """Test POST /api/v1/readiness/score"""

    def test_score_checkin(self, client):
        """Test 7/3/7/7 scores 70 GREEN"""
        response = client.post("/api/v1/readiness/score", json={
            "mood": 7,
            "stress": 3,
            "sleep": 7,
            "physical_health": 7
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["score"] == 70
        assert data["status"] == "GREEN"
        assert data["components"] == {"mood": 70, "stress": 70, "sleep": 70, "physical_health": 70}

    def test_score_red_checkin(self, client):
        """Test worst check-in scores 0 RED"""
        response = client.post("/api/v1/readiness/score", json={
            "mood": 0,
            "stress": 10,
            "sleep": 0,
            "physical_health": 0
        })

        assert response.status_code == 200
        assert response.json()["data"]["score"] == 0
        assert response.json()["data"]["status"] == "RED"

    @pytest.mark.parametrize("payload", [
        {"mood": 11, "stress": 3, "sleep": 7, "physical_health": 7},
        {"mood": 7, "stress": -1, "sleep": 7, "physical_health": 7},
        {"mood": 7.5, "stress": 3, "sleep": 7, "physical_health": 7},
        {"mood": "7", "stress": 3, "sleep": 7, "physical_health": 7},
        {"mood": 7, "stress": 3, "sleep": 7},
    ])
    def test_invalid_metrics_rejected(self, client, payload):
        """Test out-of-range, non-integer and missing metrics return 422"""
        response = client.post("/api/v1/readiness/score", json=payload)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert len(error["details"]) >= 1


class TestClassifyEndpoint:
    """Test POST /api/v1/readiness/classify"""

    def test_large_drop(self, client):
        """Test a 50-point drop is a sudden change"""
        response = client.post("/api/v1/readiness/classify", json={
            "today_score": 40,
            "trailing_average": 90
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["change_from_average"] == -50
        assert data["severity"] == "CRITICAL"
        assert data["is_sudden_change"] is True

    def test_small_drop(self, client):
        """Test a 2-point drop is not a sudden change"""
        response = client.post("/api/v1/readiness/classify", json={
            "today_score": 88,
            "trailing_average": 90
        })

        data = response.json()["data"]
        assert data["change_from_average"] == -2
        assert data["severity"] is None
        assert data["is_sudden_change"] is False

    def test_improvement(self, client):
        """Test improvements never get a severity"""
        response = client.post("/api/v1/readiness/classify", json={
            "today_score": 95,
            "trailing_average": 80
        })

        data = response.json()["data"]
        assert data["change_from_average"] == 15
        assert data["severity"] is None

    def test_score_out_of_range(self, client):
        """Test scores above 100 are rejected"""
        response = client.post("/api/v1/readiness/classify", json={
            "today_score": 140,
            "trailing_average": 90
        })

        assert response.status_code == 422
