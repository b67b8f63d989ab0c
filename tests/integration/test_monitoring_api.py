"""
Integration tests for Monitoring and Team Health APIs

Tests daily stats, sudden change detection, the monitoring overview and the
team health report through the FastAPI application.
"""
import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture(scope="module")
def client():
    """Test client for the API"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def team_history():
    """Three days of baseline check-ins before 2025-11-08"""
    history = []
    for day in ("2025-11-05", "2025-11-06", "2025-11-07"):
        history.append({"user_id": "alice", "score": 90, "checkin_date": day})
        history.append({"user_id": "bob", "score": 80, "checkin_date": day})
        history.append({"user_id": "carol", "score": 70, "checkin_date": day})
    return history


class TestDailyStatsEndpoint:
    """Test POST /api/v1/monitoring/daily-stats"""

    def test_empty_team(self, client):
        """Test empty roster returns zeros"""
        response = client.post("/api/v1/monitoring/daily-stats", json={
            "checkins": [],
            "team_size": 0
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["checkin_rate"] == 0
        assert data["average_score"] == 0
        assert data["green_count"] == data["yellow_count"] == data["red_count"] == 0

    def test_team_day(self, client):
        """Test counts, rate and average"""
        response = client.post("/api/v1/monitoring/daily-stats", json={
            "checkins": [
                {"status": "GREEN", "score": 80},
                {"status": "YELLOW", "score": 50},
                {"status": "RED", "score": 30}
            ],
            "team_size": 4
        })

        data = response.json()["data"]
        assert data["checked_in_count"] == 3
        assert data["checkin_rate"] == 75
        assert data["average_score"] == 53

    def test_invalid_status(self, client):
        """Test unknown statuses are rejected"""
        response = client.post("/api/v1/monitoring/daily-stats", json={
            "checkins": [{"status": "BLUE", "score": 80}],
            "team_size": 1
        })

        assert response.status_code == 422


class TestSuddenChangesEndpoint:
    """Test POST /api/v1/monitoring/sudden-changes"""

    def test_detects_sorted_changes(self, client, team_history):
        """Test declines are listed CRITICAL first with counts"""
        response = client.post("/api/v1/monitoring/sudden-changes", json={
            "date": "2025-11-08",
            "today_checkins": [
                {"user_id": "bob", "checkin_id": "c2", "score": 65, "status": "YELLOW"},
                {"user_id": "alice", "checkin_id": "c1", "score": 40, "status": "YELLOW"},
                {"user_id": "carol", "checkin_id": "c3", "score": 72, "status": "GREEN"}
            ],
            "history": team_history
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert data["critical_count"] == 1
        assert data["significant_count"] == 0

        first, second = data["changes"]
        assert first["user_id"] == "alice"
        assert first["severity"] == "CRITICAL"
        assert first["change"] == -50
        assert first["average_score"] == 90
        assert second["user_id"] == "bob"
        assert second["severity"] == "NOTABLE"

        assert response.json()["metadata"]["date"] == "2025-11-08"

    def test_no_history(self, client):
        """Test nobody has a baseline without history"""
        response = client.post("/api/v1/monitoring/sudden-changes", json={
            "date": "2025-11-08",
            "today_checkins": [{"user_id": "alice", "score": 10, "status": "RED"}]
        })

        assert response.status_code == 200
        assert response.json()["data"]["total"] == 0


class TestMonitoringOverviewEndpoint:
    """Test POST /api/v1/monitoring/overview"""

    def test_overview(self, client, team_history):
        """Test leave-aware counters with sudden changes"""
        response = client.post("/api/v1/monitoring/overview", json={
            "date": "2025-11-08",
            "member_ids": ["alice", "bob", "carol", "dave", "erin"],
            "on_leave_ids": ["erin"],
            "today_checkins": [
                {"user_id": "alice", "score": 40, "status": "YELLOW"},
                {"user_id": "bob", "score": 85, "status": "GREEN"}
            ],
            "history": team_history
        })

        assert response.status_code == 200
        data = response.json()["data"]

        stats = data["stats"]
        assert stats["total_members"] == 5
        assert stats["on_leave"] == 1
        assert stats["active_members"] == 4
        assert stats["checked_in"] == 2
        assert stats["not_checked_in"] == 2
        assert stats["sudden_changes"] == 1
        assert stats["critical_changes"] == 1

        daily = data["daily_stats"]
        assert daily["team_size"] == 5
        assert daily["checkin_rate"] == 40
        # (40 + 85) / 2 = 62.5
        assert daily["average_score"] == 63

        assert [c["user_id"] for c in data["sudden_changes"]] == ["alice"]


class TestTeamHealthEndpoint:
    """Test POST /api/v1/teams/health"""

    def test_team_health_report(self, client):
        """Test health score, grade, trend and member risks"""
        response = client.post("/api/v1/teams/health", json={
            "avg_readiness": 80,
            "checked_in": 9,
            "expected": 10,
            "previous_grade_score": 70,
            "members": [
                {"user_id": "alice", "current_streak": 5, "checkin_count": 10, "red_count": 3},
                {"user_id": "bob", "current_streak": 5, "checkin_count": 10, "yellow_count": 3}
            ],
            "checkins": [
                {"mood": 6, "stress": 8, "sleep": 4, "physical_health": 6}
            ]
        })

        assert response.status_code == 200
        data = response.json()["data"]

        report = data["report"]
        assert report["checkin_rate"] == 90
        assert report["health_score"] == 74
        assert report["grade"]["letter"] == "B"
        assert report["trend"] == "up"
        # grade 84 against 70 last period
        assert report["score_delta"] == 14.0
        assert [r["reason"] for r in report["top_reasons"]] == ["HIGH_STRESS", "POOR_SLEEP"]

        risks = {r["user_id"]: r["risk_level"] for r in data["member_risks"]}
        assert risks == {"alice": "high", "bob": "medium"}
        assert data["high_risk_count"] == 1

    def test_team_on_leave_is_fully_compliant(self, client):
        """Test nobody expected gives 100% compliance"""
        response = client.post("/api/v1/teams/health", json={
            "avg_readiness": 0,
            "checked_in": 0,
            "expected": 0
        })

        assert response.status_code == 200
        assert response.json()["data"]["report"]["checkin_rate"] == 100

    def test_checked_in_exceeds_expected(self, client):
        """Test inconsistent counts are rejected"""
        response = client.post("/api/v1/teams/health", json={
            "avg_readiness": 80,
            "checked_in": 12,
            "expected": 10
        })

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "cannot exceed expected" in error["details"][0]["msg"]
