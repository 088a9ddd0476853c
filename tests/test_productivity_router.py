"""HTTP tests for the productivity router."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.productivity.router import router


PREFIX = "/api/v1/productivity"


@pytest.fixture
def client(productivity_service):
    app = FastAPI()
    app.include_router(router, prefix="/api/v1")
    app.state.productivity_service = productivity_service
    return TestClient(app)


class TestMonthEndpoints:
    def test_get_score(self, client):
        response = client.get(f"{PREFIX}/months/2026-09/score")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["score"] == 45
        assert body["data"]["tier"] == "TIER_1"
        assert body["data"]["month"] == "2026-09"

    def test_invalid_month_is_400(self, client):
        response = client.get(f"{PREFIX}/months/2026-13/score")

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_MONTH_ID"

    def test_force_recalculate(self, client, mock_data_source):
        client.get(f"{PREFIX}/months/2026-09/score")
        client.get(f"{PREFIX}/months/2026-09/score", params={"forceRecalculate": "true"})

        assert mock_data_source.get_statistics.await_count == 2

    def test_user_id_query_param(self, client, mock_data_source):
        response = client.get(f"{PREFIX}/months/2026-09/score", params={"userId": "user_1"})

        assert response.json()["data"]["userId"] == "user_1"
        mock_data_source.get_habits.assert_awaited_once_with(user_id="user_1")

    def test_get_metrics(self, client):
        response = client.get(f"{PREFIX}/months/2026-09/metrics")

        assert response.status_code == 200
        assert response.json()["data"]["activeDays"] == 20
        assert response.json()["data"]["totalFocusTime"] == 6

    def test_get_analytics(self, client):
        response = client.get(f"{PREFIX}/months/2026-09/analytics")

        data = response.json()["data"]
        assert data["totalActivities"] == 20
        assert data["weeklyBreakdown"][0]["startDate"] == "2026-09-01"

    def test_refresh(self, client, mock_data_source):
        client.get(f"{PREFIX}/months/2026-09/score")

        response = client.post(f"{PREFIX}/months/2026-09/refresh")

        assert response.status_code == 200
        assert response.json()["message"] == "Monthly data refreshed"
        assert response.json()["data"]["score"] == 45
        assert mock_data_source.get_statistics.await_count == 2


class TestOverviewEndpoints:
    def test_history(self, client):
        response = client.get(f"{PREFIX}/history", params={"monthsBack": 2})

        data = response.json()["data"]
        assert [entry["month"] for entry in data] == ["2026-09", "2026-10"]
        assert data[1]["scoreChange"] == -20

    def test_history_range_is_checked(self, client):
        response = client.get(f"{PREFIX}/history", params={"monthsBack": 40})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_HISTORY_RANGE"

    def test_progress(self, client):
        response = client.get(f"{PREFIX}/progress")

        data = response.json()["data"]
        assert data["daysRemaining"] == 12
        assert data["progressToNextTier"]["nextTier"] == 2

    def test_clear_cache(self, client, memory_cache):
        client.get(f"{PREFIX}/months/2026-09/score")

        response = client.delete(f"{PREFIX}/cache")

        assert response.json() == {"success": True, "message": "Productivity cache cleared"}
        assert len(memory_cache) == 0


class TestServiceWiring:
    def test_missing_service_is_an_error(self):
        app = FastAPI()
        app.include_router(router, prefix="/api/v1")

        with pytest.raises(RuntimeError):
            TestClient(app).get(f"{PREFIX}/months/2026-09/score")
