"""
Tests for Adherence API
=======================

Tests dose recording endpoints and the weekly adherence snapshot.
"""

import pytest
from datetime import datetime, timedelta
from fastapi import status
from fastapi.testclient import TestClient

from models import DoseLog, DoseStatus


SCHEDULED = datetime(2025, 6, 10, 9, 0)


# ==================== RECORD TAKEN ====================

class TestRecordTaken:
    """Tests for POST /adherence/dose/{log_id}/taken"""

    @pytest.mark.api
    def test_on_time(self, client: TestClient, make_dose_log):
        log = make_dose_log(SCHEDULED)

        response = client.post(
            f"/api/v1/adherence/dose/{log.id}/taken",
            json={"taken_at": "2025-06-10T09:20:00"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["applied"] is True
        assert data["needs_refresh"] is True
        assert data["log"]["status"] == "taken"
        assert data["log"]["taken_time"] == "2025-06-10T09:20:00"

    @pytest.mark.api
    def test_late(self, client: TestClient, make_dose_log):
        log = make_dose_log(SCHEDULED)

        response = client.post(
            f"/api/v1/adherence/dose/{log.id}/taken",
            json={"taken_at": "2025-06-10T09:45:00"}
        )

        assert response.json()["log"]["status"] == "late"

    @pytest.mark.api
    def test_without_body_uses_current_time(self, client: TestClient, make_dose_log):
        """Test a dose scheduled an hour ago and taken now is late"""
        log = make_dose_log(datetime.now().replace(microsecond=0) - timedelta(hours=1))

        response = client.post(f"/api/v1/adherence/dose/{log.id}/taken")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["log"]["status"] == "late"

    @pytest.mark.api
    def test_past_missed_threshold_not_recorded(self, client: TestClient, db_session, make_dose_log):
        log = make_dose_log(SCHEDULED)

        response = client.post(
            f"/api/v1/adherence/dose/{log.id}/taken",
            json={"taken_at": "2025-06-10T15:00:00"}
        )

        data = response.json()
        assert data["applied"] is False
        assert data["log"]["status"] == "missed"
        assert data["log"]["taken_time"] is None
        db_session.expire_all()
        assert db_session.get(DoseLog, log.id).status == DoseStatus.MISSED

    @pytest.mark.api
    def test_already_missed_left_alone(self, client: TestClient, db_session, make_dose_log):
        log = make_dose_log(SCHEDULED, DoseStatus.MISSED)

        response = client.post(
            f"/api/v1/adherence/dose/{log.id}/taken",
            json={"taken_at": "2025-06-10T09:10:00"}
        )

        data = response.json()
        assert response.status_code == status.HTTP_200_OK
        assert data["applied"] is False
        assert data["log"]["status"] == "missed"
        assert "no change" in data["message"]

    @pytest.mark.api
    def test_unknown_log(self, client: TestClient):
        response = client.post(
            "/api/v1/adherence/dose/99999/taken",
            json={"taken_at": "2025-06-10T09:10:00"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] is True


# ==================== RECORD MISSED ====================

class TestRecordMissed:
    """Tests for POST /adherence/dose/{log_id}/missed"""

    @pytest.mark.api
    def test_pending_to_missed(self, client: TestClient, db_session, make_dose_log):
        log = make_dose_log(SCHEDULED)

        response = client.post(f"/api/v1/adherence/dose/{log.id}/missed")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["log"]["status"] == "missed"
        db_session.expire_all()
        assert db_session.get(DoseLog, log.id).status == DoseStatus.MISSED

    @pytest.mark.api
    def test_taken_not_overwritten(self, client: TestClient, make_dose_log):
        log = make_dose_log(SCHEDULED, DoseStatus.TAKEN, taken_time=SCHEDULED)

        response = client.post(f"/api/v1/adherence/dose/{log.id}/missed")

        data = response.json()
        assert data["applied"] is False
        assert data["log"]["status"] == "taken"

    @pytest.mark.api
    def test_unknown_log(self, client: TestClient):
        response = client.post("/api/v1/adherence/dose/99999/missed")

        assert response.status_code == status.HTTP_404_NOT_FOUND


# ==================== WEEKLY ====================

class TestWeeklyAdherence:
    """Tests for GET /adherence/{patient_id}/weekly"""

    @pytest.mark.api
    def test_weekly_snapshot(self, client: TestClient, db_session, test_patient, make_dose_log):
        for day in (9, 10, 11):
            make_dose_log(datetime(2025, 6, day, 9, 0), DoseStatus.TAKEN)
        make_dose_log(datetime(2025, 6, 12, 9, 0), DoseStatus.LATE)
        stale = make_dose_log(datetime(2025, 6, 13, 9, 0))

        response = client.get(
            f"/api/v1/adherence/{test_patient.id}/weekly",
            params={"now": "2025-06-13T14:00:00"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["on_time"] == 3
        assert data["late"] == 1
        assert data["missed"] == 1
        assert data["total"] == 5
        assert data["adherence_rate"] == 70
        assert data["band"] == "fair"
        assert data["week_label"] == "Jun 9 - Jun 15"

        db_session.expire_all()
        assert db_session.get(DoseLog, stale.id).status == DoseStatus.MISSED

    @pytest.mark.api
    def test_empty_week(self, client: TestClient, test_patient):
        response = client.get(
            f"/api/v1/adherence/{test_patient.id}/weekly",
            params={"now": "2025-06-10T08:00:00"}
        )

        data = response.json()
        assert response.status_code == status.HTTP_200_OK
        assert [data[k] for k in ("on_time", "late", "missed", "total", "adherence_rate")] == [0, 0, 0, 0, 0]

    @pytest.mark.api
    def test_unknown_patient(self, client: TestClient):
        response = client.get("/api/v1/adherence/99999/weekly")

        assert response.status_code == status.HTTP_404_NOT_FOUND
