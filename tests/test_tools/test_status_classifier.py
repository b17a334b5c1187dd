"""
Tests for Dose Status Classifier
Tests late/missed thresholds and healing of stored statuses
"""

import pytest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from models import DoseStatus
from tools.status_classifier import (
    LATE_THRESHOLD,
    MISSED_THRESHOLD,
    classify,
    classify_taken,
    heal,
    is_terminal,
    hours_until_missed,
)


SCHEDULED = datetime(2025, 6, 10, 9, 0)


class TestThresholds:

    @pytest.mark.unit
    def test_fixed_policy_values(self):
        assert LATE_THRESHOLD == timedelta(minutes=30)
        assert MISSED_THRESHOLD == timedelta(hours=4)


# =============================================================================
# Taken doses
# =============================================================================

class TestClassifyTaken:
    """Tests for classifying a taken dose"""

    @pytest.mark.unit
    @pytest.mark.parametrize("minutes", [0, 1, 20, 29, 30])
    def test_within_thirty_minutes_is_taken(self, minutes):
        taken = SCHEDULED + timedelta(minutes=minutes)
        assert classify_taken(SCHEDULED, taken) == DoseStatus.TAKEN

    @pytest.mark.unit
    @pytest.mark.parametrize("minutes", [31, 45, 240, 600])
    def test_beyond_thirty_minutes_is_late(self, minutes):
        taken = SCHEDULED + timedelta(minutes=minutes)
        assert classify_taken(SCHEDULED, taken) == DoseStatus.LATE

    @pytest.mark.unit
    def test_boundary_is_exclusive(self):
        """Test exactly 30 minutes is still on time, one second more is late"""
        assert classify_taken(SCHEDULED, SCHEDULED + LATE_THRESHOLD) == DoseStatus.TAKEN
        assert classify_taken(
            SCHEDULED, SCHEDULED + LATE_THRESHOLD + timedelta(seconds=1)
        ) == DoseStatus.LATE

    @pytest.mark.unit
    def test_early_dose_is_taken(self):
        """Test there is no too-early classification"""
        assert classify_taken(SCHEDULED, SCHEDULED - timedelta(hours=3)) == DoseStatus.TAKEN

    @pytest.mark.unit
    def test_aware_timestamps_compared_as_instants(self):
        """Test offsets are normalized before taking the difference"""
        scheduled = datetime(2025, 6, 10, 9, 0, tzinfo=timezone.utc)
        # 11:20 CEST is 09:20 UTC
        taken = datetime(2025, 6, 10, 11, 20, tzinfo=ZoneInfo("Europe/Berlin"))
        assert classify_taken(scheduled, taken) == DoseStatus.TAKEN

    @pytest.mark.unit
    def test_classify_with_taken_time_ignores_now(self):
        taken = SCHEDULED + timedelta(minutes=45)
        for hours in (0, 5, 48):
            now = SCHEDULED + timedelta(hours=hours)
            assert classify(SCHEDULED, taken, now) == DoseStatus.LATE


# =============================================================================
# Untaken doses
# =============================================================================

class TestClassifyPending:
    """Tests for doses without a taken time"""

    @pytest.mark.unit
    @pytest.mark.parametrize("minutes", [0, 30, 60, 180, 239, 240])
    def test_pending_up_to_four_hours(self, minutes):
        now = SCHEDULED + timedelta(minutes=minutes)
        assert classify(SCHEDULED, None, now) == DoseStatus.PENDING

    @pytest.mark.unit
    @pytest.mark.parametrize("minutes", [241, 300, 24 * 60])
    def test_missed_after_four_hours(self, minutes):
        now = SCHEDULED + timedelta(minutes=minutes)
        assert classify(SCHEDULED, None, now) == DoseStatus.MISSED

    @pytest.mark.unit
    def test_boundary_is_exclusive(self):
        assert classify(SCHEDULED, None, SCHEDULED + MISSED_THRESHOLD) == DoseStatus.PENDING
        assert classify(
            SCHEDULED, None, SCHEDULED + MISSED_THRESHOLD + timedelta(seconds=1)
        ) == DoseStatus.MISSED

    @pytest.mark.unit
    def test_future_dose_is_pending(self):
        assert classify(SCHEDULED, None, SCHEDULED - timedelta(hours=2)) == DoseStatus.PENDING


# =============================================================================
# Healing
# =============================================================================

class TestHeal:
    """Tests for re-deriving stored statuses"""

    @pytest.mark.unit
    @pytest.mark.parametrize("stored", [DoseStatus.TAKEN, DoseStatus.LATE, DoseStatus.MISSED])
    def test_terminal_status_kept_verbatim(self, stored):
        """Test terminal statuses are never re-derived"""
        now = SCHEDULED + timedelta(days=2)
        assert heal(stored, SCHEDULED, None, now) == stored

    @pytest.mark.unit
    def test_stale_pending_heals_to_missed(self):
        now = SCHEDULED + timedelta(hours=5)
        assert heal(DoseStatus.PENDING, SCHEDULED, None, now) == DoseStatus.MISSED

    @pytest.mark.unit
    def test_fresh_pending_stays_pending(self):
        now = SCHEDULED + timedelta(hours=1)
        assert heal(DoseStatus.PENDING, SCHEDULED, None, now) == DoseStatus.PENDING

    @pytest.mark.unit
    def test_string_statuses_accepted(self):
        now = SCHEDULED + timedelta(hours=5)
        assert heal("taken", SCHEDULED, None, now) == DoseStatus.TAKEN
        assert heal("pending", SCHEDULED, None, now) == DoseStatus.MISSED
        assert heal(None, SCHEDULED, None, now) == DoseStatus.MISSED

    @pytest.mark.unit
    def test_is_terminal(self):
        assert not is_terminal(DoseStatus.PENDING)
        assert not is_terminal(None)
        assert is_terminal("late")
        assert is_terminal(DoseStatus.MISSED)


class TestHoursUntilMissed:

    @pytest.mark.unit
    def test_hours_remaining(self):
        assert hours_until_missed(SCHEDULED, SCHEDULED + timedelta(hours=1)) == pytest.approx(3.0)
        assert hours_until_missed(SCHEDULED, SCHEDULED - timedelta(hours=1)) == pytest.approx(5.0)

    @pytest.mark.unit
    def test_floored_at_zero(self):
        assert hours_until_missed(SCHEDULED, SCHEDULED + timedelta(hours=6)) == 0.0
