"""
Adherence Engine
Weekly adherence snapshot computed from dose logs
"""

import math
import logging
from typing import List, Dict, Any, Iterable, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from models import DoseStatus
from actions.records import StatusWriteBack
from tools.status_classifier import heal
from tools.time_utils import to_local_naive, week_bounds, format_week_range


logger = logging.getLogger(__name__)


# Penalty weights, in percentage points per dose as a share of the week.
# A late dose costs half of a missed dose; on-time doses cost nothing.
MISSED_PENALTY = 100
LATE_PENALTY = 50

GOOD_ADHERENCE_THRESHOLD = 80
FAIR_ADHERENCE_THRESHOLD = 60


class AdherenceBand(str, Enum):
    """Display band for an adherence rate"""
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass
class AdherenceSnapshot:
    """Adherence counts for the current Monday-Sunday week"""
    on_time: int = 0
    late: int = 0
    missed: int = 0
    total: int = 0
    adherence_rate: int = 0
    pending: int = 0
    week_start: Optional[datetime] = None
    week_end: Optional[datetime] = None

    @property
    def band(self) -> AdherenceBand:
        return adherence_band(self.adherence_rate)

    @property
    def week_label(self) -> str:
        return format_week_range(self.week_start, self.week_end)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "on_time": self.on_time,
            "late": self.late,
            "missed": self.missed,
            "total": self.total,
            "adherence_rate": self.adherence_rate,
            "pending": self.pending,
            "band": self.band.value,
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "week_label": self.week_label,
        }


@dataclass
class AdherenceResult:
    """Snapshot plus healed statuses the caller should persist"""
    snapshot: AdherenceSnapshot
    write_backs: List[StatusWriteBack] = field(default_factory=list)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_adherence_rate(late: int, missed: int, total: int) -> int:
    """
    Penalty-weighted adherence percentage.

    rate = round(100 - missed/total * 100 - late/total * 50), floored at 0.
    This is not a taken/total ratio; clients display it as-is, so the
    formula must stay exactly this.
    """
    if total <= 0:
        return 0
    raw = 100 - (missed / total) * MISSED_PENALTY - (late / total) * LATE_PENALTY
    return max(0, _round_half_up(raw))


def adherence_band(rate: int) -> AdherenceBand:
    if rate >= GOOD_ADHERENCE_THRESHOLD:
        return AdherenceBand.GOOD
    if rate >= FAIR_ADHERENCE_THRESHOLD:
        return AdherenceBand.FAIR
    return AdherenceBand.POOR


class AdherenceEngine:
    """
    Aggregates dose logs into the weekly adherence snapshot, healing stale
    pending logs to missed in memory. Pure: persistence of healed statuses
    is left to the caller via the returned write-backs.
    """

    def compute_weekly_adherence(
        self,
        logs: Iterable[Any],
        now: datetime
    ) -> AdherenceResult:
        """
        Compute the adherence snapshot for the week containing now

        Args:
            logs: Dose logs (ORM rows or DoseLogRecord), any date range
            now: Current time

        Returns:
            AdherenceResult; an empty week yields an all-zero snapshot
        """
        now = to_local_naive(now)
        week_start, week_end = week_bounds(now)

        in_week = [
            log for log in logs
            if week_start <= to_local_naive(log.scheduled_time) <= week_end
        ]

        snapshot = AdherenceSnapshot(week_start=week_start, week_end=week_end)
        result = AdherenceResult(snapshot=snapshot)
        if not in_week:
            return result

        counts: Dict[DoseStatus, int] = {status: 0 for status in DoseStatus}
        for log in in_week:
            stored = DoseStatus(log.status) if log.status else DoseStatus.PENDING
            status = heal(stored, log.scheduled_time, log.taken_time, now)
            if stored == DoseStatus.PENDING and status == DoseStatus.MISSED:
                result.write_backs.append(
                    StatusWriteBack(log_id=log.id, status=DoseStatus.MISSED)
                )
            counts[status] += 1

        snapshot.on_time = counts[DoseStatus.TAKEN]
        snapshot.late = counts[DoseStatus.LATE]
        snapshot.missed = counts[DoseStatus.MISSED]
        snapshot.pending = counts[DoseStatus.PENDING]
        snapshot.total = len(in_week)
        snapshot.adherence_rate = calculate_adherence_rate(
            snapshot.late, snapshot.missed, snapshot.total
        )

        if result.write_backs:
            logger.info(
                f"Healed {len(result.write_backs)} stale pending dose(s) to missed "
                f"for week of {week_start.date().isoformat()}"
            )
        return result


# Singleton instance
adherence_engine = AdherenceEngine()


def compute_weekly_adherence(logs: Iterable[Any], now: datetime) -> AdherenceResult:
    """Convenience function to compute the weekly adherence snapshot"""
    return adherence_engine.compute_weekly_adherence(logs, now)
