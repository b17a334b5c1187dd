"""
Dose Status Classifier
Single source of truth for deriving a dose's status from elapsed time
"""

from typing import Optional, Union
from datetime import datetime, timedelta

from models import DoseStatus
from tools.time_utils import to_local_naive


# Fixed policy, intentionally not exposed through settings
LATE_THRESHOLD = timedelta(minutes=30)
MISSED_THRESHOLD = timedelta(hours=4)

TERMINAL_STATUSES = frozenset({DoseStatus.TAKEN, DoseStatus.LATE, DoseStatus.MISSED})


def _coerce_status(status: Union[str, DoseStatus, None]) -> DoseStatus:
    if isinstance(status, DoseStatus):
        return status
    if not status:
        return DoseStatus.PENDING
    return DoseStatus(str(status).lower())


def is_terminal(status: Union[str, DoseStatus, None]) -> bool:
    """A dose that has left pending never returns to it"""
    return _coerce_status(status) in TERMINAL_STATUSES


def classify_taken(scheduled_time: datetime, taken_time: datetime) -> DoseStatus:
    """Taken more than 30 minutes after the scheduled time counts as late.

    Taking a dose early is always on time.
    """
    delta = to_local_naive(taken_time) - to_local_naive(scheduled_time)
    if delta > LATE_THRESHOLD:
        return DoseStatus.LATE
    return DoseStatus.TAKEN


def classify(
    scheduled_time: datetime,
    taken_time: Optional[datetime],
    now: datetime
) -> DoseStatus:
    """
    Classify a dose occurrence

    Args:
        scheduled_time: When the dose was due
        taken_time: When it was taken, None if not yet taken
        now: Current time

    Returns:
        TAKEN/LATE for taken doses, otherwise PENDING until the dose is
        more than 4 hours overdue, then MISSED
    """
    if taken_time is not None:
        return classify_taken(scheduled_time, taken_time)

    elapsed = to_local_naive(now) - to_local_naive(scheduled_time)
    if elapsed > MISSED_THRESHOLD:
        return DoseStatus.MISSED
    return DoseStatus.PENDING


def heal(
    stored_status: Union[str, DoseStatus, None],
    scheduled_time: datetime,
    taken_time: Optional[datetime],
    now: datetime
) -> DoseStatus:
    """Terminal statuses are kept verbatim; pending ones are re-derived"""
    status = _coerce_status(stored_status)
    if status in TERMINAL_STATUSES:
        return status
    return classify(scheduled_time, taken_time, now)


def hours_until_missed(scheduled_time: datetime, now: datetime) -> float:
    """Hours left before a pending dose is auto-missed, floored at zero"""
    deadline = to_local_naive(scheduled_time) + MISSED_THRESHOLD
    remaining = (deadline - to_local_naive(now)).total_seconds() / 3600
    return max(remaining, 0.0)
