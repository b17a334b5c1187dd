"""
Reminders API Router
Today's medication reminders with live dose status
"""

from typing import Callable, Optional
from datetime import datetime
from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_session_factory, services, not_found
from api.schemas.reminder import ReminderResponse, TodayReminders
from models import DoseStatus
from services.adherence_service import apply_write_backs
from services.exceptions import OwnerNotFoundError
from tools.time_utils import to_local_naive


router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("/{patient_id}/today", response_model=TodayReminders)
async def get_today_reminders(
    patient_id: int,
    background_tasks: BackgroundTasks,
    now: Optional[datetime] = Query(None, description="Evaluate as of this time (default: now)"),
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory)
):
    """
    Get today's reminders, sorted by scheduled time

    Pending doses more than 4 hours overdue are reported as missed and
    persisted after the response is sent.
    """
    adherence_service = services.get_adherence_service()
    now = to_local_naive(now or datetime.now())

    try:
        result = await adherence_service.get_today_reminders(patient_id, now=now, db=db)
    except OwnerNotFoundError as e:
        raise not_found(e)

    if result.write_backs:
        background_tasks.add_task(apply_write_backs, result.write_backs, session_factory)

    reminders = [ReminderResponse.model_validate(r) for r in result.reminders]
    pending = sum(1 for r in reminders if r.status == DoseStatus.PENDING)

    return TodayReminders(
        patient_id=patient_id,
        date=now.date().isoformat(),
        reminders=reminders,
        total=len(reminders),
        pending=pending,
        completed=sum(1 for r in reminders if r.status in (DoseStatus.TAKEN, DoseStatus.LATE))
    )
