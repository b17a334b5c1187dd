"""
Adherence API Router
Endpoints for dose recording and weekly adherence
"""

from typing import Callable, Optional
from datetime import datetime
from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_session_factory, services, not_found
from api.schemas.adherence import (
    DoseTaken,
    DoseLogResponse,
    DoseMutationResponse,
    WeeklyAdherence,
)
from services.adherence_service import DoseMutation, apply_write_backs
from services.exceptions import DoseLogNotFoundError, OwnerNotFoundError


router = APIRouter(prefix="/adherence", tags=["adherence"])


def _mutation_response(mutation: DoseMutation) -> DoseMutationResponse:
    log = DoseLogResponse.model_validate(mutation.log)
    if mutation.applied:
        message = f"Dose recorded as {log.status.value}"
    else:
        message = f"Dose already {log.status.value}; no change made"
    return DoseMutationResponse(
        log=log,
        applied=mutation.applied,
        needs_refresh=mutation.needs_refresh,
        message=message
    )


@router.post("/dose/{log_id}/taken", response_model=DoseMutationResponse)
async def record_dose_taken(
    log_id: int,
    payload: Optional[DoseTaken] = Body(None),
    db: Session = Depends(get_db)
):
    """
    Record a dose as taken

    Taken more than 30 minutes after its scheduled time the dose is
    recorded as late. Doses already taken, late or missed are left as is.
    """
    adherence_service = services.get_adherence_service()
    taken_at = payload.taken_at if payload else None

    try:
        mutation = await adherence_service.record_taken(log_id, now=taken_at, db=db)
    except DoseLogNotFoundError as e:
        raise not_found(e)

    return _mutation_response(mutation)


@router.post("/dose/{log_id}/missed", response_model=DoseMutationResponse)
async def record_dose_missed(
    log_id: int,
    db: Session = Depends(get_db)
):
    """
    Mark a pending dose as missed
    """
    adherence_service = services.get_adherence_service()

    try:
        mutation = await adherence_service.record_missed(log_id, db=db)
    except DoseLogNotFoundError as e:
        raise not_found(e)

    return _mutation_response(mutation)


@router.get("/{patient_id}/weekly", response_model=WeeklyAdherence)
async def get_weekly_adherence(
    patient_id: int,
    background_tasks: BackgroundTasks,
    now: Optional[datetime] = Query(None, description="Evaluate as of this time (default: now)"),
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory)
):
    """
    Get adherence for the current Monday-Sunday week

    The rate is penalty weighted: each missed dose costs its full share of
    the week, each late dose half of it.
    """
    adherence_service = services.get_adherence_service()

    try:
        result = await adherence_service.get_weekly_adherence(patient_id, now=now, db=db)
    except OwnerNotFoundError as e:
        raise not_found(e)

    if result.write_backs:
        background_tasks.add_task(apply_write_backs, result.write_backs, session_factory)

    return WeeklyAdherence(patient_id=patient_id, **result.snapshot.to_dict())
