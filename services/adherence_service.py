"""
Adherence Service
Dose log mutations, healing write-backs, and the read views built on the
reminder and adherence engines
"""

import logging
from typing import Callable, List, Optional, Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError

from database import SessionLocal, get_db_context
import models
from models import DoseStatus
from actions.records import StatusWriteBack
from actions.reminder_engine import reminder_engine, MaterializationResult
from actions.adherence_engine import adherence_engine, AdherenceResult
from services.exceptions import DoseLogNotFoundError
from services.patient_service import require_active_patient
from services.schedule_service import ensure_occurrences
from tools.status_classifier import classify_taken, heal, is_terminal
from tools.time_utils import to_local_naive, day_bounds, week_bounds


logger = logging.getLogger(__name__)


@dataclass
class DoseMutation:
    """Outcome of record_taken / record_missed"""
    log: models.DoseLog
    applied: bool

    @property
    def needs_refresh(self) -> bool:
        """Clients re-materialize today's reminders after an applied change"""
        return self.applied


def list_dose_logs(
    session: Session,
    patient_id: int,
    since: datetime,
    until: Optional[datetime] = None
) -> List[models.DoseLog]:
    """Dose logs for a patient scheduled at or after since"""
    query = session.query(models.DoseLog).filter(
        and_(
            models.DoseLog.patient_id == patient_id,
            models.DoseLog.scheduled_time >= since
        )
    )
    if until is not None:
        query = query.filter(models.DoseLog.scheduled_time <= until)
    return query.order_by(models.DoseLog.scheduled_time).all()


def update_dose_log_status(
    session: Session,
    log: models.DoseLog,
    status: DoseStatus,
    taken_time: Optional[datetime] = None
) -> models.DoseLog:
    """Persist a status change; rolls back and re-raises on failure"""
    log.status = status
    if taken_time is not None:
        log.taken_time = taken_time
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(f"Failed to persist status {status.value} for dose log {log.id}")
        raise
    session.refresh(log)
    return log


def top_up(session: Session, patient_id: int, days: List[date]) -> None:
    """Create any occurrences still missing for the days about to be read"""
    if ensure_occurrences(session, patient_id, days):
        try:
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception(f"Failed to top up dose logs for patient {patient_id}")
            raise


def apply_write_backs(
    write_backs: Iterable[StatusWriteBack],
    session_factory: Optional[Callable[[], Session]] = None
) -> int:
    """
    Persist healed statuses in a fresh session.

    Runs after the response is sent. Each write is conditional on the log
    still being pending, so duplicate or concurrent write-backs for the
    same log coalesce. Failures are logged only; the next read heals the
    log again and re-issues the write.
    """
    pending = {wb.log_id: wb.status for wb in write_backs}
    if not pending:
        return 0

    updated = 0
    session = session_factory() if session_factory else SessionLocal()
    try:
        for log_id, status in pending.items():
            updated += session.query(models.DoseLog).filter(
                and_(
                    models.DoseLog.id == log_id,
                    models.DoseLog.status == DoseStatus.PENDING
                )
            ).update(
                {models.DoseLog.status: status, models.DoseLog.updated_at: datetime.utcnow()},
                synchronize_session=False
            )
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(f"Healing write-back failed for dose logs {sorted(pending)}")
        return 0
    finally:
        session.close()

    logger.info(f"Healed {updated} of {len(pending)} dose log(s) to missed")
    return updated


class AdherenceService:
    """
    Service for dose recording and adherence views
    """

    async def record_taken(
        self,
        log_id: int,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> DoseMutation:
        """
        Record that a dose was taken

        The log becomes TAKEN, or LATE when more than 30 minutes past its
        scheduled time. Logs that already left pending are returned
        unchanged, and so are logs already past the 4-hour missed
        threshold, which are stored as MISSED instead.

        Args:
            log_id: Dose log ID
            now: Time the dose was taken (default: current time)
            db: Database session

        Returns:
            DoseMutation with the (possibly unchanged) log
        """
        taken_at = to_local_naive(now or datetime.now())

        def _record(session: Session) -> DoseMutation:
            log = self._get_log(session, log_id)
            if is_terminal(log.status):
                logger.info(
                    f"Ignoring taken for dose log {log_id}: already {DoseStatus(log.status).value}"
                )
                return DoseMutation(log=log, applied=False)

            # Past the missed threshold the live view already shows MISSED
            if heal(log.status, log.scheduled_time, None, taken_at) == DoseStatus.MISSED:
                update_dose_log_status(session, log, DoseStatus.MISSED)
                logger.info(
                    f"Rejected taken for dose log {log_id}: past the missed threshold "
                    f"(scheduled {log.scheduled_time.isoformat()}, taken {taken_at.isoformat()})"
                )
                return DoseMutation(log=log, applied=False)

            status = classify_taken(log.scheduled_time, taken_at)
            update_dose_log_status(session, log, status, taken_time=taken_at)

            logger.info(
                f"Recorded dose log {log_id} as {status.value} "
                f"(scheduled {log.scheduled_time.isoformat()}, taken {taken_at.isoformat()})"
            )
            return DoseMutation(log=log, applied=True)

        if db:
            return _record(db)

        with get_db_context() as session:
            return _record(session)

    async def record_missed(
        self,
        log_id: int,
        db: Optional[Session] = None
    ) -> DoseMutation:
        """
        Mark a dose missed outside the automatic 4-hour healing path.
        Logs that already left pending are returned unchanged.
        """
        def _record(session: Session) -> DoseMutation:
            log = self._get_log(session, log_id)
            if is_terminal(log.status):
                logger.info(
                    f"Ignoring missed for dose log {log_id}: already {DoseStatus(log.status).value}"
                )
                return DoseMutation(log=log, applied=False)

            update_dose_log_status(session, log, DoseStatus.MISSED)

            logger.info(f"Recorded dose log {log_id} as missed")
            return DoseMutation(log=log, applied=True)

        if db:
            return _record(db)

        with get_db_context() as session:
            return _record(session)

    async def get_today_reminders(
        self,
        patient_id: int,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> MaterializationResult:
        """
        Today's reminders with live status

        The returned write-backs are not persisted here; callers hand them
        to apply_write_backs without waiting on the result.
        """
        now = to_local_naive(now or datetime.now())

        def _get(session: Session) -> MaterializationResult:
            require_active_patient(session, patient_id)
            top_up(session, patient_id, [now.date()])

            medications = session.query(models.Medication).filter(
                and_(
                    models.Medication.patient_id == patient_id,
                    models.Medication.is_active == True
                )
            ).all()

            # Pad by a day on each side so aware timestamps stored in
            # another offset still reach the local-date match
            start_of_day, end_of_day = day_bounds(now.date())
            logs = list_dose_logs(
                session, patient_id,
                since=start_of_day - timedelta(days=1),
                until=end_of_day + timedelta(days=1)
            )

            result = reminder_engine.materialize_today(medications, logs, now)
            logger.debug(
                f"Materialized {len(result.reminders)} reminder(s) for patient {patient_id}"
            )
            return result

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_weekly_adherence(
        self,
        patient_id: int,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> AdherenceResult:
        """Adherence snapshot for the current Monday-Sunday week"""
        now = to_local_naive(now or datetime.now())

        def _get(session: Session) -> AdherenceResult:
            require_active_patient(session, patient_id)

            week_start, week_end = week_bounds(now)
            days = [
                week_start.date() + timedelta(days=offset)
                for offset in range((now.date() - week_start.date()).days + 1)
            ]
            top_up(session, patient_id, days)
            logs = list_dose_logs(
                session, patient_id,
                since=week_start - timedelta(days=1),
                until=week_end + timedelta(days=1)
            )
            return adherence_engine.compute_weekly_adherence(logs, now)

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    def _get_log(self, session: Session, log_id: int) -> models.DoseLog:
        log = session.query(models.DoseLog).filter(
            models.DoseLog.id == log_id
        ).first()
        if not log:
            raise DoseLogNotFoundError(log_id)
        return log


# Singleton instance
adherence_service = AdherenceService()
