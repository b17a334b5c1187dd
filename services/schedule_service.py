"""
Schedule Service
Generates dose log occurrences from medication schedules
"""

import logging
from typing import Iterable, List, Optional, Union
from datetime import datetime, date, time, timedelta
from sqlalchemy.orm import Session
from sqlalchemy import and_

from database import get_db_context
import models
from models import DoseStatus, Frequency
from services.exceptions import MedicationNotFoundError
from tools.frequency_policy import is_scheduled_on, scheduled_clock_times


logger = logging.getLogger(__name__)


def generate_occurrences(
    session: Session,
    medication: models.Medication,
    frequency: Union[Frequency, str],
    reminder_times: List[str],
    start_date: date,
    horizon_days: int,
    end_date: Optional[date]
) -> int:
    """Stage pending dose logs on the session without committing"""
    clock_times = scheduled_clock_times(frequency, reminder_times, medication.id)

    if not clock_times or horizon_days <= 0:
        return 0

    window_start = datetime.combine(start_date, time.min)
    window_end = datetime.combine(start_date + timedelta(days=horizon_days), time.min)
    existing = {
        row.scheduled_time
        for row in session.query(models.DoseLog.scheduled_time).filter(
            and_(
                models.DoseLog.medication_id == medication.id,
                models.DoseLog.scheduled_time >= window_start,
                models.DoseLog.scheduled_time < window_end
            )
        )
    }

    # Phase is anchored to the medication's own start date, not the
    # first generated day
    anchor = medication.start_date or start_date

    created = 0
    for offset in range(horizon_days):
        day = start_date + timedelta(days=offset)
        if not is_scheduled_on(frequency, anchor, day, end_date):
            continue
        for clock in clock_times:
            scheduled = datetime.combine(day, clock)
            if scheduled in existing:
                continue
            session.add(models.DoseLog(
                patient_id=medication.patient_id,
                medication_id=medication.id,
                scheduled_time=scheduled,
                status=DoseStatus.PENDING
            ))
            existing.add(scheduled)
            created += 1

    return created


def ensure_occurrences(session: Session, patient_id: int, days: Iterable[date]) -> int:
    """
    Stage missing occurrences of a patient's active medications for
    the given days. The caller commits.
    """
    medications = session.query(models.Medication).filter(
        and_(
            models.Medication.patient_id == patient_id,
            models.Medication.is_active == True
        )
    ).all()

    created = 0
    for day in days:
        for med in medications:
            created += generate_occurrences(
                session, med, med.frequency, med.reminder_times or [],
                day, 1, med.end_date
            )
    if created:
        logger.info(f"Topped up {created} dose log(s) for patient {patient_id}")
    return created


class ScheduleService:
    """
    Service that persists occurrences (one pending DoseLog per reminder
    time per scheduled day) for the reminder engine to match against.
    """

    async def insert_dose_logs_for_schedule(
        self,
        medication_id: int,
        frequency: Union[Frequency, str],
        reminder_times: List[str],
        start_date: date,
        horizon_days: int,
        end_date: Optional[date] = None,
        db: Optional[Session] = None
    ) -> int:
        """
        Create pending dose logs for a medication's upcoming occurrences

        Existing (medication, scheduled_time) pairs are left untouched, so
        the call can be repeated safely.

        Args:
            medication_id: Medication ID
            frequency: Medication frequency
            reminder_times: Daily reminder clock-times ("HH:MM")
            start_date: First day to generate
            horizon_days: Number of days to generate from start_date
            end_date: Last day of the course, if any
            db: Database session

        Returns:
            Number of dose logs created
        """
        def _insert(session: Session) -> int:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()
            if not medication:
                raise MedicationNotFoundError(medication_id)

            created = generate_occurrences(
                session, medication, frequency, reminder_times,
                start_date, horizon_days, end_date
            )
            session.commit()

            logger.info(
                f"Generated {created} dose log(s) for medication {medication_id} "
                f"from {start_date.isoformat()} over {horizon_days} day(s)"
            )
            return created

        if db:
            return _insert(db)

        with get_db_context() as session:
            return _insert(session)

    async def ensure_logs_for_day(
        self,
        patient_id: int,
        day: date,
        db: Optional[Session] = None
    ) -> int:
        """Top up a patient's occurrences for a single day"""
        def _ensure(session: Session) -> int:
            created = ensure_occurrences(session, patient_id, [day])
            if created:
                session.commit()
            return created

        if db:
            return _ensure(db)

        with get_db_context() as session:
            return _ensure(session)


# Singleton instance
schedule_service = ScheduleService()
