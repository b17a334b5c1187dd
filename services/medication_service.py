"""
Medication Service
Business logic for the medications a patient tracks
"""

import logging
from typing import List, Optional, Union
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import and_

from config import settings
from database import get_db_context
import models
from models import Frequency
from services.patient_service import require_active_patient
from services.schedule_service import generate_occurrences
from tools.frequency_policy import normalize_reminder_times


logger = logging.getLogger(__name__)


class MedicationService:
    """
    Service for medication management
    """

    async def add_medication(
        self,
        patient_id: int,
        name: str,
        dosage: str,
        frequency: Union[Frequency, str],
        reminder_times: Optional[List[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        instructions: Optional[str] = None,
        color: Optional[str] = None,
        today: Optional[date] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Add a medication and generate its upcoming dose logs

        Reminder times are fitted to the frequency before saving: extra
        entries are dropped and multi-daily schedules get default slots.

        Args:
            patient_id: Owner
            name: Medication name
            dosage: Dosage text, e.g. "10mg"
            frequency: Dosing frequency
            reminder_times: Daily clock-times ("HH:MM")
            start_date: Schedule anchor (default: today)
            end_date: Last day of the course
            instructions: Free-text instructions
            color: Display color
            today: First day eligible for generated dose logs (default: today)
            db: Database session

        Returns:
            Created Medication
        """
        freq_value = frequency.value if isinstance(frequency, Frequency) else str(frequency)
        today = today or date.today()
        start_date = start_date or today
        # Days before today are topped up on read, not generated here
        horizon_start = max(start_date, today)
        times = normalize_reminder_times(freq_value, reminder_times or [])

        def _add(session: Session) -> models.Medication:
            require_active_patient(session, patient_id)

            medication = models.Medication(
                patient_id=patient_id,
                name=name,
                dosage=dosage,
                frequency=freq_value,
                reminder_times=times,
                start_date=start_date,
                end_date=end_date,
                instructions=instructions,
                color=color,
                is_active=True
            )
            session.add(medication)
            session.flush()

            generated = generate_occurrences(
                session, medication, freq_value, times,
                horizon_start, settings.SCHEDULE_HORIZON_DAYS, end_date
            )
            session.commit()
            session.refresh(medication)

            logger.info(
                f"Added medication {medication.id} ({name}, {freq_value}) "
                f"for patient {patient_id} with reminders {times}, "
                f"{generated} dose log(s) generated"
            )
            return medication

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def get_medication(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Get medication by ID"""
        def _get(session: Session) -> Optional[models.Medication]:
            return session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def list_active_medications(
        self,
        patient_id: int,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """Active medications for a patient, oldest first"""
        def _list(session: Session) -> List[models.Medication]:
            require_active_patient(session, patient_id)
            return session.query(models.Medication).filter(
                and_(
                    models.Medication.patient_id == patient_id,
                    models.Medication.is_active == True
                )
            ).order_by(models.Medication.id).all()

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def discontinue_medication(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Mark a medication inactive; it stops producing reminders"""
        def _discontinue(session: Session) -> Optional[models.Medication]:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()
            if not medication:
                return None

            medication.is_active = False
            session.commit()
            session.refresh(medication)

            logger.info(f"Discontinued medication {medication_id}")
            return medication

        if db:
            return _discontinue(db)

        with get_db_context() as session:
            return _discontinue(session)


# Singleton instance
medication_service = MedicationService()
