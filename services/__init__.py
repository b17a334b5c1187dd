"""
Services Module
Business logic layer for the DoseTrack application
"""

from services.patient_service import PatientService, patient_service
from services.medication_service import MedicationService, medication_service
from services.schedule_service import ScheduleService, schedule_service
from services.adherence_service import AdherenceService, adherence_service, apply_write_backs


__all__ = [
    # Service classes
    "PatientService",
    "MedicationService",
    "ScheduleService",
    "AdherenceService",
    # Singleton instances
    "patient_service",
    "medication_service",
    "schedule_service",
    "adherence_service",
    # Background work
    "apply_write_backs",
]
