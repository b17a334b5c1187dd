"""
Service Exceptions
Errors raised by the service layer and translated to HTTP responses by the API
"""


class DoseTrackError(Exception):
    """Base class for service errors"""


class OwnerNotFoundError(DoseTrackError, LookupError):
    """No active patient context; nothing can be materialized without one"""

    def __init__(self, patient_id):
        self.patient_id = patient_id
        super().__init__(f"Patient {patient_id} not found or inactive")


class MedicationNotFoundError(DoseTrackError, LookupError):
    def __init__(self, medication_id):
        self.medication_id = medication_id
        super().__init__(f"Medication {medication_id} not found")


class DoseLogNotFoundError(DoseTrackError, LookupError):
    def __init__(self, log_id):
        self.log_id = log_id
        super().__init__(f"Dose log {log_id} not found")
