"""
Medications API Router
Endpoints for medication management
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, services, not_found
from api.schemas.medication import (
    MedicationCreate,
    MedicationResponse,
    MedicationList,
    FrequencyOption,
)
from services.exceptions import OwnerNotFoundError
from tools.frequency_policy import frequency_options


router = APIRouter(prefix="/medications", tags=["medications"])


@router.get("/frequencies", response_model=List[FrequencyOption])
async def list_frequencies():
    """
    Frequency choices with their labels and reminder-time limits
    """
    return frequency_options()


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    db: Session = Depends(get_db)
):
    """
    Add a new medication for a patient

    - **patient_id**: Patient ID
    - **name**: Medication name
    - **dosage**: Dosage (e.g., "500mg")
    - **frequency**: One of the values from /medications/frequencies
    - **reminder_times**: Daily clock-times ("HH:MM")
    """
    medication_service = services.get_medication_service()

    if (
        medication_data.start_date
        and medication_data.end_date
        and medication_data.end_date < medication_data.start_date
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date"
        )

    try:
        medication = await medication_service.add_medication(
            patient_id=medication_data.patient_id,
            name=medication_data.name,
            dosage=medication_data.dosage,
            frequency=medication_data.frequency,
            reminder_times=medication_data.reminder_times,
            start_date=medication_data.start_date,
            end_date=medication_data.end_date,
            instructions=medication_data.instructions,
            color=medication_data.color,
            db=db
        )
        return medication
    except OwnerNotFoundError as e:
        raise not_found(e)


@router.get("/{patient_id}", response_model=MedicationList)
async def get_patient_medications(
    patient_id: int,
    db: Session = Depends(get_db)
):
    """
    Get the active medications of a patient
    """
    medication_service = services.get_medication_service()

    try:
        medications = await medication_service.list_active_medications(patient_id, db=db)
    except OwnerNotFoundError as e:
        raise not_found(e)

    return MedicationList(
        patient_id=patient_id,
        medications=medications,
        total=len(medications)
    )
