"""
Patients API Router
Endpoints for patient management
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.patient import PatientCreate, PatientResponse


router = APIRouter(prefix="/patients", tags=["patients"])


@router.post("/", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(
    patient_data: PatientCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new patient

    - **email**: Unique email address
    - **first_name**: Patient's first name
    - **last_name**: Patient's last name
    """
    patient_service = services.get_patient_service()

    try:
        patient = await patient_service.create_patient(
            email=patient_data.email,
            first_name=patient_data.first_name,
            last_name=patient_data.last_name,
            external_id=patient_data.external_id,
            db=db
        )
        return patient
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: int,
    db: Session = Depends(get_db)
):
    """
    Get patient by ID
    """
    patient_service = services.get_patient_service()

    patient = await patient_service.get_patient(patient_id, db=db)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient {patient_id} not found"
        )
    return patient
