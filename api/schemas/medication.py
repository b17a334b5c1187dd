"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict

from models import Frequency


# ==================== BASE SCHEMAS ====================

class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=255)
    dosage: str = Field(..., min_length=1, max_length=100)
    instructions: Optional[str] = None
    color: Optional[str] = Field(None, max_length=20)


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(MedicationBase):
    """Schema for creating a new medication"""
    patient_id: int
    frequency: Frequency = Frequency.ONCE_DAILY
    # "HH:MM" clock-times; fitted to the frequency on save
    reminder_times: List[str] = Field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(MedicationBase):
    """Schema for medication response"""
    id: int
    patient_id: int
    frequency: str
    reminder_times: List[str] = Field(default_factory=list)
    is_active: bool = True
    start_date: date
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MedicationList(BaseModel):
    """Active medications of a patient"""
    patient_id: int
    medications: List[MedicationResponse]
    total: int


class FrequencyOption(BaseModel):
    """One choice for the frequency picker"""
    value: str
    label: str
    description: str
    max_reminder_times: int
