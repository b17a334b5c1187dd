"""
Adherence Schemas
Pydantic models for dose recording and adherence API responses
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from models import DoseStatus
from actions.adherence_engine import AdherenceBand


# ==================== REQUEST SCHEMAS ====================

class DoseTaken(BaseModel):
    """Schema for recording a taken dose"""
    # Defaults to the time the request is handled
    taken_at: Optional[datetime] = None


# ==================== RESPONSE SCHEMAS ====================

class DoseLogResponse(BaseModel):
    """Schema for a dose log"""
    id: int
    patient_id: int
    medication_id: int
    scheduled_time: datetime
    taken_time: Optional[datetime] = None
    status: DoseStatus

    model_config = ConfigDict(from_attributes=True)


class DoseMutationResponse(BaseModel):
    """Result of recording a dose"""
    log: DoseLogResponse
    applied: bool
    needs_refresh: bool
    message: str


class WeeklyAdherence(BaseModel):
    """Adherence for the current Monday-Sunday week"""
    patient_id: int
    on_time: int = Field(0, ge=0)
    late: int = Field(0, ge=0)
    missed: int = Field(0, ge=0)
    total: int = Field(0, ge=0)
    pending: int = Field(0, ge=0)
    adherence_rate: int = Field(0, ge=0, le=100)
    band: AdherenceBand
    week_start: datetime
    week_end: datetime
    week_label: str
