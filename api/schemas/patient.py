"""
Patient Schemas
Pydantic models for patient-related API requests and responses
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


# ==================== REQUEST SCHEMAS ====================

class PatientCreate(BaseModel):
    """Schema for creating a new patient"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    # Plain string so special-use/test domains are accepted
    email: str = Field(..., min_length=3, max_length=255)
    external_id: Optional[str] = Field(None, max_length=100)


# ==================== RESPONSE SCHEMAS ====================

class PatientResponse(BaseModel):
    """Schema for patient response"""
    id: int
    external_id: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    is_active: bool = True
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
