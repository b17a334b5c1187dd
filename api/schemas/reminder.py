"""
Reminder Schemas
Pydantic models for today's reminder view
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from models import DoseStatus


class ReminderResponse(BaseModel):
    """One occurrence due today with its live status"""
    id: str
    medication_id: int
    medication_name: str
    dosage: str
    instructions: Optional[str] = None
    color: Optional[str] = None
    scheduled_time: datetime
    status: DoseStatus
    log_id: Optional[int] = None
    is_overdue: bool = False
    can_take: bool = False
    hours_until_missed: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class TodayReminders(BaseModel):
    """Today's reminders, ordered by scheduled time"""
    patient_id: int
    date: str
    reminders: List[ReminderResponse]
    total: int
    pending: int
    completed: int
