"""
Engine Records
Plain data structures consumed and produced by the scheduling engines.

The engines only read attributes, so ORM rows from ``models`` can be
passed anywhere a MedicationDefinition or DoseLogRecord is expected.
"""

from typing import List, Dict, Any, Optional, Union
from dataclasses import dataclass, field
from datetime import date, datetime

from models import DoseStatus, Frequency


@dataclass
class MedicationDefinition:
    """A medication the patient is tracking"""
    id: int
    patient_id: int
    name: str
    dosage: str
    frequency: Union[Frequency, str]
    start_date: date
    reminder_times: List[str] = field(default_factory=list)
    is_active: bool = True
    instructions: Optional[str] = None
    color: Optional[str] = None
    end_date: Optional[date] = None


@dataclass
class DoseLogRecord:
    """Persisted outcome of one occurrence"""
    id: int
    medication_id: int
    scheduled_time: datetime
    status: DoseStatus = DoseStatus.PENDING
    taken_time: Optional[datetime] = None
    patient_id: Optional[int] = None


@dataclass(frozen=True)
class StatusWriteBack:
    """Instruction for the caller to persist a healed status"""
    log_id: int
    status: DoseStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"log_id": self.log_id, "status": self.status.value}
