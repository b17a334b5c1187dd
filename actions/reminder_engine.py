"""
Reminder Engine
Materializes today's medication reminders with their live dose status
"""

import logging
from typing import List, Dict, Any, Optional, Iterable, Tuple
from dataclasses import dataclass, field
from datetime import datetime, date

from models import DoseStatus
from actions.records import StatusWriteBack
from tools.frequency_policy import is_scheduled_today, scheduled_clock_times
from tools.status_classifier import heal, hours_until_missed
from tools.time_utils import format_clock_time, to_local_naive, day_bounds


logger = logging.getLogger(__name__)


@dataclass
class Reminder:
    """Today's view of one occurrence"""
    id: str
    medication_id: int
    medication_name: str
    dosage: str
    scheduled_time: datetime
    status: DoseStatus
    instructions: Optional[str] = None
    color: Optional[str] = None
    log_id: Optional[int] = None
    is_overdue: bool = False
    can_take: bool = False
    hours_until_missed: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "medication_id": self.medication_id,
            "medication_name": self.medication_name,
            "dosage": self.dosage,
            "instructions": self.instructions,
            "color": self.color,
            "scheduled_time": self.scheduled_time.isoformat(),
            "status": self.status.value,
            "log_id": self.log_id,
            "is_overdue": self.is_overdue,
            "can_take": self.can_take,
            "hours_until_missed": self.hours_until_missed,
        }


@dataclass
class MaterializationResult:
    """Reminders for today plus statuses the caller should persist"""
    reminders: List[Reminder] = field(default_factory=list)
    write_backs: List[StatusWriteBack] = field(default_factory=list)


OccurrenceKey = Tuple[int, date, str]


class ReminderEngine:
    """
    Builds the ordered list of today's reminders from medication
    definitions and dose logs. Pure: no I/O, no clock reads.
    """

    def materialize_today(
        self,
        definitions: Iterable[Any],
        logs: Iterable[Any],
        now: datetime
    ) -> MaterializationResult:
        """
        Materialize reminders due today

        Args:
            definitions: Medication definitions (ORM rows or MedicationDefinition)
            logs: Dose logs, any date range; only today's are matched
            now: Current time

        Returns:
            MaterializationResult with reminders sorted by scheduled time
        """
        now = to_local_naive(now)
        today = now.date()
        start_of_day, end_of_day = day_bounds(today)

        log_index = self._index_logs(logs)
        result = MaterializationResult()

        for definition in definitions:
            if not definition.is_active or not definition.reminder_times:
                continue
            if not is_scheduled_today(definition, today):
                continue

            for clock in scheduled_clock_times(
                definition.frequency, list(definition.reminder_times), definition.id
            ):
                scheduled_time = datetime.combine(today, clock)
                if not (start_of_day <= scheduled_time <= end_of_day):
                    continue

                clock_key = format_clock_time(clock)
                log = log_index.get((definition.id, today, clock_key))
                reminder, write_back = self._build_reminder(
                    definition, clock_key, scheduled_time, log, now
                )
                result.reminders.append(reminder)
                if write_back is not None:
                    result.write_backs.append(write_back)

        result.reminders.sort(key=lambda r: (r.scheduled_time, r.medication_name))
        return result

    def _build_reminder(
        self,
        definition: Any,
        clock_key: str,
        scheduled_time: datetime,
        log: Optional[Any],
        now: datetime
    ) -> Tuple[Reminder, Optional[StatusWriteBack]]:
        stored_status = log.status if log is not None else DoseStatus.PENDING
        taken_time = log.taken_time if log is not None else None
        status = heal(stored_status, scheduled_time, taken_time, now)

        write_back = None
        if (
            log is not None
            and DoseStatus(stored_status) == DoseStatus.PENDING
            and status == DoseStatus.MISSED
        ):
            write_back = StatusWriteBack(log_id=log.id, status=DoseStatus.MISSED)

        is_pending = status == DoseStatus.PENDING
        reminder = Reminder(
            id=f"{definition.id}-{clock_key}",
            medication_id=definition.id,
            medication_name=definition.name,
            dosage=definition.dosage,
            instructions=getattr(definition, "instructions", None),
            color=getattr(definition, "color", None),
            scheduled_time=scheduled_time,
            status=status,
            log_id=log.id if log is not None else None,
            is_overdue=is_pending and scheduled_time < now,
            can_take=is_pending and log is not None,
            hours_until_missed=hours_until_missed(scheduled_time, now) if is_pending else None,
        )
        return reminder, write_back

    def _index_logs(self, logs: Iterable[Any]) -> Dict[OccurrenceKey, Any]:
        """Index logs by (medication, local date, HH:MM)"""
        index: Dict[OccurrenceKey, Any] = {}
        for log in logs:
            local = to_local_naive(log.scheduled_time)
            key = (log.medication_id, local.date(), local.strftime("%H:%M"))
            existing = index.get(key)
            if existing is None:
                index[key] = log
            elif DoseStatus(existing.status) == DoseStatus.PENDING:
                # Duplicate occurrence rows: the one that has advanced wins
                logger.warning(f"Duplicate dose logs for occurrence {key}")
                index[key] = log
        return index


# Singleton instance
reminder_engine = ReminderEngine()


def materialize_today(
    definitions: Iterable[Any],
    logs: Iterable[Any],
    now: datetime
) -> MaterializationResult:
    """Convenience function to materialize today's reminders"""
    return reminder_engine.materialize_today(definitions, logs, now)
