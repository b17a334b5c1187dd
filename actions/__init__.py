"""
Actions Module
Pure engines for reminder materialization and adherence scoring
"""

from .records import (
    MedicationDefinition,
    DoseLogRecord,
    StatusWriteBack
)

from .reminder_engine import (
    Reminder,
    MaterializationResult,
    ReminderEngine,
    reminder_engine,
    materialize_today
)

from .adherence_engine import (
    AdherenceBand,
    AdherenceSnapshot,
    AdherenceResult,
    AdherenceEngine,
    adherence_engine,
    adherence_band,
    calculate_adherence_rate,
    compute_weekly_adherence
)


__all__ = [
    # Records
    "MedicationDefinition",
    "DoseLogRecord",
    "StatusWriteBack",

    # Reminder Engine
    "Reminder",
    "MaterializationResult",
    "ReminderEngine",
    "reminder_engine",
    "materialize_today",

    # Adherence Engine
    "AdherenceBand",
    "AdherenceSnapshot",
    "AdherenceResult",
    "AdherenceEngine",
    "adherence_engine",
    "adherence_band",
    "calculate_adherence_rate",
    "compute_weekly_adherence"
]
