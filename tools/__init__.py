"""
Tools Package
Pure scheduling helpers for the DoseTrack engine
"""

from .time_utils import (
    parse_clock_time,
    format_clock_time,
    to_local_naive,
    day_bounds,
    week_bounds,
    format_week_range
)

from .frequency_policy import (
    MAX_REMINDER_SLOTS,
    FREQUENCY_LABELS,
    FREQUENCY_DESCRIPTIONS,
    DEFAULT_REMINDER_TIMES,
    parse_frequency,
    max_reminder_slots,
    is_scheduled_on,
    is_scheduled_today,
    normalize_reminder_times,
    frequency_options
)

from .status_classifier import (
    LATE_THRESHOLD,
    MISSED_THRESHOLD,
    classify,
    classify_taken,
    heal,
    is_terminal,
    hours_until_missed
)

__all__ = [
    # Time Utilities
    "parse_clock_time",
    "format_clock_time",
    "to_local_naive",
    "day_bounds",
    "week_bounds",
    "format_week_range",

    # Frequency Policy
    "MAX_REMINDER_SLOTS",
    "FREQUENCY_LABELS",
    "FREQUENCY_DESCRIPTIONS",
    "DEFAULT_REMINDER_TIMES",
    "parse_frequency",
    "max_reminder_slots",
    "is_scheduled_on",
    "is_scheduled_today",
    "normalize_reminder_times",
    "frequency_options",

    # Status Classifier
    "LATE_THRESHOLD",
    "MISSED_THRESHOLD",
    "classify",
    "classify_taken",
    "heal",
    "is_terminal",
    "hours_until_missed"
]
