"""
Frequency Policy
Decides which calendar days a medication is scheduled on and how many
daily reminder slots its frequency allows
"""

import logging
from typing import Dict, List, Optional, Any, Union
from datetime import date, datetime, time

from models import Frequency
from tools.time_utils import parse_clock_time, format_clock_time


logger = logging.getLogger(__name__)


MAX_REMINDER_SLOTS: Dict[Frequency, int] = {
    Frequency.ONCE_DAILY: 1,
    Frequency.TWICE_DAILY: 2,
    Frequency.THREE_TIMES_DAILY: 3,
    Frequency.FOUR_TIMES_DAILY: 4,
    Frequency.EVERY_OTHER_DAY: 1,
    Frequency.WEEKLY: 1,
    Frequency.AS_NEEDED: 0,
}

# Cycle length in days; None means never scheduled automatically
SCHEDULE_CYCLE_DAYS: Dict[Frequency, Optional[int]] = {
    Frequency.ONCE_DAILY: 1,
    Frequency.TWICE_DAILY: 1,
    Frequency.THREE_TIMES_DAILY: 1,
    Frequency.FOUR_TIMES_DAILY: 1,
    Frequency.EVERY_OTHER_DAY: 2,
    Frequency.WEEKLY: 7,
    Frequency.AS_NEEDED: None,
}

FREQUENCY_LABELS: Dict[Frequency, str] = {
    Frequency.ONCE_DAILY: "Once daily",
    Frequency.TWICE_DAILY: "Twice daily",
    Frequency.THREE_TIMES_DAILY: "Three times daily",
    Frequency.FOUR_TIMES_DAILY: "Four times daily",
    Frequency.EVERY_OTHER_DAY: "Every other day",
    Frequency.WEEKLY: "Weekly",
    Frequency.AS_NEEDED: "As needed",
}

FREQUENCY_DESCRIPTIONS: Dict[Frequency, str] = {
    Frequency.ONCE_DAILY: "One reminder per day",
    Frequency.TWICE_DAILY: "Two reminders per day",
    Frequency.THREE_TIMES_DAILY: "Three reminders per day",
    Frequency.FOUR_TIMES_DAILY: "Four reminders per day",
    Frequency.EVERY_OTHER_DAY: "One reminder every other day",
    Frequency.WEEKLY: "One reminder per week",
    Frequency.AS_NEEDED: "No scheduled reminders (take when needed)",
}

# Slots used to fill out multi-daily schedules
DEFAULT_REMINDER_TIMES: List[str] = ["09:00", "13:00", "18:00", "21:00"]

# Fallback for frequencies outside the enum
UNKNOWN_FREQUENCY_SLOTS = 1


def parse_frequency(value: Union[str, Frequency, None]) -> Optional[Frequency]:
    """Coerce a stored frequency value to the enum, None if unrecognized"""
    if isinstance(value, Frequency):
        return value
    if not value:
        return None
    try:
        return Frequency(str(value).strip().lower())
    except ValueError:
        return None


def max_reminder_slots(frequency: Union[str, Frequency, None]) -> int:
    """Maximum number of daily reminder clock-times for a frequency"""
    freq = parse_frequency(frequency)
    if freq is None:
        logger.warning(
            f"Unknown medication frequency '{frequency}', allowing "
            f"{UNKNOWN_FREQUENCY_SLOTS} reminder slot"
        )
        return UNKNOWN_FREQUENCY_SLOTS
    return MAX_REMINDER_SLOTS[freq]


def scheduled_clock_times(
    frequency: Union[str, Frequency, None],
    reminder_times: List[str],
    medication_id: Optional[int] = None
) -> List[time]:
    """
    Clock-times a stored schedule fires at, in list order

    Malformed and repeated entries are skipped before the frequency's
    slot limit is applied, so a bad entry never displaces a valid one.
    """
    clock_times: List[time] = []
    for raw in reminder_times or []:
        parsed = parse_clock_time(raw)
        if parsed is None:
            logger.warning(
                f"Skipping malformed reminder time '{raw}' for medication {medication_id}"
            )
            continue
        if parsed not in clock_times:
            clock_times.append(parsed)

    limit = max_reminder_slots(frequency)
    if len(clock_times) > limit:
        label = getattr(frequency, "value", frequency)
        logger.warning(
            f"Medication {medication_id} has {len(clock_times)} reminder times, "
            f"frequency '{label}' allows {limit}; ignoring the rest"
        )
        clock_times = clock_times[:limit]
    return clock_times


def is_scheduled_on(
    frequency: Union[str, Frequency, None],
    start_date: date,
    day: date,
    end_date: Optional[date] = None
) -> bool:
    """
    Check whether a medication is due on a calendar day

    Args:
        frequency: Medication frequency
        start_date: Day the schedule is anchored to
        day: Day being checked
        end_date: Last day of the course, if any

    Returns:
        True when reminders should be materialized for the day
    """
    if isinstance(day, datetime):
        day = day.date()
    if isinstance(start_date, datetime):
        start_date = start_date.date()

    if day < start_date:
        return False
    if end_date is not None and day > end_date:
        return False

    freq = parse_frequency(frequency)
    if freq is None:
        logger.warning(
            f"Unknown medication frequency '{frequency}', treating as scheduled every day"
        )
        return True

    cycle = SCHEDULE_CYCLE_DAYS[freq]
    if cycle is None:
        return False

    days_since_start = (day - start_date).days
    return days_since_start % cycle == 0


def is_scheduled_today(definition: Any, today: date) -> bool:
    """Frequency gate for a medication definition (ORM row or engine view)"""
    return is_scheduled_on(
        definition.frequency,
        definition.start_date,
        today,
        getattr(definition, "end_date", None)
    )


def normalize_reminder_times(
    frequency: Union[str, Frequency, None],
    reminder_times: List[str]
) -> List[str]:
    """
    Fit a list of reminder clock-times to a frequency

    Unparseable entries are dropped, excess entries trimmed, and
    multi-daily frequencies are topped up from DEFAULT_REMINDER_TIMES.
    As-needed medications get no reminder times.
    """
    freq = parse_frequency(frequency)
    limit = max_reminder_slots(frequency)
    if limit == 0:
        return []

    times: List[str] = []
    for raw in reminder_times or []:
        parsed = parse_clock_time(raw)
        if parsed is None:
            logger.warning(f"Dropping malformed reminder time '{raw}'")
            continue
        formatted = format_clock_time(parsed)
        if formatted not in times:
            times.append(formatted)

    if len(times) > limit:
        times = times[:limit]

    if freq is not None and freq.value.endswith("daily"):
        for default in DEFAULT_REMINDER_TIMES:
            if len(times) >= limit:
                break
            if default not in times:
                times.append(default)

    if not times:
        times.append(DEFAULT_REMINDER_TIMES[0])

    return sorted(times)


def frequency_options() -> List[Dict[str, Any]]:
    """Frequency choices for client pickers"""
    return [
        {
            "value": freq.value,
            "label": FREQUENCY_LABELS[freq],
            "description": FREQUENCY_DESCRIPTIONS[freq],
            "max_reminder_times": MAX_REMINDER_SLOTS[freq],
        }
        for freq in Frequency
    ]
