"""
Daily time grid and day labels.

Slot labels look like "18:00 > 18:15". The bracket round table is keyed by
these exact strings, so both must come from the same grid.
"""

from datetime import datetime, timedelta

from config import ScheduleSettings, SCHEDULE_SETTINGS

TIME_FORMAT = "%H:%M"

# Group stage runs on days 1-4 and 6
DAY_LABELS: dict[int, str] = {
    1: "Group day 1",
    2: "Group day 2",
    3: "Group day 3",
    4: "Group day 4",
    5: "Play-in (Thursday)",
    6: "Group day 5",
    7: "Finals (Sunday)",
}


def format_slot(start: datetime, end: datetime) -> str:
    return f"{start.strftime(TIME_FORMAT)} > {end.strftime(TIME_FORMAT)}"


def generate_time_slots(settings: ScheduleSettings = SCHEDULE_SETTINGS) -> list[str]:
    """
    Generate the daily slot labels.

    Slots last `slot_minutes`, separated by a `break_minutes` pause, from
    `first_slot` up to the last slot starting no later than `last_slot_start`.
    """
    start = datetime.strptime(settings.first_slot, TIME_FORMAT)
    last_start = datetime.strptime(settings.last_slot_start, TIME_FORMAT)
    duration = timedelta(minutes=settings.slot_minutes)
    step = duration + timedelta(minutes=settings.break_minutes)

    slots = []
    while start <= last_start:
        slots.append(format_slot(start, start + duration))
        start += step
    return slots


def day_label(day: int) -> str:
    """Display label for a day number."""
    return DAY_LABELS.get(day, f"Day {day}")
