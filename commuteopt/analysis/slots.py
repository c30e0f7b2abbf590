"""
Departure time slot generation and resolution
"""

from datetime import date, datetime, timedelta
from typing import List, Sequence, Union

from commuteopt.core.errors import InvalidWindowError
from commuteopt.core.models import DepartureInstant, TimeSlot

DEFAULT_INTERVAL_MINUTES = 15


def _as_slot(value: Union[str, TimeSlot]) -> TimeSlot:
    if isinstance(value, TimeSlot):
        return value
    try:
        return TimeSlot.parse(value)
    except ValueError as e:
        raise InvalidWindowError(str(e))


def generate_time_slots(
    start: Union[str, TimeSlot],
    end: Union[str, TimeSlot],
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> List[TimeSlot]:
    """
    Generate candidate departure times within a window

    Args:
        start: First departure time (HH:MM)
        end: Last possible departure time (HH:MM), included when on the grid
        interval_minutes: Spacing between slots

    Returns:
        Slots in ascending order

    Raises:
        InvalidWindowError: If end is before start or the interval is not positive
    """
    if not isinstance(interval_minutes, int) or interval_minutes <= 0:
        raise InvalidWindowError(f"Interval must be a positive number of minutes, got {interval_minutes!r}")

    start_slot = _as_slot(start)
    end_slot = _as_slot(end)
    if end_slot < start_slot:
        raise InvalidWindowError(f"Window end {end_slot} is before its start {start_slot}")

    slots = []
    current = start_slot.minutes
    while current <= end_slot.minutes:
        slots.append(TimeSlot.from_minutes(current))
        current += interval_minutes

    return slots


def resolve_departure(day: date, slot: TimeSlot) -> DepartureInstant:
    """Bind a slot to a calendar date"""
    departure_time = datetime(day.year, day.month, day.day, slot.hour, slot.minute, 0, 0)
    return DepartureInstant(slot=slot, departure_time=departure_time)


def is_future(instant: DepartureInstant, now: datetime) -> bool:
    """Only departures strictly after now are eligible"""
    return instant.departure_time > now


def future_departures(day: date, slots: Sequence[TimeSlot], now: datetime) -> List[DepartureInstant]:
    """Resolve slots onto a date, dropping those that are not in the future"""
    departures = (resolve_departure(day, slot) for slot in slots)
    return [d for d in departures if is_future(d, now)]


def upcoming_days(start: date, count: int = 7) -> List[date]:
    """Days offered for analysis: start and the following days"""
    return [start + timedelta(days=offset) for offset in range(count)]
