"""Recurrence schedule arithmetic.

Month-based steps clamp to the last day of the target month: Jan 31 advances
to Feb 29 (or 28), never into March. An optional anchor day restores the
original day-of-month once the calendar allows it again.
"""
from datetime import datetime, timedelta
from typing import Iterator

from models.recurring import RecurringDefinition
from utils.constants import WEEKLY, MONTHLY, YEARLY
from utils.date_helpers import add_months, add_years, is_last_day_of_month


def advance(when: datetime, frequency: str, anchor_day: int | None = None) -> datetime:
    """Return the occurrence one frequency step after `when`.

    Unknown or missing frequencies step one day so a malformed definition
    still makes forward progress.
    """
    if frequency == WEEKLY:
        return when + timedelta(days=7)
    if frequency == MONTHLY:
        return add_months(when, 1, anchor_day)
    if frequency == YEARLY:
        return add_years(when, 1, anchor_day)
    return when + timedelta(days=1)


def anchor_day_for(definition: RecurringDefinition) -> int | None:
    """Day-of-month that month-based steps of this definition aim for.

    The start date's day wins while the pointer is on it or on a month end
    clamped below it; a pointer the user moved to another day keeps its own.
    """
    if definition.frequency not in (MONTHLY, YEARLY):
        return None
    pointer = definition.next_due_date
    start_day = definition.start_date.day
    if pointer.day == start_day:
        return start_day
    if pointer.day < start_day and is_last_day_of_month(pointer):
        return start_day
    return pointer.day


def occurrences(
    first: datetime,
    frequency: str,
    until: datetime,
    anchor_day: int | None = None,
) -> Iterator[datetime]:
    """Yield first and each following occurrence while it is <= until."""
    current = first
    while current <= until:
        yield current
        current = advance(current, frequency, anchor_day)
