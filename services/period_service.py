"""Calendar windows for dashboards and trend charts.

offset 0 is the period containing the reference time, positive offsets
count back into the past and negative offsets forward into the future.
Every window runs from 00:00:00.000 of its first day to 23:59:59.999 of its
last; weeks run Sunday to Saturday.
"""
from datetime import datetime, timedelta

from models.period import PeriodWindow
from utils.constants import DAILY, WEEKLY, MONTHLY, YEARLY, TIMEFRAME_LABELS
from utils.date_helpers import (
    add_months, days_in_month, end_of_day, friendly_day, friendly_month,
    short_day, start_of_day, start_of_week,
)


def resolve_period(granularity: str, offset: int, reference_now: datetime) -> PeriodWindow:
    if granularity == DAILY:
        day = start_of_day(reference_now) - timedelta(days=offset)
        start, last_day = day, day
        label = friendly_day(day)

    elif granularity == WEEKLY:
        start = start_of_week(reference_now) - timedelta(weeks=offset)
        last_day = start + timedelta(days=6)
        label = f"{short_day(start)} - {short_day(last_day)}"

    elif granularity == MONTHLY:
        first_of_current = start_of_day(reference_now).replace(day=1)
        start = add_months(first_of_current, -offset)
        last_day = start.replace(day=days_in_month(start.year, start.month))
        label = friendly_month(start)

    elif granularity == YEARLY:
        start = datetime(reference_now.year - offset, 1, 1)
        last_day = datetime(start.year, 12, 31)
        label = str(start.year)

    else:
        raise ValueError(f"Invalid timeframe: {granularity}")

    return PeriodWindow(
        granularity=granularity,
        offset=offset,
        start_date=start,
        end_date=end_of_day(last_day),
        label=label,
    )


def period_windows(
    granularity: str,
    count: int,
    reference_now: datetime,
    end_offset: int = 0,
) -> list[PeriodWindow]:
    """`count` consecutive windows, oldest first, the newest at end_offset."""
    return [
        resolve_period(granularity, offset, reference_now)
        for offset in range(end_offset + count - 1, end_offset - 1, -1)
    ]


def timeframe_label(granularity: str) -> str:
    return TIMEFRAME_LABELS.get(granularity, granularity.title())
