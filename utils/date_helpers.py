from datetime import date, datetime, time, timedelta
import calendar

# Last representable instant of a day at millisecond precision.
END_OF_DAY = time(23, 59, 59, 999000)


def now() -> datetime:
    return datetime.now()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO 8601 timestamp or a bare YYYY-MM-DD date.

    A trailing 'Z' or UTC offset is dropped: all timestamps are handled as
    naive local wall-clock times. Returns None on failure.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        d = parse_date(text)
        return datetime.combine(d, time()) if d else None
    return parsed.replace(tzinfo=None)


def format_timestamp(dt: datetime) -> str:
    """Storage form: 'YYYY-MM-DDTHH:MM:SS.mmm'."""
    return dt.isoformat(timespec="milliseconds")


def as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


def start_of_day(value: date | datetime) -> datetime:
    return datetime.combine(as_datetime(value).date(), time())


def end_of_day(value: date | datetime) -> datetime:
    return datetime.combine(as_datetime(value).date(), END_OF_DAY)


def start_of_week(value: date | datetime) -> datetime:
    """Midnight of the Sunday that opens the week containing value."""
    day = start_of_day(value)
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    return min(day, days_in_month(year, month))


def is_last_day_of_month(d: date | datetime) -> bool:
    return d.day == days_in_month(d.year, d.month)


def add_months(d, n: int, anchor_day: int | None = None):
    """Add n months to d, clamping the day to the target month's end.

    anchor_day, when given, is the preferred day-of-month; it lets a date
    that was clamped (Jan 31 -> Feb 29) return to the 31st in later months.
    Works for both date and datetime; the time of day is preserved.
    """
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, anchor_day or d.day)
    return d.replace(year=year, month=month, day=day)


def add_years(d, n: int, anchor_day: int | None = None):
    """Add n years to d; Feb 29 clamps to Feb 28 outside leap years."""
    year = d.year + n
    day = clamp_day_to_month(year, d.month, anchor_day or d.day)
    return d.replace(year=year, day=day)


def friendly_month(d: date | datetime) -> str:
    """e.g. 'Feb 2024'."""
    return d.strftime("%b %Y")


def friendly_day(d: date | datetime) -> str:
    """e.g. 'Mon, Jan 08'."""
    return d.strftime("%a, %b %d")


def short_day(d: date | datetime) -> str:
    """e.g. 'Jan 08'."""
    return d.strftime("%b %d")


def long_month(d: date | datetime) -> str:
    """e.g. 'February 2024'; used for history group headers."""
    return d.strftime("%B %Y")
