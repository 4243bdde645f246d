# eventhub/core/timeutils.py
import calendar
import re
from datetime import date, datetime, time

_CLOCK_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9]))?\s?(AM|PM)?$", re.IGNORECASE)


def parse_clock(value) -> time:
    """
    Accepts "HH:MM", "H:MM", "HH:MM:SS" and "H:MM AM/PM".
    Raises ValueError for anything else.
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValueError("time must be a string like HH:MM")
    m = _CLOCK_RE.match(value.strip())
    if not m:
        raise ValueError("Please enter a valid time (HH:MM or HH:MM AM/PM)")
    hour, minute = int(m.group(1)), int(m.group(2))
    second = int(m.group(3) or 0)
    meridiem = (m.group(4) or "").upper()
    if meridiem:
        if hour < 1 or hour > 12:
            raise ValueError("12-hour times must have an hour between 1 and 12")
        hour = hour % 12 + (12 if meridiem == "PM" else 0)
    return time(hour, minute, second)


def is_first_of_month(day: date) -> bool:
    return day.day == 1


def month_bounds(month: int, year: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def weekend_dates(month: int, year: int) -> list[date]:
    """Saturdays and Sundays of the month, never the 1st."""
    _, end = month_bounds(month, year)
    return [
        date(year, month, d)
        for d in range(2, end.day + 1)
        if date(year, month, d).weekday() in (5, 6)
    ]


def utcnow() -> datetime:
    return datetime.utcnow()


def today() -> date:
    return datetime.utcnow().date()
