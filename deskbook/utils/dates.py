"""
Date helpers

All days are plain calendar dates interpreted as UTC midnight.
"""
import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterable

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_today() -> date:
    """Current calendar day in UTC"""
    return datetime.now(timezone.utc).date()


def parse_day(value) -> date:
    """Parse a strict YYYY-MM-DD string into a date"""
    if isinstance(value, datetime):
        raise ValueError("Date must be in YYYY-MM-DD format")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DAY_RE.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid calendar date: {value}")


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month"""
    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start, end


def unique_days(days: Iterable[date]) -> list[date]:
    """Deduplicate while keeping the caller's order"""
    seen = set()
    result = []
    for d in days:
        if d not in seen:
            seen.add(d)
            result.append(d)
    return result


def week_after(day: date) -> date:
    return day + timedelta(days=7)
