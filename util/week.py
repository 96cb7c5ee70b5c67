"""Calendar helpers shared by the scheduler, templates and controllers.

Week numbers follow the planner's own scheme rather than ISO-8601 so that
plans stored by week stay addressable: weeks start on Sunday and week 1 is
the (possibly partial) week that contains January 1st.
"""

import math
import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from config.setting import settings

# Sunday-first, matching the 0=Sunday..6=Saturday numbering used for weeks
WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

_START_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def sunday_based_weekday(day: date) -> int:
    """0=Sunday .. 6=Saturday"""
    return (day.weekday() + 1) % 7


def weekday_name(moment: date) -> str:
    return WEEKDAY_NAMES[sunday_based_weekday(moment)]


def weekday_index(name: str) -> Optional[int]:
    """Sunday-based index for a weekday name, or None when unknown."""
    if not isinstance(name, str):
        return None
    normalized = name.strip().capitalize()
    if normalized not in WEEKDAY_NAMES:
        return None
    return WEEKDAY_NAMES.index(normalized)


def week_number(moment: date) -> int:
    """ceil((days since Jan 1 + weekday of Jan 1 + 1) / 7), midnight aligned."""
    day = moment.date() if isinstance(moment, datetime) else moment
    jan1 = date(day.year, 1, 1)
    days_since_jan1 = (day - jan1).days
    return math.ceil((days_since_jan1 + sunday_based_weekday(jan1) + 1) / 7)


def week_key(moment: date) -> Tuple[int, int]:
    """The (week_number, year) pair plans are stored under."""
    return week_number(moment), moment.year


def parse_start_time(value: str) -> Optional[Tuple[int, int]]:
    """Parse "HH:MM" into (hour, minute); None when malformed."""
    if not isinstance(value, str):
        return None
    match = _START_TIME_RE.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def format_start_time(moment: datetime) -> str:
    return f"{moment.hour:02d}:{moment.minute:02d}"


def day_offset(target_index: int, today: date, allow_same_day: Optional[bool] = None) -> int:
    """Days from today until the next occurrence of the target weekday.

    With same-day scheduling the result is in [0, 6]; without it a match on
    today wraps to the same weekday next week, giving [1, 7].
    """
    if allow_same_day is None:
        allow_same_day = settings.ALLOW_SAME_DAY_SCHEDULING

    offset = (target_index - sunday_based_weekday(today)) % 7
    if offset == 0 and not allow_same_day:
        offset = 7
    return offset


def resolve_study_date(day_name: str, now: datetime, allow_same_day: Optional[bool] = None) -> date:
    """Calendar date of the next occurrence of day_name relative to now."""
    target = weekday_index(day_name)
    if target is None:
        raise ValueError(f"Unknown weekday: {day_name}")
    today = now.date() if isinstance(now, datetime) else now
    return today + timedelta(days=day_offset(target, today, allow_same_day))


def at_time(day: date, hour: int, minute: int) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


def add_hours(moment: datetime, hours: float) -> datetime:
    return moment + timedelta(hours=hours)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600
