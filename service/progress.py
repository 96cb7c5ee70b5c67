import math
from datetime import date, datetime, timedelta
from typing import Dict, Sequence, Set, Tuple

from util.enum import SessionStatus
from util.week import weekday_name

# Display order for weekly summaries
WEEKDAY_ORDER = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def percent(part: int, whole: int) -> int:
    """Whole percent, halves rounded up."""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def is_completed(session) -> bool:
    return bool(session.completed) or session.status == SessionStatus.completed


def weekly_progress(sessions: Sequence) -> Dict:
    total = len(sessions)
    completed = sum(1 for s in sessions if is_completed(s))
    return {
        "total": total,
        "completed": completed,
        "percentage": percent(completed, total),
        "sessions": sorted(sessions, key=lambda s: s.scheduled_start),
    }


def completion_days(sessions: Sequence) -> Set[date]:
    """Calendar days with at least one completed session."""
    return {
        (s.actual_end or s.scheduled_end).date()
        for s in sessions
        if is_completed(s)
    }


def study_streak(sessions: Sequence, now: datetime) -> Tuple[int, int]:
    """(current, best) runs of consecutive study days.

    The current streak counts back from today and is 0 when nothing was
    completed today.
    """
    days = completion_days(sessions)

    current = 0
    cursor = now.date()
    while cursor in days:
        current += 1
        cursor -= timedelta(days=1)

    best = 0
    for day in days:
        if day - timedelta(days=1) in days:
            continue
        run = 1
        while day + timedelta(days=run) in days:
            run += 1
        best = max(best, run)

    return current, max(best, current)


def study_stats(subjects: Sequence, sessions: Sequence) -> Dict:
    completed = [s for s in sessions if is_completed(s)]

    hours_by_weekday = {day: 0.0 for day in WEEKDAY_ORDER}
    hours_by_subject: Dict[str, float] = {}
    for session in completed:
        day = weekday_name(session.scheduled_start)
        hours_by_weekday[day] += session.allocated
        hours_by_subject[session.subject_name] = (
            hours_by_subject.get(session.subject_name, 0.0) + session.allocated
        )

    return {
        "total_hours": sum(s.total_hours or 0 for s in subjects),
        "completion_rate": percent(len(completed), len(sessions)),
        "active_subjects": len(subjects),
        "hours_by_weekday": hours_by_weekday,
        "hours_by_subject": hours_by_subject,
    }
