import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from config.setting import settings
from schema.study_plans import SessionDraft
from service.scoring import compute_generation_score, rank_by_score
from util.enum import Difficulty, ScheduleFailure
from util.week import (
    WEEKDAY_NAMES,
    add_hours,
    at_time,
    parse_start_time,
    resolve_study_date,
    weekday_index,
)

logger = logging.getLogger(__name__)

HARD_SESSION_CAP_HOURS = 2
DEFAULT_SESSION_CAP_HOURS = 1


@dataclass
class ScheduleResult:
    """Outcome of a generation run.

    failure is set instead of raising when the input cannot produce a
    schedule; remaining_hours holds the unallocated budget per weekday.
    """

    sessions: List[SessionDraft] = field(default_factory=list)
    remaining_hours: Dict[str, float] = field(default_factory=dict)
    failure: Optional[ScheduleFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def session_cap(subject) -> float:
    return HARD_SESSION_CAP_HOURS if subject.difficulty == Difficulty.hard else DEFAULT_SESSION_CAP_HOURS


def build_session_draft(subject_id: int, subject_name: str, start: datetime, hours: float) -> SessionDraft:
    """A scheduled session whose end is exactly `hours` after its start."""
    return SessionDraft(
        subject_id=subject_id,
        subject_name=subject_name,
        scheduled_start=start,
        scheduled_end=add_hours(start, hours),
        allocated=hours,
    )


def allocate_day(
    ranked_subjects: Sequence,
    daily_hours: float,
    start: datetime,
    break_minutes: int,
) -> Tuple[List[SessionDraft], float]:
    """Fill one day from the ranked subjects, each subject at most once."""
    sessions = []
    remaining = daily_hours
    clock = start

    for subject in ranked_subjects:
        if remaining <= 0:
            break
        allocation = min(session_cap(subject), remaining)
        draft = build_session_draft(subject.id, subject.name, clock, allocation)
        sessions.append(draft)

        clock = draft.scheduled_end + timedelta(minutes=break_minutes)
        # Rounded so float residue never turns into a sliver session
        remaining = round(remaining - allocation, 6)

    return sessions, max(0.0, remaining)


def generate_schedule(
    subjects: Sequence,
    daily_hours: float,
    start_time: str,
    days_of_week: Sequence[str],
    now: datetime,
    break_minutes: Optional[int] = None,
) -> ScheduleResult:
    """Lay out a week of sessions for the requested weekdays.

    Subjects are ordered once by generation score (stable) and every
    requested day is filled from the top of that order. Nothing is
    persisted here; callers decide whether a plan may be created.
    """
    if not subjects:
        return ScheduleResult(failure=ScheduleFailure.no_subjects)

    parsed_time = parse_start_time(start_time)
    if parsed_time is None:
        return ScheduleResult(failure=ScheduleFailure.invalid_start_time)

    day_indexes = [weekday_index(day) for day in days_of_week]
    if any(index is None for index in day_indexes):
        return ScheduleResult(failure=ScheduleFailure.unknown_weekday)

    if break_minutes is None:
        break_minutes = settings.SESSION_BREAK_MINUTES

    ranked = [subject for subject, _ in rank_by_score(subjects, compute_generation_score)]
    hour, minute = parsed_time
    result = ScheduleResult()

    # Repeating a weekday would stack the same date twice
    for index in dict.fromkeys(day_indexes):
        day_name = WEEKDAY_NAMES[index]
        study_date = resolve_study_date(day_name, now)
        day_sessions, remaining = allocate_day(
            ranked, daily_hours, at_time(study_date, hour, minute), break_minutes
        )
        result.sessions.extend(day_sessions)
        result.remaining_hours[day_name] = remaining

    logger.debug(
        f"Generated {len(result.sessions)} sessions over {len(result.remaining_hours)} days"
    )
    return result
