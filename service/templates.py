from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence, Tuple

from schema.study_plans import SessionDraft
from service.scheduler import build_session_draft
from util.week import at_time, format_start_time, parse_start_time, resolve_study_date, weekday_name


@dataclass
class SessionPattern:
    """A session stripped of its calendar date."""

    subject_id: int
    subject_name: str
    day_of_week: str
    start_time: str
    duration: float


def session_to_pattern(session) -> SessionPattern:
    return SessionPattern(
        subject_id=session.subject_id,
        subject_name=session.subject_name,
        day_of_week=weekday_name(session.scheduled_start),
        start_time=format_start_time(session.scheduled_start),
        duration=session.allocated,
    )


def sessions_to_template(sessions: Sequence) -> Tuple[List[SessionPattern], float]:
    """Patterns for every session plus the total weekly hours they cover."""
    patterns = [session_to_pattern(session) for session in sessions]
    return patterns, sum(p.duration for p in patterns)


def template_to_drafts(patterns: Sequence, now: datetime) -> List[SessionDraft]:
    """Replay patterns onto the next occurrence of each weekday."""
    drafts = []
    for pattern in patterns:
        hour, minute = parse_start_time(pattern.start_time)
        study_date = resolve_study_date(pattern.day_of_week, now)
        drafts.append(
            build_session_draft(
                pattern.subject_id,
                pattern.subject_name,
                at_time(study_date, hour, minute),
                pattern.duration,
            )
        )
    return drafts
