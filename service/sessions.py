"""
Session lifecycle
=================

    scheduled -> active -> completed
    scheduled/active -> skipped

completed and skipped are terminal. Automatic transitions are pull based:
callers re-run evaluate_session_states() with the current time whenever a
schedule or a recommendation is requested. Completion only ever happens
through complete_session().
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from model.subjects import SkipRecord
from util.enum import SessionEventType, SessionStatus
from util.week import week_key, week_number, weekday_name

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = (SessionStatus.completed, SessionStatus.skipped)


@dataclass
class SessionEvent:
    type: SessionEventType
    session_id: Optional[int]
    subject_id: int


@dataclass
class StateEvaluation:
    sessions: List = field(default_factory=list)
    events: List[SessionEvent] = field(default_factory=list)

    @property
    def skipped(self) -> List[SessionEvent]:
        return [e for e in self.events if e.type == SessionEventType.skipped]


def is_terminal(session) -> bool:
    return session.status in TERMINAL_STATUSES


def next_status(session, now: datetime) -> SessionStatus:
    """Status the session should have at `now`, ignoring explicit completion."""
    if is_terminal(session):
        return SessionStatus(session.status)
    if now > session.scheduled_end:
        return SessionStatus.skipped
    if session.status == SessionStatus.scheduled and session.scheduled_start <= now:
        return SessionStatus.active
    return SessionStatus(session.status)


def evaluate_session_states(sessions: Sequence, now: datetime) -> StateEvaluation:
    """Bring every session's status up to date with `now`, in place.

    An event is emitted only when a status actually changes, so running the
    pass again with the same `now` emits nothing.
    """
    evaluation = StateEvaluation(sessions=list(sessions))

    for session in evaluation.sessions:
        status = next_status(session, now)
        if status == session.status:
            continue

        session.status = status
        if status == SessionStatus.active:
            session.actual_start = now
            event_type = SessionEventType.activated
        else:
            event_type = SessionEventType.skipped

        logger.info(
            f"Session {session.id} ({session.subject_name}) is now {status.value}"
        )
        evaluation.events.append(
            SessionEvent(type=event_type, session_id=session.id, subject_id=session.subject_id)
        )

    return evaluation


def complete_session(session, now: datetime):
    """Explicit completion; only valid from scheduled or active."""
    if is_terminal(session):
        raise ValueError(f"Session {session.id} is already {SessionStatus(session.status).value}")
    session.status = SessionStatus.completed
    session.completed = True
    session.actual_end = now
    return session


def reset_weekly_skips(subject, now: datetime) -> bool:
    """Zero the skip counter once the week it was counted in has passed."""
    current_week, current_year = week_key(now)
    if subject.skips_week_number == current_week and subject.skips_year == current_year:
        return False

    reset = bool(subject.skips_this_week)
    subject.skips_this_week = 0
    subject.skips_week_number = current_week
    subject.skips_year = current_year
    return reset


def apply_skip(subject, session, now: datetime) -> bool:
    """Count a skipped session against its subject, at most once per session."""
    if session.id is not None and any(
        record.session_id == session.id for record in subject.skipped_sessions
    ):
        return False

    reset_weekly_skips(subject, now)
    subject.skips_this_week = (subject.skips_this_week or 0) + 1
    subject.skipped_sessions.append(
        SkipRecord(
            session_id=session.id,
            scheduled_time=session.scheduled_start,
            day_of_week=weekday_name(session.scheduled_start),
            week_number=week_number(session.scheduled_start),
        )
    )
    return True


def apply_completion(subject, session, now: datetime) -> None:
    subject.total_hours = (subject.total_hours or 0) + session.allocated
    subject.last_studied = now


def apply_session_events(
    events: Iterable[SessionEvent],
    subjects: Iterable,
    sessions: Iterable,
    now: datetime,
) -> int:
    """Apply the skip side effects of an evaluation pass; returns skips counted."""
    subjects_by_id: Dict[int, object] = {s.id: s for s in subjects}
    sessions_by_id: Dict[int, object] = {s.id: s for s in sessions}
    counted = 0

    for event in events:
        if event.type != SessionEventType.skipped:
            continue
        subject = subjects_by_id.get(event.subject_id)
        session = sessions_by_id.get(event.session_id)
        if subject is None or session is None:
            # Subject deleted after the session was planned
            logger.debug(f"No subject {event.subject_id} to record skip of session {event.session_id}")
            continue
        if apply_skip(subject, session, now):
            counted += 1

    return counted
