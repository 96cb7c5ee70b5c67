"""
Subject scoring strategies
==========================

Three formulas rank subjects for different purposes and are kept apart on
purpose:

- generation: static weight used to order subjects when a week is generated
- recommendation: "what should I study next" from recency, balance and skips
- adaptive: live "study now" ranking driven by this week's session outcomes

Every function here is pure. Subjects and sessions only need the attributes
read below, so ORM rows and pydantic schemas are both accepted.
"""

import math
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, TypeVar

from util.enum import Difficulty, Priority, ScoringStrategy, SessionStatus

T = TypeVar("T")

# Generation weights
GENERATION_DIFFICULTY_WEIGHTS = {
    Difficulty.easy: 1,
    Difficulty.medium: 2,
    Difficulty.hard: 3,
}
GENERATION_PRIORITY_WEIGHTS = {
    Priority.low: 0.8,
    Priority.medium: 1.0,
    Priority.high: 1.2,
}

# Recommendation weights
RECOMMENDATION_PRIORITY_MULTIPLIERS = {
    Priority.high: 1.5,
    Priority.medium: 1.0,
    Priority.low: 0.7,
}
RECOMMENDATION_DIFFICULTY_BONUS = {
    Difficulty.hard: 15,
    Difficulty.medium: 5,
    Difficulty.easy: 0,
}
POINTS_PER_IDLE_DAY = 10
POINTS_PER_HOUR_BEHIND = 5
POINTS_PER_SKIP = 50

# Adaptive weights
ADAPTIVE_PRIORITY_MULTIPLIERS = {
    Priority.high: 1.3,
    Priority.medium: 1.0,
    Priority.low: 0.8,
}
ADAPTIVE_POINTS_PER_SKIP = 100
ADAPTIVE_SKIPPED_TODAY_BONUS = 150
ADAPTIVE_LOW_COMPLETION_BONUS = 80
ADAPTIVE_LOW_COMPLETION_THRESHOLD = 0.5
ADAPTIVE_REPEAT_DAMPING = 0.3
ADAPTIVE_REPEAT_THRESHOLD = 2

SECONDS_PER_DAY = 86400


def days_since_last_studied(last_studied: datetime, now: datetime) -> int:
    """Whole elapsed days on the wall clock, not calendar-day boundaries."""
    if last_studied is None:
        return 0
    elapsed = (now - last_studied).total_seconds()
    return max(0, math.floor(elapsed / SECONDS_PER_DAY))


def compute_generation_score(subject) -> float:
    """difficulty weight x priority weight"""
    return (
        GENERATION_DIFFICULTY_WEIGHTS.get(subject.difficulty, 1)
        * GENERATION_PRIORITY_WEIGHTS.get(subject.priority, 1.0)
    )


def compute_recommendation_score(subject, all_subjects: Sequence, now: datetime) -> float:
    """Recency, balance against the average workload, difficulty and skips."""
    score = days_since_last_studied(subject.last_studied, now) * POINTS_PER_IDLE_DAY
    score *= RECOMMENDATION_PRIORITY_MULTIPLIERS.get(subject.priority, 1.0)

    average_hours = (
        sum(s.total_hours or 0 for s in all_subjects) / len(all_subjects)
        if all_subjects
        else subject.total_hours or 0
    )
    total_hours = subject.total_hours or 0
    if total_hours < average_hours:
        score += (average_hours - total_hours) * POINTS_PER_HOUR_BEHIND

    score += RECOMMENDATION_DIFFICULTY_BONUS.get(subject.difficulty, 0)
    score += (subject.skips_this_week or 0) * POINTS_PER_SKIP
    return score


def subject_week_sessions(subject, week_sessions: Iterable) -> List:
    return [s for s in week_sessions if s.subject_id == subject.id]


def _is_today(session, now: datetime) -> bool:
    return session.scheduled_start.date() == now.date()


def completion_rate(sessions: Sequence) -> float:
    """Completed / planned; 0 when nothing is planned."""
    if not sessions:
        return 0.0
    completed = sum(1 for s in sessions if s.status == SessionStatus.completed)
    return completed / len(sessions)


def compute_adaptive_score(subject, week_sessions: Iterable, now: datetime) -> float:
    """Live score reacting to skips, completion rate and same-day repetition.

    week_sessions are the current week's sessions for any subject; statuses
    are expected to be freshly evaluated.
    """
    own_sessions = subject_week_sessions(subject, week_sessions)

    score = (subject.skips_this_week or 0) * ADAPTIVE_POINTS_PER_SKIP

    if any(s.status == SessionStatus.skipped and _is_today(s, now) for s in own_sessions):
        score += ADAPTIVE_SKIPPED_TODAY_BONUS

    if own_sessions and completion_rate(own_sessions) < ADAPTIVE_LOW_COMPLETION_THRESHOLD:
        score += ADAPTIVE_LOW_COMPLETION_BONUS

    score *= ADAPTIVE_PRIORITY_MULTIPLIERS.get(subject.priority, 1.0)

    completed_today = sum(
        1 for s in own_sessions if s.status == SessionStatus.completed and _is_today(s, now)
    )
    if completed_today >= ADAPTIVE_REPEAT_THRESHOLD:
        score *= ADAPTIVE_REPEAT_DAMPING

    return score


def rank_by_score(items: Sequence[T], score: Callable[[T], float]) -> List[Tuple[T, float]]:
    """Pairs (item, score) sorted descending; equal scores keep input order."""
    scored = [(item, score(item)) for item in items]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


SCORING_STRATEGIES: Dict[ScoringStrategy, Callable[..., float]] = {
    ScoringStrategy.generation: compute_generation_score,
    ScoringStrategy.recommendation: compute_recommendation_score,
    ScoringStrategy.adaptive: compute_adaptive_score,
}
