from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Sequence

from service.scoring import (
    completion_rate,
    compute_adaptive_score,
    compute_recommendation_score,
    days_since_last_studied,
    rank_by_score,
    subject_week_sessions,
)
from service.sessions import (
    SessionEvent,
    apply_session_events,
    evaluate_session_states,
    reset_weekly_skips,
)
from util.enum import SessionStatus


@dataclass
class StaticRecommendation:
    subject: object
    score: float
    days_since_studied: int


@dataclass
class AdaptiveRecommendation:
    subject: object
    score: float
    skips_this_week: int
    completion_rate: int  # percent
    today_skips: int


@dataclass
class RankedRecommendations:
    ranking: List[AdaptiveRecommendation] = field(default_factory=list)
    events: List[SessionEvent] = field(default_factory=list)


def rank_static_recommendations(subjects: Sequence, now: datetime) -> List[StaticRecommendation]:
    """Order subjects by the recommendation score, highest first."""
    ranked = rank_by_score(
        subjects, lambda subject: compute_recommendation_score(subject, subjects, now)
    )
    return [
        StaticRecommendation(
            subject=subject,
            score=score,
            days_since_studied=days_since_last_studied(subject.last_studied, now),
        )
        for subject, score in ranked
    ]


def rank_recommendations(subjects: Sequence, week_sessions: Sequence, now: datetime) -> RankedRecommendations:
    """Adaptive "study now" ranking over the current week.

    All of the week's sessions are re-evaluated first so scores never see a
    stale status; the resulting skips are counted on the given subjects
    before any of them is scored.
    """
    evaluation = evaluate_session_states(week_sessions, now)
    for subject in subjects:
        reset_weekly_skips(subject, now)
    apply_session_events(evaluation.events, subjects, evaluation.sessions, now)

    ranked = rank_by_score(
        subjects, lambda subject: compute_adaptive_score(subject, evaluation.sessions, now)
    )

    ranking = []
    for subject, score in ranked:
        own_sessions = subject_week_sessions(subject, evaluation.sessions)
        today_skips = sum(
            1
            for s in own_sessions
            if s.status == SessionStatus.skipped and s.scheduled_start.date() == now.date()
        )
        ranking.append(
            AdaptiveRecommendation(
                subject=subject,
                score=score,
                skips_this_week=subject.skips_this_week or 0,
                completion_rate=round(completion_rate(own_sessions) * 100),
                today_skips=today_skips,
            )
        )

    return RankedRecommendations(ranking=ranking, events=evaluation.events)
