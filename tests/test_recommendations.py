from datetime import timedelta

from service.recommendations import rank_recommendations, rank_static_recommendations
from tests.conftest import MONDAY_MORNING, make_session, make_subject
from util.enum import Difficulty, Priority, SessionStatus


def test_missed_session_moves_subject_to_the_top():
    now = MONDAY_MORNING.replace(hour=12)
    art = make_subject(1, "Art", Difficulty.easy, Priority.high)
    math = make_subject(2, "Math", Difficulty.hard, Priority.low)
    sessions = [
        make_session(1, math, now.replace(hour=8)),
        make_session(2, art, now.replace(hour=18)),
    ]

    ranked = rank_recommendations([art, math], sessions, now)

    top = ranked.ranking[0]
    assert top.subject is math
    assert top.skips_this_week == 1
    assert top.today_skips == 1
    assert top.completion_rate == 0
    assert sessions[0].status == SessionStatus.skipped
    assert len(ranked.events) == 1


def test_ranking_is_stable_without_history():
    now = MONDAY_MORNING
    subjects = [make_subject(1, "Art"), make_subject(2, "Math"), make_subject(3, "History")]

    ranked = rank_recommendations(subjects, [], now)

    assert [r.subject.name for r in ranked.ranking] == ["Art", "Math", "History"]
    assert all(r.score == 0 for r in ranked.ranking)


def test_stale_weekly_skips_do_not_count():
    now = MONDAY_MORNING
    stale = make_subject(1, "Math", skips_this_week=5, week=(1, 2024))
    ranked = rank_recommendations([stale], [], now)
    assert ranked.ranking[0].skips_this_week == 0
    assert ranked.ranking[0].score == 0


def test_static_recommendations_prefer_neglected_subjects():
    now = MONDAY_MORNING
    fresh = make_subject(1, "Art", last_studied=now)
    idle = make_subject(2, "Math", last_studied=now - timedelta(days=4))

    ranked = rank_static_recommendations([fresh, idle], now)

    assert [r.subject.name for r in ranked] == ["Math", "Art"]
    assert ranked[0].days_since_studied == 4
    assert ranked[1].days_since_studied == 0
