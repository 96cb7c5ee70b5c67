import uuid
from datetime import datetime, timedelta

import pytest

from core.db import CreateDBSession
from model.study_plans import StudyPlan, StudySession
from tests.conftest import auth_headers
from util.enum import SessionStatus
from util.week import week_key, weekday_name

API = "/api/v1"


def tomorrow_name():
    return weekday_name(datetime.now() + timedelta(days=1))


@pytest.fixture
def subjects(client, headers):
    created = {}
    for name, difficulty, priority in [("Math", "hard", "high"), ("Art", "easy", "low")]:
        response = client.post(
            f"{API}/subjects",
            json={"name": name, "difficulty": difficulty, "priority": priority},
            headers=headers,
        )
        assert response.status_code == 201
        created[name] = response.json()
    return created


@pytest.fixture
def plan(client, headers, subjects):
    response = client.post(
        f"{API}/plans/generate",
        json={"hours": 3, "start_time": "18:00", "days_of_week": [tomorrow_name()]},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_requests_need_a_token(client):
    assert client.get(f"{API}/subjects").status_code in (401, 403)
    response = client.get(f"{API}/subjects", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_subject_crud(client, headers, subjects):
    math_id = subjects["Math"]["id"]
    assert subjects["Math"]["skips_this_week"] == 0
    assert subjects["Math"]["total_hours"] == 0

    response = client.put(f"{API}/subjects/{math_id}", json={"priority": "low"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["priority"] == "low"
    assert response.json()["name"] == "Math"

    assert client.delete(f"{API}/subjects/{math_id}", headers=headers).status_code == 200
    assert client.delete(f"{API}/subjects/{math_id}", headers=headers).status_code == 404
    names = [s["name"] for s in client.get(f"{API}/subjects", headers=headers).json()]
    assert names == ["Art"]


def test_blank_subject_name_is_rejected(client, headers):
    response = client.post(
        f"{API}/subjects",
        json={"name": "   ", "difficulty": "easy", "priority": "low"},
        headers=headers,
    )
    assert response.status_code == 422
    assert "name" in response.json()["message"]


def test_subjects_are_private(client, headers, subjects):
    other = auth_headers(uuid.uuid4())
    assert client.get(f"{API}/subjects", headers=other).json() == []
    math_id = subjects["Math"]["id"]
    assert client.delete(f"{API}/subjects/{math_id}", headers=other).status_code == 404


def test_generate_without_subjects(client, headers):
    response = client.post(
        f"{API}/plans/generate",
        json={"hours": 3, "start_time": "18:00", "days_of_week": ["Monday"]},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("No subjects found")


@pytest.mark.parametrize(
    "payload",
    [
        {"hours": 3, "start_time": "25:00", "days_of_week": ["Monday"]},
        {"hours": 3, "start_time": "18:00", "days_of_week": ["Someday"]},
        {"hours": 3, "start_time": "18:00", "days_of_week": []},
        {"hours": 30, "start_time": "18:00", "days_of_week": ["Monday"]},
    ],
)
def test_generate_rejects_bad_input(client, headers, subjects, payload):
    response = client.post(f"{API}/plans/generate", json=payload, headers=headers)
    assert response.status_code == 422
    assert client.get(f"{API}/plans/current", headers=headers).json()["sessions"] == []


def test_generate_with_no_hours_creates_nothing(client, headers, subjects):
    response = client.post(
        f"{API}/plans/generate",
        json={"hours": 0, "start_time": "18:00", "days_of_week": ["Monday"]},
        headers=headers,
    )
    assert response.status_code == 400
    assert client.get(f"{API}/plans/current", headers=headers).json()["id"] is None


def test_generate_plan(client, headers, plan):
    week_number, year = week_key(datetime.now())
    assert (plan["week_number"], plan["year"]) == (week_number, year)

    math, art = plan["sessions"]
    assert (math["subject_name"], math["allocated"]) == ("Math", 2)
    assert (art["subject_name"], art["allocated"]) == ("Art", 1)
    assert math["scheduled_start"].endswith("18:00:00")
    assert art["scheduled_start"].endswith("20:10:00")
    assert all(s["status"] == "scheduled" for s in plan["sessions"])

    current = client.get(f"{API}/plans/current", headers=headers).json()
    assert [s["id"] for s in current["sessions"]] == [math["id"], art["id"]]


def test_generate_twice_conflicts(client, headers, plan):
    response = client.post(
        f"{API}/plans/generate",
        json={"hours": 2, "start_time": "09:00", "days_of_week": ["Monday"]},
        headers=headers,
    )
    assert response.status_code == 409


def test_complete_session(client, headers, plan, subjects):
    session_id = plan["sessions"][0]["id"]

    response = client.post(f"{API}/plans/sessions/{session_id}/complete", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["completed"] is True

    again = client.post(f"{API}/plans/sessions/{session_id}/complete", headers=headers)
    assert again.status_code == 409

    math = next(s for s in client.get(f"{API}/subjects", headers=headers).json() if s["name"] == "Math")
    assert math["total_hours"] == 2

    progress = client.get(f"{API}/progress/weekly", headers=headers).json()
    assert (progress["total"], progress["completed"], progress["percentage"]) == (2, 1, 50)
    assert client.get(f"{API}/progress/streak", headers=headers).json()["streak"] == 1
    stats = client.get(f"{API}/progress/stats", headers=headers).json()
    assert stats["total_hours"] == 2
    assert stats["hours_by_subject"] == {"Math": 2}


def test_other_users_cannot_touch_sessions(client, plan):
    session_id = plan["sessions"][0]["id"]
    other = auth_headers(uuid.uuid4())
    assert client.post(f"{API}/plans/sessions/{session_id}/complete", headers=other).status_code == 404
    assert client.delete(f"{API}/plans/sessions/{session_id}", headers=other).status_code == 404


def test_update_duration(client, headers, plan):
    session = plan["sessions"][1]

    too_short = client.put(
        f"{API}/plans/sessions/{session['id']}/duration", json={"duration": 0.25}, headers=headers
    )
    assert too_short.status_code == 400

    response = client.put(
        f"{API}/plans/sessions/{session['id']}/duration", json={"duration": 1.5}, headers=headers
    )
    assert response.status_code == 200
    body = response.json()
    assert (body["old_duration"], body["new_duration"]) == (1, 1.5)
    start = datetime.fromisoformat(body["session"]["scheduled_start"])
    end = datetime.fromisoformat(body["session"]["scheduled_end"])
    assert end - start == timedelta(hours=1.5)


def test_delete_session_and_clear_week(client, headers, plan):
    session_id = plan["sessions"][0]["id"]
    assert client.delete(f"{API}/plans/sessions/{session_id}", headers=headers).status_code == 200
    assert client.delete(f"{API}/plans/sessions/{session_id}", headers=headers).status_code == 404

    cleared = client.delete(f"{API}/plans/current", headers=headers).json()
    assert cleared["deleted"] == 1
    assert client.delete(f"{API}/plans/current", headers=headers).json()["deleted"] == 0


def test_add_session_creates_plan(client, headers, subjects):
    response = client.post(
        f"{API}/plans/sessions",
        json={"subject_id": subjects["Art"]["id"], "day": tomorrow_name().lower(), "time": "07:30", "duration": 1},
        headers=headers,
    )
    assert response.status_code == 201
    sessions = response.json()["sessions"]
    assert len(sessions) == 1
    assert sessions[0]["subject_name"] == "Art"
    assert sessions[0]["scheduled_start"].endswith("07:30:00")


@pytest.mark.parametrize(
    "changes, status_code",
    [
        ({"subject_id": 9999}, 404),
        ({"day": "Someday"}, 422),
        ({"time": "7pm"}, 422),
        ({"duration": 0}, 400),
    ],
)
def test_add_session_validation(client, headers, subjects, changes, status_code):
    payload = {"subject_id": subjects["Art"]["id"], "day": "Monday", "time": "07:30", "duration": 1}
    payload.update(changes)
    response = client.post(f"{API}/plans/sessions", json=payload, headers=headers)
    assert response.status_code == status_code


def test_templates_round_trip(client, headers, plan):
    saved = client.post(f"{API}/templates/save", json={"name": "Evenings"}, headers=headers)
    assert saved.status_code == 201
    template = saved.json()
    assert template["total_hours_per_week"] == 3
    assert [(s["start_time"], s["duration"]) for s in template["sessions"]] == [("18:00", 2), ("20:10", 1)]

    listed = client.get(f"{API}/templates", headers=headers).json()
    assert [t["name"] for t in listed] == ["Evenings"]

    blocked = client.post(f"{API}/templates/{template['id']}/load", headers=headers)
    assert blocked.status_code == 409

    client.delete(f"{API}/plans/current", headers=headers)
    loaded = client.post(f"{API}/templates/{template['id']}/load", headers=headers)
    assert loaded.status_code == 201
    sessions = loaded.json()["plan"]["sessions"]
    assert [(s["subject_name"], s["allocated"]) for s in sessions] == [("Math", 2), ("Art", 1)]

    assert client.delete(f"{API}/templates/{template['id']}", headers=headers).status_code == 200
    assert client.get(f"{API}/templates", headers=headers).json() == []
    assert client.post(f"{API}/templates/{template['id']}/load", headers=headers).status_code == 404


def test_save_template_without_plan(client, headers):
    response = client.post(f"{API}/templates/save", json={"name": "Empty"}, headers=headers)
    assert response.status_code == 400


def add_missed_session(user_id, subject):
    """Store a plan for this week holding one session that already ended."""
    now = datetime.now()
    week_number, year = week_key(now)
    with CreateDBSession() as db:
        db.add(
            StudyPlan(
                user_id=user_id,
                week_number=week_number,
                year=year,
                sessions=[
                    StudySession(
                        subject_id=subject["id"],
                        subject_name=subject["name"],
                        scheduled_start=now - timedelta(hours=2),
                        scheduled_end=now - timedelta(hours=1),
                        allocated=1,
                        completed=False,
                        status=SessionStatus.scheduled,
                    )
                ],
            )
        )
        db.commit()


def test_missed_session_is_skipped_once(client, headers, user_id, subjects):
    add_missed_session(user_id, subjects["Math"])

    for _ in range(2):
        ranking = client.get(f"{API}/subjects/recommendations/adaptive", headers=headers).json()
        assert ranking[0]["subject"]["name"] == "Math"
        assert ranking[0]["skips_this_week"] == 1
        assert ranking[0]["completion_rate"] == 0

    current = client.get(f"{API}/plans/current", headers=headers).json()
    assert current["sessions"][0]["status"] == "skipped"
    session_id = current["sessions"][0]["id"]
    assert client.post(f"{API}/plans/sessions/{session_id}/complete", headers=headers).status_code == 409

    static = client.get(f"{API}/subjects/recommendations", headers=headers).json()
    assert static[0]["subject"]["name"] == "Math"
    assert static[0]["subject"]["skips_this_week"] == 1


def skips_of(client, headers, name):
    return next(
        s["skips_this_week"] for s in client.get(f"{API}/subjects", headers=headers).json() if s["name"] == name
    )


def test_skip_counted_again_after_week_is_cleared(client, headers, user_id, subjects):
    add_missed_session(user_id, subjects["Math"])
    first = client.get(f"{API}/plans/current", headers=headers).json()["sessions"]
    assert first[0]["status"] == "skipped"
    assert client.delete(f"{API}/plans/current", headers=headers).json()["deleted"] == 1

    add_missed_session(user_id, subjects["Math"])
    second = client.get(f"{API}/plans/current", headers=headers).json()["sessions"]

    assert second[0]["id"] != first[0]["id"]
    assert second[0]["status"] == "skipped"
    assert skips_of(client, headers, "Math") == 2


def test_skip_after_another_user_cleared_their_week(client, headers, user_id, subjects):
    add_missed_session(user_id, subjects["Math"])
    client.get(f"{API}/plans/current", headers=headers)
    client.delete(f"{API}/plans/current", headers=headers)

    other_id = uuid.uuid4()
    other = auth_headers(other_id)
    physics = client.post(
        f"{API}/subjects",
        json={"name": "Physics", "difficulty": "medium", "priority": "high"},
        headers=other,
    ).json()
    add_missed_session(other_id, physics)

    current = client.get(f"{API}/plans/current", headers=other)
    assert current.status_code == 200
    assert current.json()["sessions"][0]["status"] == "skipped"
    assert client.get(f"{API}/progress/weekly", headers=other).status_code == 200
    assert client.get(f"{API}/subjects/recommendations", headers=other).status_code == 200
    assert skips_of(client, other, "Physics") == 1
