import os
import uuid
from datetime import datetime, timedelta

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ALLOW_SAME_DAY_SCHEDULING"] = "true"

import pytest
from fastapi.testclient import TestClient

from core.setup import Base, database
from main import app
from model.subjects import Subject
from schema.study_plans import SessionDraft
from service.auth import TokenManager
from util.enum import Difficulty, Priority, SessionStatus

# Monday 15 January 2024, week 3 of 2024
MONDAY_MORNING = datetime(2024, 1, 15, 9, 0)


@pytest.fixture
def now():
    return MONDAY_MORNING


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=database.get_engine)
    Base.metadata.create_all(bind=database.get_engine)
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(user_id) -> dict:
    token = TokenManager.create_access_token({"user_id": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def headers(user_id):
    return auth_headers(user_id)


def make_subject(
    subject_id,
    name,
    difficulty=Difficulty.medium,
    priority=Priority.medium,
    last_studied=None,
    total_hours=0.0,
    skips_this_week=0,
    week=None,
):
    """Unsaved subject; week is the (week_number, year) the skips were counted in."""
    skips_week_number, skips_year = week or (None, None)
    return Subject(
        id=subject_id,
        name=name,
        difficulty=difficulty,
        priority=priority,
        last_studied=last_studied or MONDAY_MORNING,
        total_hours=total_hours,
        skips_this_week=skips_this_week,
        skips_week_number=skips_week_number,
        skips_year=skips_year,
    )


def make_session(session_id, subject, start, hours=1.0, status=SessionStatus.scheduled):
    return SessionDraft(
        id=session_id,
        subject_id=subject.id,
        subject_name=subject.name,
        scheduled_start=start,
        scheduled_end=start + timedelta(hours=hours),
        allocated=hours,
        completed=status == SessionStatus.completed,
        status=status,
    )
