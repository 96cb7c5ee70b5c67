from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from util.enum import SessionStatus
from util.week import parse_start_time, weekday_index, WEEKDAY_NAMES


def _check_weekday(value: str) -> str:
    index = weekday_index(value)
    if index is None:
        raise ValueError(
            f"'{value}' is not a weekday, expected one of {', '.join(WEEKDAY_NAMES)}")
    return WEEKDAY_NAMES[index]


def _check_start_time(value: str) -> str:
    if parse_start_time(value) is None:
        raise ValueError(f"'{value}' is not a valid time, expected HH:MM")
    return value.strip()


class SessionDraft(BaseModel):
    """A session produced by generation, template replay or a manual add,
    not yet attached to a plan."""
    id: Optional[int] = None
    subject_id: int
    subject_name: str
    scheduled_start: datetime
    scheduled_end: datetime
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    allocated: float
    completed: bool = False
    status: SessionStatus = SessionStatus.scheduled


class StudySessionOut(BaseModel):
    id: int
    subject_id: int
    subject_name: str
    scheduled_start: datetime
    scheduled_end: datetime
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    allocated: float
    completed: bool
    status: SessionStatus

    class Config:
        from_attributes = True


class StudyPlanOut(BaseModel):
    id: Optional[int] = None
    week_number: Optional[int] = None
    year: Optional[int] = None
    sessions: List[StudySessionOut] = []


class PlanGenerateIn(BaseModel):
    hours: float = Field(le=24)  # per study day
    start_time: str
    days_of_week: List[str] = Field(min_length=1)

    @field_validator("start_time")
    @classmethod
    def check_start_time(cls, v: str) -> str:
        return _check_start_time(v)

    @field_validator("days_of_week")
    @classmethod
    def check_days(cls, v: List[str]) -> List[str]:
        return [_check_weekday(day) for day in v]


class SessionCreateIn(BaseModel):
    subject_id: int
    day: str
    time: str
    duration: float  # hours

    @field_validator("day")
    @classmethod
    def check_day(cls, v: str) -> str:
        return _check_weekday(v)

    @field_validator("time")
    @classmethod
    def check_time(cls, v: str) -> str:
        return _check_start_time(v)


class SessionDurationIn(BaseModel):
    duration: float  # hours


class DurationUpdateOut(BaseModel):
    message: str
    session: StudySessionOut
    old_duration: float
    new_duration: float


class ClearPlanOut(BaseModel):
    message: str
    deleted: int
