from pydantic import BaseModel
from typing import Dict, List
from schema.study_plans import StudySessionOut


class WeeklyProgressOut(BaseModel):
    total: int
    completed: int
    percentage: int
    sessions: List[StudySessionOut]


class StreakOut(BaseModel):
    streak: int
    best_streak: int


class StudyStatsOut(BaseModel):
    total_hours: float
    completion_rate: int  # percent
    active_subjects: int
    hours_by_weekday: Dict[str, float]
    hours_by_subject: Dict[str, float]
