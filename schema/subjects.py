from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from util.enum import Difficulty, Priority


class SubjectIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    difficulty: Difficulty
    priority: Priority

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Subject name must not be blank")
        return v


class SubjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    difficulty: Optional[Difficulty] = None
    priority: Optional[Priority] = None


class SubjectOut(BaseModel):
    id: int
    name: str
    difficulty: Difficulty
    priority: Priority
    last_studied: datetime
    total_hours: float
    skips_this_week: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecommendationOut(BaseModel):
    subject: SubjectOut
    recommendation_score: float
    days_since_studied: int


class AdaptiveRecommendationOut(BaseModel):
    subject: SubjectOut
    recommendation_score: float
    skips_this_week: int
    completion_rate: int  # percent
    today_skips: int
