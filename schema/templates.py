from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from schema.study_plans import StudyPlanOut


class TemplateSaveIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = ""


class TemplateSessionOut(BaseModel):
    subject_id: int
    subject_name: str
    day_of_week: str
    start_time: str
    duration: float

    class Config:
        from_attributes = True


class TemplateOut(BaseModel):
    id: int
    name: str
    description: str
    total_hours_per_week: float
    created_at: Optional[datetime] = None
    sessions: List[TemplateSessionOut]

    class Config:
        from_attributes = True


class TemplateLoadOut(BaseModel):
    message: str
    plan: StudyPlanOut
