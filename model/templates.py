from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Text,
    Float,
    Integer,
    DateTime,
    ForeignKey,
    UUID,
)
from sqlalchemy.orm import relationship
from core.setup import Base


class Template(Base):
    """A reusable weekly pattern of sessions, independent of any plan."""

    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(UUID(), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    total_hours_per_week = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, default=datetime.now)

    sessions = relationship(
        "TemplateSession",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateSession.id",
    )


class TemplateSession(Base):
    """Day-of-week + time-of-day + duration, replayable onto any week."""

    __tablename__ = "template_sessions"

    id = Column(Integer, primary_key=True, index=True)
    template_id = Column(Integer, ForeignKey("templates.id"), nullable=False, index=True)
    subject_id = Column(Integer, nullable=False)
    subject_name = Column(String(255), nullable=False)
    day_of_week = Column(String(10), nullable=False)
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    duration = Column(Float, nullable=False)  # hours

    template = relationship("Template", back_populates="sessions")
