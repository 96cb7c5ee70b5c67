from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Boolean,
    Integer,
    DateTime,
    Enum,
    ForeignKey,
    UniqueConstraint,
    UUID,
)
from sqlalchemy.orm import relationship
from core.setup import Base
from util.enum import SessionStatus


class StudyPlan(Base):
    """Represents a weekly study plan for a user."""
    __tablename__ = "study_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(UUID(), nullable=False, index=True)
    week_number = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    # Insertion order; callers sort by scheduled_start for display
    sessions = relationship(
        "StudySession",
        back_populates="study_plan",
        cascade="all, delete-orphan",
        order_by="StudySession.id",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "week_number", "year", name="_user_week_plan_uc"),
    )


class StudySession(Base):
    """A time-boxed block for one subject within a study plan."""
    __tablename__ = "study_sessions"
    # Skip records key on session ids, so SQLite must never hand one out twice
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    study_plan_id = Column(Integer, ForeignKey(
        "study_plans.id"), nullable=False, index=True)

    # Weak reference; the name is a snapshot taken at creation time
    subject_id = Column(Integer, nullable=False, index=True)
    subject_name = Column(String(255), nullable=False)

    scheduled_start = Column(DateTime, nullable=False)
    scheduled_end = Column(DateTime, nullable=False)
    actual_start = Column(DateTime, nullable=True)
    actual_end = Column(DateTime, nullable=True)
    allocated = Column(Float, nullable=False)  # hours
    completed = Column(Boolean, nullable=False, default=False)
    status = Column(Enum(SessionStatus), nullable=False,
                    default=SessionStatus.scheduled)

    study_plan = relationship("StudyPlan", back_populates="sessions")
