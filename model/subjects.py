from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    DateTime,
    Enum,
    ForeignKey,
    UniqueConstraint,
    UUID,
)
from sqlalchemy.orm import relationship
from core.setup import Base
from util.enum import Difficulty, Priority


class Subject(Base):
    """A subject the user studies, with the history metrics used for scoring."""

    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(UUID(), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    difficulty = Column(Enum(Difficulty), nullable=False)
    priority = Column(Enum(Priority), nullable=False)

    last_studied = Column(DateTime, nullable=False, default=datetime.now)
    total_hours = Column(Float, nullable=False, default=0.0)

    # Weekly skip counter plus the week it was counted in
    skips_this_week = Column(Integer, nullable=False, default=0)
    skips_week_number = Column(Integer, nullable=True)
    skips_year = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.now)

    skipped_sessions = relationship(
        "SkipRecord",
        back_populates="subject",
        cascade="all, delete-orphan",
        order_by="SkipRecord.id",
    )


class SkipRecord(Base):
    """One missed session in a subject's skip history."""

    __tablename__ = "skip_records"

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    session_id = Column(Integer, nullable=False)
    scheduled_time = Column(DateTime, nullable=False)
    day_of_week = Column(String(10), nullable=False)
    week_number = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    subject = relationship("Subject", back_populates="skipped_sessions")

    # A session is counted against its subject at most once
    __table_args__ = (
        UniqueConstraint("subject_id", "session_id", name="_subject_session_skip_uc"),
    )
