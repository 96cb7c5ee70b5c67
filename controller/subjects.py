import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from controller.study_plans import StudyPlanController
from core.db import CreateDBSession
from model.subjects import Subject
from schema import SuccessOut
from schema.subjects import (
    AdaptiveRecommendationOut,
    RecommendationOut,
    SubjectIn,
    SubjectOut,
    SubjectUpdate,
)
from service.recommendations import rank_recommendations, rank_static_recommendations
import error

logger = logging.getLogger(__name__)


class SubjectOp:

    @staticmethod
    def list_subjects(user_id: UUID) -> List[SubjectOut]:
        with CreateDBSession() as db:
            subjects = db.query(Subject).filter(
                Subject.user_id == user_id
            ).order_by(Subject.id).all()
            return [SubjectOut.model_validate(s) for s in subjects]

    @staticmethod
    def create_subject(user_id: UUID, data: SubjectIn) -> SubjectOut:
        with CreateDBSession() as db:
            subject = Subject(
                user_id=user_id,
                name=data.name,
                difficulty=data.difficulty,
                priority=data.priority,
                last_studied=datetime.now(),
            )
            db.add(subject)
            db.commit()
            db.refresh(subject)

            logger.info(f"User {user_id} added subject {subject.id} ({subject.name})")
            return SubjectOut.model_validate(subject)

    @staticmethod
    def _get_subject(db, user_id: UUID, subject_id: int) -> Subject:
        subject = db.query(Subject).filter(
            Subject.id == subject_id,
            Subject.user_id == user_id,
        ).first()
        if not subject:
            raise error.ResourceNotFoundError(f"Subject {subject_id} not found")
        return subject

    @staticmethod
    def update_subject(user_id: UUID, subject_id: int, data: SubjectUpdate) -> SubjectOut:
        with CreateDBSession() as db:
            subject = SubjectOp._get_subject(db, user_id, subject_id)

            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            if "name" in changes:
                changes["name"] = changes["name"].strip()
                if not changes["name"]:
                    raise error.InvalidRequestError("Subject name must not be blank")
            for field, value in changes.items():
                setattr(subject, field, value)

            db.commit()
            db.refresh(subject)
            return SubjectOut.model_validate(subject)

    @staticmethod
    def delete_subject(user_id: UUID, subject_id: int) -> SuccessOut:
        """Remove a subject; sessions already planned for it are left in place."""
        with CreateDBSession() as db:
            subject = SubjectOp._get_subject(db, user_id, subject_id)
            db.delete(subject)
            db.commit()
            return SuccessOut(message="Subject deleted successfully")

    @staticmethod
    def get_recommendations(user_id: UUID, now: Optional[datetime] = None) -> List[RecommendationOut]:
        now = now or datetime.now()
        with CreateDBSession() as db:
            _, subjects, _ = StudyPlanController.sync_week(db, user_id, now)
            return [
                RecommendationOut(
                    subject=SubjectOut.model_validate(rec.subject),
                    recommendation_score=rec.score,
                    days_since_studied=rec.days_since_studied,
                )
                for rec in rank_static_recommendations(subjects, now)
            ]

    @staticmethod
    def get_adaptive_recommendations(user_id: UUID, now: Optional[datetime] = None) -> List[AdaptiveRecommendationOut]:
        """Rank subjects for "what should I study now", reacting to this week's skips."""
        now = now or datetime.now()
        with CreateDBSession() as db:
            plan = StudyPlanController.find_week_plan(db, user_id, now)
            subjects = StudyPlanController.user_subjects(db, user_id)

            ranked = rank_recommendations(subjects, plan.sessions if plan else [], now)
            db.commit()

            if ranked.events:
                logger.info(f"User {user_id}: {len(ranked.events)} session transitions before ranking")

            return [
                AdaptiveRecommendationOut(
                    subject=SubjectOut.model_validate(rec.subject),
                    recommendation_score=rec.score,
                    skips_this_week=rec.skips_this_week,
                    completion_rate=rec.completion_rate,
                    today_skips=rec.today_skips,
                )
                for rec in ranked.ranking
            ]
