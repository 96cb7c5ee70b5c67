from datetime import datetime
from typing import Optional
from uuid import UUID

from controller.study_plans import StudyPlanController
from core.db import CreateDBSession
from model.study_plans import StudyPlan, StudySession
from schema.progress import StreakOut, StudyStatsOut, WeeklyProgressOut
from schema.study_plans import StudySessionOut
from service.progress import study_stats, study_streak, weekly_progress


class ProgressOp:

    @staticmethod
    def _all_sessions(db, user_id: UUID):
        return db.query(StudySession).join(StudyPlan).filter(
            StudyPlan.user_id == user_id
        ).order_by(StudySession.scheduled_start).all()

    @staticmethod
    def weekly(user_id: UUID, now: Optional[datetime] = None) -> WeeklyProgressOut:
        now = now or datetime.now()
        with CreateDBSession() as db:
            plan, _, _ = StudyPlanController.sync_week(db, user_id, now)
            progress = weekly_progress(plan.sessions if plan else [])
            progress["sessions"] = [StudySessionOut.model_validate(s) for s in progress["sessions"]]
            return WeeklyProgressOut(**progress)

    @staticmethod
    def streak(user_id: UUID, now: Optional[datetime] = None) -> StreakOut:
        now = now or datetime.now()
        with CreateDBSession() as db:
            current, best = study_streak(ProgressOp._all_sessions(db, user_id), now)
            return StreakOut(streak=current, best_streak=best)

    @staticmethod
    def stats(user_id: UUID, now: Optional[datetime] = None) -> StudyStatsOut:
        """Totals across every plan the user has had."""
        now = now or datetime.now()
        with CreateDBSession() as db:
            _, subjects, _ = StudyPlanController.sync_week(db, user_id, now)
            return StudyStatsOut(**study_stats(subjects, ProgressOp._all_sessions(db, user_id)))
