import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

import error
from config.setting import settings
from core.db import CreateDBSession
from model.study_plans import StudyPlan, StudySession
from model.subjects import Subject
from schema.study_plans import (
    ClearPlanOut,
    DurationUpdateOut,
    PlanGenerateIn,
    SessionCreateIn,
    SessionDraft,
    StudyPlanOut,
    StudySessionOut,
)
from service.scheduler import build_session_draft, generate_schedule
from service.sessions import (
    StateEvaluation,
    apply_completion,
    apply_session_events,
    complete_session,
    evaluate_session_states,
    is_terminal,
    reset_weekly_skips,
)
from util.enum import ScheduleFailure, SessionStatus
from util.week import at_time, parse_start_time, resolve_study_date, week_key

logger = logging.getLogger(__name__)

SCHEDULE_FAILURE_MESSAGES = {
    ScheduleFailure.no_subjects: "No subjects found. Add at least one subject before generating a plan",
    ScheduleFailure.unknown_weekday: "Days of week must be weekday names such as Monday",
    ScheduleFailure.invalid_start_time: "Start time must use the HH:MM format",
}


class StudyPlanController:
    @staticmethod
    def _map_plan(plan: Optional[StudyPlan]) -> StudyPlanOut:
        """Plan with its sessions ordered by start time for display."""
        if not plan:
            return StudyPlanOut(sessions=[])

        return StudyPlanOut(
            id=plan.id,
            week_number=plan.week_number,
            year=plan.year,
            sessions=[
                StudySessionOut.model_validate(s)
                for s in sorted(plan.sessions, key=lambda s: s.scheduled_start)
            ],
        )

    @staticmethod
    def find_week_plan(db: Session, user_id: UUID, now: datetime) -> Optional[StudyPlan]:
        week_number, year = week_key(now)
        return db.query(StudyPlan).options(
            selectinload(StudyPlan.sessions)
        ).filter(
            StudyPlan.user_id == user_id,
            StudyPlan.week_number == week_number,
            StudyPlan.year == year,
        ).first()

    @staticmethod
    def user_subjects(db: Session, user_id: UUID) -> List[Subject]:
        return db.query(Subject).options(
            selectinload(Subject.skipped_sessions)
        ).filter(Subject.user_id == user_id).order_by(Subject.id).all()

    @staticmethod
    def sync_week(db: Session, user_id: UUID, now: datetime) -> Tuple[Optional[StudyPlan], List[Subject], StateEvaluation]:
        """Re-evaluate the current week's sessions and persist what changed.

        Weekly skip counters are reset before the skip side effects of this
        pass are applied, so a skip is always counted in the current week.
        """
        plan = StudyPlanController.find_week_plan(db, user_id, now)
        subjects = StudyPlanController.user_subjects(db, user_id)

        sessions = plan.sessions if plan else []
        evaluation = evaluate_session_states(sessions, now)
        for subject in subjects:
            reset_weekly_skips(subject, now)
        skipped = apply_session_events(evaluation.events, subjects, sessions, now)

        db.commit()
        if evaluation.events:
            logger.info(
                f"User {user_id}: {len(evaluation.events)} session transitions, {skipped} skips recorded"
            )
        return plan, subjects, evaluation

    @staticmethod
    def persist_plan(db: Session, user_id: UUID, now: datetime, drafts: List[SessionDraft]) -> StudyPlan:
        week_number, year = week_key(now)
        plan = StudyPlan(
            user_id=user_id,
            week_number=week_number,
            year=year,
            sessions=[StudyPlanController.session_from_draft(d) for d in drafts],
        )
        db.add(plan)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise error.ConflictError(
                f"A plan already exists for week {week_number} of {year}")
        return plan

    @staticmethod
    def session_from_draft(draft: SessionDraft) -> StudySession:
        return StudySession(**draft.model_dump(exclude={"id"}))

    @staticmethod
    def _find_session(db: Session, user_id: UUID, session_id: int) -> StudySession:
        study_session = db.query(StudySession).join(StudyPlan).filter(
            StudySession.id == session_id,
            StudyPlan.user_id == user_id,
        ).first()
        if not study_session:
            raise error.ResourceNotFoundError(f"Session {session_id} not found")
        return study_session

    @staticmethod
    def _check_duration(duration: float) -> None:
        if duration is None or duration < settings.MIN_SESSION_HOURS:
            raise error.InvalidRequestError(
                f"Invalid duration {duration}: sessions must last at least "
                f"{settings.MIN_SESSION_HOURS} hours")

    @staticmethod
    def get_current_week_plan(user_id: UUID, now: Optional[datetime] = None) -> StudyPlanOut:
        now = now or datetime.now()
        with CreateDBSession() as session:
            plan, _, _ = StudyPlanController.sync_week(session, user_id, now)
            return StudyPlanController._map_plan(plan)

    @staticmethod
    def generate_study_plan(user_id: UUID, data: PlanGenerateIn, now: Optional[datetime] = None) -> StudyPlanOut:
        now = now or datetime.now()
        week_number, year = week_key(now)

        with CreateDBSession() as session:
            if StudyPlanController.find_week_plan(session, user_id, now):
                raise error.ConflictError(
                    f"A plan already exists for week {week_number} of {year}. "
                    "Clear it first or add sessions manually.")

            subjects = StudyPlanController.user_subjects(session, user_id)
            result = generate_schedule(
                subjects, data.hours, data.start_time, data.days_of_week, now
            )
            if not result.ok:
                raise error.InvalidRequestError(SCHEDULE_FAILURE_MESSAGES[result.failure])
            if not result.sessions:
                raise error.InvalidRequestError(
                    f"No sessions could be scheduled with {data.hours} hours per day")

            plan = StudyPlanController.persist_plan(session, user_id, now, result.sessions)
            logger.info(
                f"User {user_id}: generated {len(result.sessions)} sessions for week {week_number}/{year}")
            return StudyPlanController._map_plan(plan)

    @staticmethod
    def add_session(user_id: UUID, data: SessionCreateIn, now: Optional[datetime] = None) -> StudyPlanOut:
        """Manually add a session to the current week's plan, creating it if needed."""
        now = now or datetime.now()
        StudyPlanController._check_duration(data.duration)

        with CreateDBSession() as session:
            subject = session.query(Subject).filter(
                Subject.id == data.subject_id,
                Subject.user_id == user_id,
            ).first()
            if not subject:
                raise error.ResourceNotFoundError(f"Subject {data.subject_id} not found")

            hour, minute = parse_start_time(data.time)
            start = at_time(resolve_study_date(data.day, now), hour, minute)
            draft = build_session_draft(subject.id, subject.name, start, data.duration)

            plan = StudyPlanController.find_week_plan(session, user_id, now)
            if plan is None:
                plan = StudyPlanController.persist_plan(session, user_id, now, [draft])
            else:
                plan.sessions.append(StudyPlanController.session_from_draft(draft))
                session.commit()
            return StudyPlanController._map_plan(plan)

    @staticmethod
    def complete_session(user_id: UUID, session_id: int, now: Optional[datetime] = None) -> StudySessionOut:
        now = now or datetime.now()
        with CreateDBSession() as session:
            study_session = StudyPlanController._find_session(session, user_id, session_id)
            if is_terminal(study_session):
                raise error.ConflictError(
                    f"Session {session_id} is already {SessionStatus(study_session.status).value}")

            complete_session(study_session, now)
            subject = session.query(Subject).filter(
                Subject.id == study_session.subject_id,
                Subject.user_id == user_id,
            ).first()
            if subject:
                apply_completion(subject, study_session, now)

            session.commit()
            return StudySessionOut.model_validate(study_session)

    @staticmethod
    def update_session_duration(user_id: UUID, session_id: int, duration: float) -> DurationUpdateOut:
        StudyPlanController._check_duration(duration)

        with CreateDBSession() as session:
            study_session = StudyPlanController._find_session(session, user_id, session_id)
            old_duration = study_session.allocated

            study_session.allocated = duration
            study_session.scheduled_end = study_session.scheduled_start + timedelta(hours=duration)
            session.commit()

            return DurationUpdateOut(
                message="Duration updated successfully",
                session=StudySessionOut.model_validate(study_session),
                old_duration=old_duration,
                new_duration=duration,
            )

    @staticmethod
    def delete_session(user_id: UUID, session_id: int) -> None:
        with CreateDBSession() as session:
            study_session = StudyPlanController._find_session(session, user_id, session_id)
            session.delete(study_session)
            session.commit()

    @staticmethod
    def clear_current_week(user_id: UUID, now: Optional[datetime] = None) -> ClearPlanOut:
        """Delete this week's plan; an empty week is cleared with nothing deleted."""
        now = now or datetime.now()
        with CreateDBSession() as session:
            plan = StudyPlanController.find_week_plan(session, user_id, now)
            if not plan:
                return ClearPlanOut(message="No sessions to clear", deleted=0)

            deleted = len(plan.sessions)
            session.delete(plan)
            session.commit()
            return ClearPlanOut(message="All sessions cleared successfully", deleted=deleted)
