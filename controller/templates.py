import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import selectinload

from config.setting import settings
from controller.study_plans import StudyPlanController
from core.db import CreateDBSession
from model.templates import Template, TemplateSession
from schema import SuccessOut
from schema.templates import TemplateLoadOut, TemplateOut, TemplateSaveIn
from service.redis import Redis
from service.templates import sessions_to_template, template_to_drafts
from util.serialize import serialize_data
from util.week import week_key
import error

logger = logging.getLogger(__name__)


def templates_cache_key(user_id: UUID) -> str:
    return f"user_templates:{user_id}"


class TemplateOp:

    @staticmethod
    def _invalidate(user_id: UUID) -> None:
        Redis().delete(templates_cache_key(user_id))

    @staticmethod
    def list_templates(user_id: UUID) -> List[TemplateOut]:
        redis_instance = Redis()
        cache_key = templates_cache_key(user_id)

        if cached := redis_instance.get_json(cache_key):
            return [TemplateOut.model_validate(t) for t in cached]

        with CreateDBSession() as db:
            templates = db.query(Template).options(
                selectinload(Template.sessions)
            ).filter(
                Template.user_id == user_id
            ).order_by(Template.created_at.desc(), Template.id.desc()).all()
            templates_out = [TemplateOut.model_validate(t) for t in templates]

        redis_instance.set_json(
            cache_key, serialize_data(templates_out), expiry=settings.CACHE_EXPIRE_SECONDS
        )
        return templates_out

    @staticmethod
    def save_current_plan(user_id: UUID, data: TemplateSaveIn, now: Optional[datetime] = None) -> TemplateOut:
        """Store the current week's sessions as a reusable weekly pattern."""
        now = now or datetime.now()
        with CreateDBSession() as db:
            plan = StudyPlanController.find_week_plan(db, user_id, now)
            if not plan or not plan.sessions:
                raise error.InvalidRequestError("No sessions in the current week to save as a template")

            patterns, total_hours = sessions_to_template(
                sorted(plan.sessions, key=lambda s: s.scheduled_start)
            )
            template = Template(
                user_id=user_id,
                name=data.name.strip(),
                description=data.description or "",
                total_hours_per_week=total_hours,
                sessions=[
                    TemplateSession(
                        subject_id=p.subject_id,
                        subject_name=p.subject_name,
                        day_of_week=p.day_of_week,
                        start_time=p.start_time,
                        duration=p.duration,
                    )
                    for p in patterns
                ],
            )
            db.add(template)
            db.commit()
            db.refresh(template)

            TemplateOp._invalidate(user_id)
            logger.info(f"User {user_id} saved template {template.id} with {len(patterns)} sessions")
            return TemplateOut.model_validate(template)

    @staticmethod
    def load_template(user_id: UUID, template_id: int, now: Optional[datetime] = None) -> TemplateLoadOut:
        """Replay a template onto the current week; refused when a plan already exists."""
        now = now or datetime.now()
        with CreateDBSession() as db:
            template = TemplateOp._get_template(db, user_id, template_id)

            if StudyPlanController.find_week_plan(db, user_id, now):
                week_number, year = week_key(now)
                raise error.ConflictError(
                    f"A plan already exists for week {week_number} of {year}. "
                    "Clear it before loading a template.")

            drafts = template_to_drafts(template.sessions, now)
            plan = StudyPlanController.persist_plan(db, user_id, now, drafts)

            return TemplateLoadOut(
                message=f"Template '{template.name}' loaded successfully",
                plan=StudyPlanController._map_plan(plan),
            )

    @staticmethod
    def delete_template(user_id: UUID, template_id: int) -> SuccessOut:
        with CreateDBSession() as db:
            template = TemplateOp._get_template(db, user_id, template_id)
            db.delete(template)
            db.commit()

        TemplateOp._invalidate(user_id)
        return SuccessOut(message="Template deleted successfully")

    @staticmethod
    def _get_template(db, user_id: UUID, template_id: int) -> Template:
        template = db.query(Template).options(
            selectinload(Template.sessions)
        ).filter(
            Template.id == template_id,
            Template.user_id == user_id,
        ).first()
        if not template:
            raise error.ResourceNotFoundError(f"Template {template_id} not found")
        return template
