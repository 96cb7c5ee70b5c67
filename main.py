import logging

from fastapi import FastAPI, responses
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from fastapi import exceptions as exc
from sqlalchemy.exc import IntegrityError, DBAPIError
from api.v1.router import (
    subjects_router,
    study_plans_router,
    templates_router,
    progress_router,
)
from core.setup import Base, database
import handler as hlp
from config.setting import settings
from error import ServerError

# Register tables on Base.metadata before create_all
from model.subjects import Subject, SkipRecord  # noqa: F401
from model.study_plans import StudyPlan, StudySession  # noqa: F401
from model.templates import Template, TemplateSession  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Create database tables and indexes
Base.metadata.create_all(bind=database.get_engine)

app = FastAPI(
    title="Study Planner API",
    version="1.0.0",
    description="Weekly study scheduling with adaptive subject recommendations",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


app.add_exception_handler(ValueError, hlp.value_error_handler)
app.add_exception_handler(ValidationError, hlp.validation_error_handler)
app.add_exception_handler(RequestValidationError, hlp.validation_error_handler)
app.add_exception_handler(exc.HTTPException, hlp.validation_http_exceptions_handler)
app.add_exception_handler(IntegrityError, hlp.db_error_handler)
app.add_exception_handler(DBAPIError, hlp.db_error_handler)
app.add_exception_handler(ServerError, hlp.server_error_handler)


app.include_router(subjects_router, prefix=settings.API_PREFIX)
app.include_router(study_plans_router, prefix=settings.API_PREFIX)
app.include_router(templates_router, prefix=settings.API_PREFIX)
app.include_router(progress_router, prefix=settings.API_PREFIX)


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/", include_in_schema=False)
def redirect_to_docs():
    return responses.RedirectResponse("/docs")
