from api.v1.router.subjects import router as subjects_router
from api.v1.router.study_plans import router as study_plans_router
from api.v1.router.templates import router as templates_router
from api.v1.router.progress import router as progress_router
