from fastapi import APIRouter, Depends
from controller.progress import ProgressOp
from schema.progress import StreakOut, StudyStatsOut, WeeklyProgressOut
from service.auth import current_user_id, verify_access_token

router = APIRouter(tags=["Progress"])


@router.get("/progress/weekly", response_model=WeeklyProgressOut)
def get_weekly_progress(auth_data: dict = Depends(verify_access_token)):
    return ProgressOp.weekly(current_user_id(auth_data))


@router.get("/progress/streak", response_model=StreakOut)
def get_study_streak(auth_data: dict = Depends(verify_access_token)):
    """Consecutive days, ending today, with at least one completed session."""
    return ProgressOp.streak(current_user_id(auth_data))


@router.get("/progress/stats", response_model=StudyStatsOut)
def get_study_stats(auth_data: dict = Depends(verify_access_token)):
    return ProgressOp.stats(current_user_id(auth_data))
