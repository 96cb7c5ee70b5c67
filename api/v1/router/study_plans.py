from fastapi import APIRouter, Depends
from controller.study_plans import StudyPlanController
from schema import SuccessOut
from schema.study_plans import (
    ClearPlanOut,
    DurationUpdateOut,
    PlanGenerateIn,
    SessionCreateIn,
    SessionDurationIn,
    StudyPlanOut,
    StudySessionOut,
)
from service.auth import current_user_id, verify_access_token

router = APIRouter(tags=["Study Plans"])


@router.get("/plans/current", response_model=StudyPlanOut)
def get_current_week_plan(auth_data: dict = Depends(verify_access_token)):
    """
    Current week's plan with session statuses brought up to date.

    Returns an empty plan when nothing has been scheduled this week.
    """
    return StudyPlanController.get_current_week_plan(current_user_id(auth_data))


@router.post("/plans/generate", response_model=StudyPlanOut, status_code=201)
def generate_study_plan(data: PlanGenerateIn, auth_data: dict = Depends(verify_access_token)):
    """
    Generate this week's sessions from the user's subjects.

    Each selected day is filled from `start_time` with the highest scoring
    subjects until `hours` are used up. Hard subjects get up to two hours,
    every other subject up to one.
    """
    return StudyPlanController.generate_study_plan(current_user_id(auth_data), data)


@router.post("/plans/sessions", response_model=StudyPlanOut, status_code=201)
def add_session(data: SessionCreateIn, auth_data: dict = Depends(verify_access_token)):
    return StudyPlanController.add_session(current_user_id(auth_data), data)


@router.post("/plans/sessions/{session_id}/complete", response_model=StudySessionOut)
def complete_session(session_id: int, auth_data: dict = Depends(verify_access_token)):
    return StudyPlanController.complete_session(current_user_id(auth_data), session_id)


@router.put("/plans/sessions/{session_id}/duration", response_model=DurationUpdateOut)
def update_session_duration(
    session_id: int,
    data: SessionDurationIn,
    auth_data: dict = Depends(verify_access_token),
):
    return StudyPlanController.update_session_duration(
        current_user_id(auth_data), session_id, data.duration
    )


@router.delete("/plans/sessions/{session_id}", response_model=SuccessOut)
def delete_session(session_id: int, auth_data: dict = Depends(verify_access_token)):
    StudyPlanController.delete_session(current_user_id(auth_data), session_id)
    return SuccessOut(message="Session deleted successfully")


@router.delete("/plans/current", response_model=ClearPlanOut)
def clear_current_week(auth_data: dict = Depends(verify_access_token)):
    return StudyPlanController.clear_current_week(current_user_id(auth_data))
