from fastapi import APIRouter, Depends
from controller.subjects import SubjectOp
from schema import SuccessOut
from schema.subjects import (
    AdaptiveRecommendationOut,
    RecommendationOut,
    SubjectIn,
    SubjectOut,
    SubjectUpdate,
)
from service.auth import current_user_id, verify_access_token

router = APIRouter(tags=["Subjects"])


@router.get("/subjects", response_model=list[SubjectOut])
def list_subjects(auth_data: dict = Depends(verify_access_token)):
    return SubjectOp.list_subjects(current_user_id(auth_data))


@router.post("/subjects", response_model=SubjectOut, status_code=201)
def create_subject(data: SubjectIn, auth_data: dict = Depends(verify_access_token)):
    return SubjectOp.create_subject(current_user_id(auth_data), data)


@router.get("/subjects/recommendations", response_model=list[RecommendationOut])
def get_recommendations(auth_data: dict = Depends(verify_access_token)):
    """
    Rank subjects by priority, difficulty, time since last studied
    and how little they have been studied compared to the rest.
    """
    return SubjectOp.get_recommendations(current_user_id(auth_data))


@router.get("/subjects/recommendations/adaptive", response_model=list[AdaptiveRecommendationOut])
def get_adaptive_recommendations(auth_data: dict = Depends(verify_access_token)):
    """
    Rank subjects for what to study right now.

    Sessions missed this week push their subject up the list, while
    subjects already completed today are pushed down.
    """
    return SubjectOp.get_adaptive_recommendations(current_user_id(auth_data))


@router.put("/subjects/{subject_id}", response_model=SubjectOut)
def update_subject(
    subject_id: int,
    data: SubjectUpdate,
    auth_data: dict = Depends(verify_access_token),
):
    return SubjectOp.update_subject(current_user_id(auth_data), subject_id, data)


@router.delete("/subjects/{subject_id}", response_model=SuccessOut)
def delete_subject(subject_id: int, auth_data: dict = Depends(verify_access_token)):
    return SubjectOp.delete_subject(current_user_id(auth_data), subject_id)
