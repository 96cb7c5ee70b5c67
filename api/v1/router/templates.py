from fastapi import APIRouter, Depends
from controller.templates import TemplateOp
from schema import SuccessOut
from schema.templates import TemplateLoadOut, TemplateOut, TemplateSaveIn
from service.auth import current_user_id, verify_access_token

router = APIRouter(tags=["Templates"])


@router.get("/templates", response_model=list[TemplateOut])
def list_templates(auth_data: dict = Depends(verify_access_token)):
    return TemplateOp.list_templates(current_user_id(auth_data))


@router.post("/templates/save", response_model=TemplateOut, status_code=201)
def save_template(data: TemplateSaveIn, auth_data: dict = Depends(verify_access_token)):
    """Save the current week's sessions as a reusable weekly template."""
    return TemplateOp.save_current_plan(current_user_id(auth_data), data)


@router.post("/templates/{template_id}/load", response_model=TemplateLoadOut, status_code=201)
def load_template(template_id: int, auth_data: dict = Depends(verify_access_token)):
    """
    Recreate a template's sessions in the current week.

    Fails with 409 when the week already has a plan.
    """
    return TemplateOp.load_template(current_user_id(auth_data), template_id)


@router.delete("/templates/{template_id}", response_model=SuccessOut)
def delete_template(template_id: int, auth_data: dict = Depends(verify_access_token)):
    return TemplateOp.delete_template(current_user_id(auth_data), template_id)
