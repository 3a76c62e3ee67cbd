from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db import user as user_model
from ..models.db.database import get_db
from ..services import resume_service
from ..utils.api_helpers import validate_non_empty_string
from .auth import get_current_active_user

router = APIRouter()


@router.get("/get-resume", response_model=schemas.ResumeResponse)
def get_resume(current_user: user_model.User = Depends(get_current_active_user)):
    """
    Return the authenticated user's saved resume text ("" when none is saved).
    """
    return schemas.ResumeResponse(resume_text=resume_service.get_resume(current_user))


@router.post("/save-resume", status_code=status.HTTP_200_OK)
def save_resume(
    request: schemas.ResumeSaveRequest,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
):
    """
    Save the authenticated user's resume text, replacing the previous one.
    """
    text = validate_non_empty_string(request.text, "Resume text is required")
    resume_service.save_resume(db, current_user, text)
    return {"success": True}
