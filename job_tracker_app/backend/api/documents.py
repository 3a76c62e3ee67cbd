import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..config.settings import get_settings
from ..models.db import user as user_model
from ..models.db.database import get_db
from ..services import application_tracker as application_service
from ..services import document_service
from ..services import prompt_builder
from ..services.gemini_service import GenerationError, get_gemini_client
from ..services.response_normalizer import normalize_document
from ..utils.api_helpers import ApiError, check_resource_exists, classify_generation_error
from .auth import get_current_active_user

logger = logging.getLogger(__name__)

router = APIRouter()

GENERATION_ERROR_MESSAGES = {
    status.HTTP_401_UNAUTHORIZED: "Invalid API key. Please check your Gemini API key.",
    status.HTTP_429_TOO_MANY_REQUESTS: "API quota exceeded. Please try again later.",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Failed to generate documents. Please try again.",
}


@router.post(
    "/generate-documents",
    response_model=schemas.GenerateDocumentsResponse,
    summary="Generate a cover letter and a referral email",
)
def generate_documents(request: schemas.GenerateDocumentsRequest):
    """
    Drafts a cover letter and a referral request email from the candidate's
    resume and the job description, with two separate Gemini calls.
    """
    if not request.resume_text or not request.job_description:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Resume and job description are required")

    settings = get_settings()
    prompt_inputs = dict(
        resume_text=request.resume_text,
        job_description=request.job_description,
        company_name=request.company_name,
        job_title=request.job_title,
    )

    try:
        client = get_gemini_client(settings.documents_model)
        cover_letter = client.generate(
            prompt_builder.build_prompt(prompt_builder.TaskKind.COVER_LETTER, **prompt_inputs)
        )
        referral_email = client.generate(
            prompt_builder.build_prompt(prompt_builder.TaskKind.REFERRAL_EMAIL, **prompt_inputs)
        )
    except GenerationError as e:
        status_code = classify_generation_error(e)
        logger.error("Document generation failed (%s): %s", status_code, e)
        raise ApiError(status_code, GENERATION_ERROR_MESSAGES[status_code])
    except Exception:
        logger.exception("Unexpected error while generating documents")
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            GENERATION_ERROR_MESSAGES[status.HTTP_500_INTERNAL_SERVER_ERROR],
        )

    logger.info("Generated documents for %s / %s", request.company_name, request.job_title)
    return schemas.GenerateDocumentsResponse(
        cover_letter=normalize_document(cover_letter),
        referral_email=normalize_document(referral_email),
    )


def _get_owned_application(db: Session, application_id: int, user_id: int):
    db_application = application_service.get_application_by_id(db, application_id=application_id, user_id=user_id)
    check_resource_exists(db_application, "Application")
    return db_application


@router.get("/documents/", response_model=List[schemas.GeneratedDocumentSummary])
def list_documents(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
):
    """
    Which of the user's applications have saved documents.
    """
    return document_service.list_documents_for_user(db, user_id=current_user.id)


@router.get("/applications/{application_id}/documents", response_model=schemas.GeneratedDocument)
def read_documents(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
):
    _get_owned_application(db, application_id, current_user.id)
    db_document = document_service.get_latest_document(db, application_id=application_id, user_id=current_user.id)
    if db_document is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "No saved documents found")
    return db_document


@router.put("/applications/{application_id}/documents", response_model=schemas.GeneratedDocument)
def save_documents(
    application_id: int,
    documents: schemas.GeneratedDocumentSave,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
):
    """
    Save (or overwrite) the cover letter and referral email of an application.
    """
    _get_owned_application(db, application_id, current_user.id)
    return document_service.save_documents_for_application(
        db, application_id=application_id, user_id=current_user.id, documents=documents
    )


@router.delete("/applications/{application_id}/documents", status_code=status.HTTP_204_NO_CONTENT)
def delete_documents(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
):
    _get_owned_application(db, application_id, current_user.id)
    if not document_service.delete_document(db, application_id=application_id, user_id=current_user.id):
        raise ApiError(status.HTTP_404_NOT_FOUND, "No saved documents found")
