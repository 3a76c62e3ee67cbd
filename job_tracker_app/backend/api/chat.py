import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import schemas
from ..config.settings import get_settings
from ..models.db.database import get_db
from ..services import application_tracker as application_service
from ..services import prompt_builder
from ..services.gemini_service import get_gemini_client, user_message
from ..services.stats_service import compute_application_stats
from ..utils.api_helpers import ApiError
from .auth import bearer_scheme, resolve_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat-bot", response_model=schemas.ChatResponse, summary="Ask the application assistant")
def chat(
    request: schemas.ChatRequest,
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
):
    """
    Answers a question about the user's own applications.

    The application list is loaded from the database (never taken from the
    client) and the totals and upcoming interviews are computed here; the
    model is told to use those numbers as they are.
    """
    if not request.user_id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "UserId is missing")
    if not request.message:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Message is missing")

    current_user = resolve_user(db, credentials)
    if str(current_user.id) != str(request.user_id):
        logger.warning("User %s asked about applications of user %s", current_user.id, request.user_id)
        raise ApiError(status.HTTP_403_FORBIDDEN, "You can only ask about your own applications")

    try:
        applications = application_service.get_applications_for_user(db, user_id=current_user.id)
    except SQLAlchemyError as e:
        logger.error("Database error: %s", e)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error", details=str(e))

    logger.info("Found %d applications for user %s", len(applications), current_user.id)

    settings = get_settings()
    stats = compute_application_stats(applications, limit=settings.chat_upcoming_limit)

    try:
        application_dump = [
            schemas.Application.model_validate(application).model_dump(mode="json")
            for application in applications
        ]
        system_prompt = prompt_builder.build_prompt(
            prompt_builder.TaskKind.CHAT, stats=stats, applications=application_dump
        )
        client = get_gemini_client(settings.chat_model)
        reply = client.generate(user_message(request.message), system_instruction=system_prompt)
    except Exception as e:
        logger.error("Chatbot Error: %s", e)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Chatbot Error", details=str(e) or "Unknown error")

    return schemas.ChatResponse(
        reply=reply,
        stats=schemas.ChatStats(
            total_applications=stats["total_applications"],
            upcoming_interviews=stats["upcoming_interviews"],
            next_five=stats["next_five"],
        ),
    )
