import logging

from fastapi import APIRouter, status

from .. import schemas
from ..config.settings import get_settings
from ..services import prompt_builder
from ..services.gemini_service import GenerationError, get_gemini_client
from ..services.response_normalizer import ResponseParseError, parse_job_posting
from ..utils.api_helpers import ApiError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/parse-job-text", response_model=schemas.ParseJobTextResponse, summary="Parse a pasted job posting")
def parse_job_text(request: schemas.ParseJobTextRequest):
    """
    Extracts company, title, location, salary range, application link and
    notes from job posting text pasted from any job board, so the client can
    pre-fill its application form.
    """
    settings = get_settings()
    text = request.text or ""

    if len(text.strip()) < settings.min_job_text_chars:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            f"Please paste job description text (at least {settings.min_job_text_chars} characters)",
        )

    if not settings.gemini_api_key:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "GEMINI_API_KEY is not configured")

    logger.info("Processing pasted job text, length: %d", len(text))

    try:
        prompt = prompt_builder.build_prompt(
            prompt_builder.TaskKind.JOB_POSTING, text=text, max_chars=settings.max_job_text_chars
        )
        client = get_gemini_client(settings.job_parser_model, api_key=settings.gemini_api_key)
        try:
            raw_reply = client.generate(prompt)
        except GenerationError as e:
            logger.error("Gemini API error while parsing job text: %s", e)
            raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "AI processing failed. Please try again.")

        logger.info("AI response received: %s", raw_reply[:200])

        try:
            extraction = parse_job_posting(raw_reply)
        except ResponseParseError as e:
            logger.error("JSON parse error: %s", e)
            logger.error("Raw response: %s", raw_reply[:200])
            raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to parse AI response. Please try again.")
    except ApiError:
        raise
    except Exception as e:
        logger.exception("Unexpected error while parsing job text")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred", details=str(e))

    response = schemas.ParseJobTextResponse(**extraction.to_form_fields())
    logger.info("Parsed job posting: %s at %s", response.job_title, response.company_name)
    return response
