"""
Health check and configuration status endpoints.
"""
import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter

from ..config.settings import get_settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", summary="Health Check")
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns service status and whether the AI features are usable.
    """
    settings = get_settings()
    config_issues = settings.validate_required_settings()

    health_status = {
        "status": "degraded" if config_issues else "healthy",
        "message": f"Welcome to {settings.app_name} v{settings.app_version}",
        "environment": settings.environment,
        "timestamp": datetime.utcnow().isoformat(),
        "gemini_configured": bool(settings.gemini_api_key),
        "models": {
            "documents": settings.documents_model,
            "job_parser": settings.job_parser_model,
            "chat": settings.chat_model,
        },
        "reminders_enabled": settings.reminders_enabled,
    }
    if config_issues:
        health_status["configuration_issues"] = config_issues
        logger.warning("Configuration issues found: %s", config_issues)

    return health_status
