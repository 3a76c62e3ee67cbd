"""
Deterministic statistics over a user's applications.

These numbers are computed before the chat prompt is built and are handed
to the model as facts it must not recompute.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

NEXT_INTERVIEWS_LIMIT = 5


def _field(application: Any, name: str) -> Any:
    if isinstance(application, dict):
        return application.get(name)
    return getattr(application, name, None)


def interview_datetime(application: Any) -> Optional[datetime]:
    """
    Combines interview_date and interview_time into one naive datetime.

    The values are read exactly as they were entered; no timezone is applied.
    Returns None when either part is missing or the combination does not parse.
    """
    interview_date = _field(application, "interview_date")
    interview_time = _field(application, "interview_time")
    if not interview_date or not interview_time:
        return None
    try:
        return datetime.fromisoformat(f"{interview_date}T{interview_time}")
    except ValueError:
        logger.debug(
            "Skipping unparseable interview slot %r %r for application %s",
            interview_date, interview_time, _field(application, "id"),
        )
        return None


def upcoming_interviews(applications: Iterable[Any], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Applications with an interview strictly after `now`, earliest first."""
    now = now or datetime.now()
    upcoming = []
    for application in applications:
        interview_at = interview_datetime(application)
        if interview_at is not None and interview_at > now:
            upcoming.append((interview_at, application))

    # sorted() is stable, so equal slots keep their input order
    upcoming = sorted(upcoming, key=lambda item: item[0])
    return [
        {
            "company_name": _field(application, "company_name"),
            "job_title": _field(application, "job_title"),
            "interview_at": interview_at.isoformat(),
        }
        for interview_at, application in upcoming
    ]


def compute_application_stats(
    applications: List[Any],
    now: Optional[datetime] = None,
    limit: int = NEXT_INTERVIEWS_LIMIT,
) -> Dict[str, Any]:
    """
    Computes the chat assistant's ground-truth facts.

    Args:
        applications: The caller's applications (ORM objects or dicts).
        now: Reference time; defaults to the current local time.
        limit: How many upcoming interviews to list.

    Returns:
        A dict with total_applications, upcoming_interviews and next_five.
    """
    upcoming = upcoming_interviews(applications, now=now)
    return {
        "total_applications": len(applications),
        "upcoming_interviews": len(upcoming),
        "next_five": upcoming[:limit],
    }
