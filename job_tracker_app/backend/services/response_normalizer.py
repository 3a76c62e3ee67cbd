"""
Post-processing of raw Gemini output.

Documents are opaque prose and only get trimmed. Job posting extractions are
unwrapped from markdown fences, parsed as JSON and coerced into a fixed set
of nullable fields. All functions are pure.
"""
import json
import re
from typing import Any, Optional, Union

from pydantic import BaseModel

from .prompt_builder import JOB_POSTING_FIELDS, TaskKind

Number = Union[int, float]

_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")
_NUMBER = re.compile(r"\d[\d,]*(?:\.\d+)?")
_LAKH_SUFFIX = re.compile(r"(?<![a-z])(lpa|lakhs?|lacs?)\b|\d\s*l\b")
_THOUSAND_SUFFIX = re.compile(r"\d\s*k\b")
_LAKH_AFTER = re.compile(r"\s*(lpa|lakhs?|lacs?|l)\b")
_THOUSAND_AFTER = re.compile(r"\s*k\b")

LAKH = 100000


class ResponseParseError(ValueError):
    """The model reply was not the JSON object the prompt asked for."""


class JobPostingExtraction(BaseModel):
    company_name: Optional[str] = None
    job_title: Optional[str] = None
    location: Optional[str] = None
    salary_min: Optional[Number] = None
    salary_max: Optional[Number] = None
    job_description: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    application_url: Optional[str] = None

    @property
    def notes(self) -> Optional[str]:
        return build_notes(self.job_description, self.requirements, self.benefits)

    def to_form_fields(self) -> dict:
        """The subset of fields an application form is pre-filled with."""
        return {
            "company_name": self.company_name,
            "job_title": self.job_title,
            "location": self.location,
            "salary_min": self.salary_min,
            "salary_max": self.salary_max,
            "application_url": self.application_url,
            "notes": self.notes,
        }


def normalize_document(text: str) -> str:
    return text.strip()


def strip_code_fences(text: str) -> str:
    """Removes a leading ``` or ```json fence and its closing fence."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
        cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def build_notes(
    job_description: Optional[str],
    requirements: Optional[str],
    benefits: Optional[str],
) -> Optional[str]:
    parts = []
    if job_description:
        parts.append(job_description)
    if requirements:
        parts.append(f"\n\nRequirements:\n{requirements}")
    if benefits:
        parts.append(f"\n\nBenefits:\n{benefits}")
    return "".join(parts) or None


def _as_text(value: Any) -> Optional[str]:
    if not value:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "\n".join(str(item) for item in value if item) or None
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _whole(number: float) -> Number:
    return int(number) if float(number).is_integer() else number


def coerce_salary(value: Any) -> Optional[Number]:
    """
    Turns a salary figure into a plain number.

    Numbers pass through. Strings keep their first numeric token with
    currency symbols and separators dropped; "k" multiplies by 1000 and
    "L"/"LPA"/"lakh" by 100000. Anything else is None.
    """
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _whole(value)
    if not isinstance(value, str):
        return None

    lowered = value.strip().lower()
    match = _NUMBER.search(lowered)
    if not match:
        return None
    try:
        number = float(match.group().replace(",", ""))
    except ValueError:
        return None

    number *= _multiplier(lowered, match.end(), number)
    return _whole(number) or None


def _multiplier(lowered: str, number_end: int, number: float) -> int:
    # A unit right after the number always applies. A unit elsewhere in the
    # string ("10-15 LPA") only applies to figures below that unit, so an
    # absolute amount quoted next to its lakh form is left alone.
    rest = lowered[number_end:]
    if _LAKH_AFTER.match(rest):
        return LAKH
    if _THOUSAND_AFTER.match(rest):
        return 1000
    if _LAKH_SUFFIX.search(lowered) and number < LAKH:
        return LAKH
    if _THOUSAND_SUFFIX.search(lowered) and number < 1000:
        return 1000
    return 1


def parse_job_posting(raw_text: str) -> JobPostingExtraction:
    """
    Parses the model's reply to the job posting prompt.

    Raises:
        ResponseParseError: If the reply is not a JSON object.
    """
    cleaned = strip_code_fences(raw_text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Model reply is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(parsed).__name__}")

    fields = {}
    for name in JOB_POSTING_FIELDS:
        value = parsed.get(name)
        if name in ("salary_min", "salary_max"):
            fields[name] = coerce_salary(value)
        else:
            fields[name] = _as_text(value)
    return JobPostingExtraction(**fields)


def normalize(kind: TaskKind, raw_text: str) -> Union[str, JobPostingExtraction]:
    """Applies the post-processing branch that matches the task kind."""
    kind = TaskKind(kind)
    if kind == TaskKind.JOB_POSTING:
        return parse_job_posting(raw_text)
    return normalize_document(raw_text)
