"""
Prompt templates for the Gemini-backed features.

Every builder is a pure function of its arguments: the same inputs always
render the same prompt text, and nothing here touches the network or the
database.
"""
import json
from enum import Enum
from typing import Any, Dict, List, Optional

MAX_JOB_TEXT_CHARS = 20000

DEFAULT_COMPANY = "the company"
DEFAULT_POSITION = "the position"

JOB_POSTING_FIELDS = (
    "company_name",
    "job_title",
    "location",
    "salary_min",
    "salary_max",
    "job_description",
    "requirements",
    "benefits",
    "application_url",
)


class TaskKind(str, Enum):
    COVER_LETTER = "cover_letter"
    REFERRAL_EMAIL = "referral_email"
    JOB_POSTING = "job_posting"
    CHAT = "chat"


def _job_details(job_description: str, resume_text: str, company_name: Optional[str], job_title: Optional[str]) -> str:
    return f"""JOB DETAILS:
Company: {company_name or DEFAULT_COMPANY}
Position: {job_title or DEFAULT_POSITION}

JOB DESCRIPTION:
{job_description}

CANDIDATE'S RESUME:
{resume_text}"""


def build_cover_letter_prompt(
    resume_text: str,
    job_description: str,
    company_name: Optional[str] = None,
    job_title: Optional[str] = None,
) -> str:
    """
    Builds the cover letter prompt.

    Args:
        resume_text: The candidate's resume as plain text.
        job_description: The job description the letter targets.
        company_name: Optional company name, "the company" when missing.
        job_title: Optional job title, "the position" when missing.

    Returns:
        The complete instruction string for the model.
    """
    details = _job_details(job_description, resume_text, company_name, job_title)
    return f"""
You are a professional career coach and expert cover letter writer.

{details}

TASK:
Write a compelling, professional cover letter (250-300 words) that:
1. Shows genuine enthusiasm for the role
2. Highlights 2-3 most relevant experiences from the resume that match the job requirements
3. Demonstrates understanding of the company/role
4. Explains why the candidate is a great fit
5. Ends with a strong call to action

FORMAT:
- Professional business letter format
- No address/date headers (start with "Dear Hiring Manager,")
- 3-4 paragraphs
- Warm but professional tone
- No generic phrases like "I am writing to apply"

Write only the cover letter content, no preamble or explanation.
"""


def build_referral_email_prompt(
    resume_text: str,
    job_description: str,
    company_name: Optional[str] = None,
    job_title: Optional[str] = None,
) -> str:
    """Builds the prompt for an email asking an employee for a referral."""
    details = _job_details(job_description, resume_text, company_name, job_title)
    return f"""
You are a professional career coach helping someone request a referral.

{details}

TASK:
Write a professional, friendly email (150-200 words) requesting a referral that:
1. Has a clear, specific subject line
2. Briefly introduces yourself (1 sentence from resume highlights)
3. Mentions the specific role you're interested in
4. Explains why you're excited about the company (based on JD)
5. Highlights 1-2 relevant skills/experiences
6. Politely asks if they'd be willing to refer you
7. Offers to provide more information if needed
8. Thanks them for their time

FORMAT:
Subject: [Your subject line]

Hi [Employee Name],

[Email body]

Best regards,
[Your Name]

TONE: Professional but warm and personable, not too formal or robotic.

Write only the email with subject line, no preamble or explanation.
"""


def build_job_posting_prompt(text: str, max_chars: int = MAX_JOB_TEXT_CHARS) -> str:
    """
    Builds the extraction prompt for pasted job posting text.

    The posting is cut to `max_chars` characters before it is embedded.
    """
    posting = text[:max_chars]
    return f"""
You are a job posting parser. Extract the following details from this job posting text.
The text may be copied from any job board (LinkedIn, Indeed, Unstop, Naukri, company websites, etc.).

Return ONLY a valid JSON object with these exact keys (no markdown, no explanation, no preamble):

{{
  "company_name": "company name",
  "job_title": "job title/position",
  "location": "location (city, state/country) or 'Remote'",
  "salary_min": salary minimum as number only (e.g., 100000) or null,
  "salary_max": salary maximum as number only (e.g., 150000) or null,
  "job_description": "brief 2-3 sentence summary of the role",
  "requirements": "key requirements or qualifications",
  "benefits": "benefits or perks mentioned, if any",
  "application_url": "application URL if mentioned, otherwise null"
}}

Important rules:
- If a field is not found, use null (not empty string)
- For salary, extract ONLY numbers without any symbols or currency (e.g., 100000 not "₹1,00,000" or "$100k")
- If salary is in lakhs (e.g., "5-8 LPA"), convert to actual numbers (e.g., 500000-800000)
- Be precise and extract only what's explicitly stated
- Keep descriptions concise
- Look for application links in the text

Job Posting Text:
{posting}
"""


def build_chat_system_prompt(stats: Dict[str, Any], applications: List[Dict[str, Any]]) -> str:
    """
    Builds the system instruction for the application assistant.

    `stats` holds the server-computed facts (see stats_service) and is stated
    to the model as ground truth. `applications` must already be JSON-ready.
    """
    next_five = json.dumps(stats.get("next_five", []), ensure_ascii=False)
    application_dump = json.dumps(applications, indent=2, ensure_ascii=False)
    return f"""
You are a smart job-application-assistant bot.
You help users understand their job search progress.

You have access to the user's applications, interview dates, statuses, notes, and job titles.

Server-computed facts:
- Total Applications: {stats.get("total_applications", 0)}
- Upcoming Interviews: {stats.get("upcoming_interviews", 0)}
- Next Interviews (first five): {next_five}

Use ONLY these numbers for statistics.
DO NOT recalculate or guess counts.
Always be short, clear, and friendly.

User Applications:
{application_dump}
"""


_BUILDERS = {
    TaskKind.COVER_LETTER: build_cover_letter_prompt,
    TaskKind.REFERRAL_EMAIL: build_referral_email_prompt,
    TaskKind.JOB_POSTING: build_job_posting_prompt,
    TaskKind.CHAT: build_chat_system_prompt,
}


def build_prompt(kind: TaskKind, **inputs: Any) -> str:
    """Renders the prompt for `kind` from keyword inputs of the matching builder."""
    try:
        builder = _BUILDERS[TaskKind(kind)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown prompt kind: {kind}")
    return builder(**inputs)
