from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Token Schemas
class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    email: Optional[str] = None


# User Schemas
class UserBase(BaseModel):
    email: str


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)


class User(UserBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(..., min_length=8)


# Application Tracker Schemas
class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    REFERRED = "referred"
    SCREENING = "screening"
    INTERVIEW = "interview"
    OFFER = "offer"
    REJECTED = "rejected"


STATUS_LABELS: Dict[ApplicationStatus, str] = {
    ApplicationStatus.APPLIED: "Applied",
    ApplicationStatus.REFERRED: "Referred",
    ApplicationStatus.SCREENING: "Screening",
    ApplicationStatus.INTERVIEW: "Interview",
    ApplicationStatus.OFFER: "Offer",
    ApplicationStatus.REJECTED: "Rejected",
}


class ApplicationBase(BaseModel):
    company_name: str = Field(..., min_length=1, examples=["Google"])
    job_title: str = Field(..., min_length=1, examples=["Backend Engineer"])
    status: ApplicationStatus = ApplicationStatus.APPLIED
    location: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    application_url: Optional[str] = None
    date_applied: Optional[str] = None
    notes: Optional[str] = None

    interview_date: Optional[str] = Field(None, examples=["2025-03-14"])
    interview_time: Optional[str] = Field(None, examples=["14:30"])
    interviewer_name: Optional[str] = None
    interview_link: Optional[str] = None
    interview_notes: Optional[str] = None

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min must not be greater than salary_max")
        return self


class ApplicationCreate(ApplicationBase):
    pass


class ApplicationUpdate(ApplicationBase):
    """Full replacement of an application's editable fields."""


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class Application(ApplicationBase):
    id: int
    user_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationBoard(BaseModel):
    columns: Dict[ApplicationStatus, List[Application]]
    total: int


# Generated Document Schemas
class GenerateDocumentsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_text: Optional[str] = Field(None, alias="resumeText")
    job_description: Optional[str] = Field(None, alias="jobDescription")
    company_name: Optional[str] = Field(None, alias="companyName")
    job_title: Optional[str] = Field(None, alias="jobTitle")


class GenerateDocumentsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cover_letter: str = Field(..., alias="coverLetter")
    referral_email: str = Field(..., alias="referralEmail")


class GeneratedDocumentSave(BaseModel):
    cover_letter: Optional[str] = None
    referral_email: Optional[str] = None

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.cover_letter and not self.referral_email:
            raise ValueError("At least one of cover_letter or referral_email is required")
        return self


class GeneratedDocument(BaseModel):
    id: int
    application_id: int
    user_id: int
    cover_letter: Optional[str] = None
    referral_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GeneratedDocumentSummary(BaseModel):
    id: int
    application_id: int
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Job Posting Parser Schemas
class ParseJobTextRequest(BaseModel):
    text: Optional[str] = None


class ParseJobTextResponse(BaseModel):
    company_name: Optional[str] = None
    job_title: Optional[str] = None
    location: Optional[str] = None
    salary_min: Optional[Union[int, float]] = None
    salary_max: Optional[Union[int, float]] = None
    application_url: Optional[str] = None
    notes: Optional[str] = None


# Chat Assistant Schemas
class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    user_id: Optional[Union[int, str]] = Field(None, alias="userId")


class UpcomingInterview(BaseModel):
    company_name: Optional[str] = None
    job_title: Optional[str] = None
    interview_at: str


class ChatStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_applications: int = Field(..., alias="totalApplications")
    upcoming_interviews: int = Field(..., alias="upcomingInterviews")
    next_five: List[UpcomingInterview] = Field(default_factory=list, alias="nextFive")


class ChatResponse(BaseModel):
    reply: str
    stats: ChatStats


# Resume Schemas
class ResumeSaveRequest(BaseModel):
    text: Optional[str] = None


class ResumeResponse(BaseModel):
    resume_text: str = ""


# Notification Schemas
class Notification(BaseModel):
    id: str
    application_id: Optional[int] = None
    title: str
    message: str
    seen: bool = False
    created_at: datetime


# Error Schemas
class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
