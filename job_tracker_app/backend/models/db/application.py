from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from .database import Base


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    company_name = Column(String, index=True, nullable=False)
    job_title = Column(String, index=True, nullable=False)
    status = Column(String, default="applied", nullable=False)
    location = Column(String, nullable=True)
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    application_url = Column(String, nullable=True)
    date_applied = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    # Interview details, stored as entered (no timezone)
    interview_date = Column(String, nullable=True)
    interview_time = Column(String, nullable=True)
    interviewer_name = Column(String, nullable=True)
    interview_link = Column(String, nullable=True)
    interview_notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
