from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from .database import Base


class GeneratedDocument(Base):
    __tablename__ = "generated_documents"

    id = Column(Integer, primary_key=True, index=True)
    # One saved pair per application; saving again overwrites it.
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), unique=True, index=True, nullable=False
    )
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    cover_letter = Column(Text, nullable=True)
    referral_email = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
