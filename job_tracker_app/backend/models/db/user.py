from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True)
    encrypted_resume_text = Column(Text, nullable=True)
    resume_updated_at = Column(DateTime, nullable=True)
