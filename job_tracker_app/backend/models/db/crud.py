from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from . import user as model
from ... import schemas


def get_user_by_email(db: Session, email: str) -> Optional[model.User]:
    return db.query(model.User).filter(model.User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[model.User]:
    return db.query(model.User).filter(model.User.id == user_id).first()


def create_user(db: Session, user: schemas.UserCreate, hashed_password: str) -> model.User:
    db_user = model.User(email=user.email, hashed_password=hashed_password)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_password(db: Session, db_user: model.User, hashed_password: str) -> model.User:
    db_user.hashed_password = hashed_password
    db.commit()
    db.refresh(db_user)
    return db_user


def set_encrypted_resume(db: Session, db_user: model.User, encrypted_text: str) -> model.User:
    db_user.encrypted_resume_text = encrypted_text
    db_user.resume_updated_at = datetime.utcnow()
    db.commit()
    db.refresh(db_user)
    return db_user
