from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models.db import application as application_model
from ..models.db import document as document_model
from .. import schemas


def get_application_by_id(db: Session, application_id: int, user_id: int):
    return db.query(application_model.Application).filter(
        application_model.Application.id == application_id,
        application_model.Application.user_id == user_id
    ).first()


def get_applications_for_user(
    db: Session,
    user_id: int,
    status: Optional[schemas.ApplicationStatus] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[application_model.Application]:
    """Newest first. `search` matches company, title or location, case-insensitively."""
    Application = application_model.Application
    query = db.query(Application).filter(Application.user_id == user_id)
    if status is not None:
        query = query.filter(Application.status == schemas.ApplicationStatus(status).value)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(or_(
            Application.company_name.ilike(pattern),
            Application.job_title.ilike(pattern),
            Application.location.ilike(pattern),
        ))
    query = query.order_by(Application.created_at.desc(), Application.id.desc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def _column_values(application: schemas.ApplicationBase) -> dict:
    data = application.model_dump()
    data["status"] = schemas.ApplicationStatus(data["status"]).value
    return data


def create_application_for_user(db: Session, application: schemas.ApplicationCreate, user_id: int):
    db_application = application_model.Application(**_column_values(application), user_id=user_id)
    db.add(db_application)
    db.commit()
    db.refresh(db_application)
    return db_application


def update_application(db: Session, application_id: int, application_update: schemas.ApplicationUpdate, user_id: int):
    """Replaces every editable field; omitted optional fields are cleared."""
    db_application = get_application_by_id(db=db, application_id=application_id, user_id=user_id)
    if db_application:
        for key, value in _column_values(application_update).items():
            setattr(db_application, key, value)
        db.commit()
        db.refresh(db_application)
    return db_application


def update_application_status(db: Session, application_id: int, status: schemas.ApplicationStatus, user_id: int):
    db_application = get_application_by_id(db=db, application_id=application_id, user_id=user_id)
    if db_application:
        db_application.status = schemas.ApplicationStatus(status).value
        db.commit()
        db.refresh(db_application)
    return db_application


def delete_application(db: Session, application_id: int, user_id: int) -> Optional[schemas.Application]:
    """Deletes the application and its saved documents; returns a snapshot of the deleted row."""
    db_application = get_application_by_id(db=db, application_id=application_id, user_id=user_id)
    if db_application is None:
        return None
    # Attributes expire on commit, so copy them out first
    snapshot = schemas.Application.model_validate(db_application)
    db.query(document_model.GeneratedDocument).filter(
        document_model.GeneratedDocument.application_id == application_id
    ).delete(synchronize_session=False)
    db.delete(db_application)
    db.commit()
    return snapshot


def group_by_status(applications: List[application_model.Application]) -> Dict[schemas.ApplicationStatus, list]:
    """Board columns keyed by status, in display order; every column is present."""
    columns = {status: [] for status in schemas.ApplicationStatus}
    for application in applications:
        columns[schemas.ApplicationStatus(application.status)].append(application)
    return columns
