import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.db import document as document_model
from .. import schemas

logger = logging.getLogger(__name__)

GeneratedDocument = document_model.GeneratedDocument


def get_latest_document(db: Session, application_id: int, user_id: int) -> Optional[GeneratedDocument]:
    return db.query(GeneratedDocument).filter(
        GeneratedDocument.application_id == application_id,
        GeneratedDocument.user_id == user_id
    ).order_by(GeneratedDocument.created_at.desc(), GeneratedDocument.id.desc()).first()


def list_documents_for_user(db: Session, user_id: int) -> List[GeneratedDocument]:
    return db.query(GeneratedDocument).filter(
        GeneratedDocument.user_id == user_id
    ).order_by(GeneratedDocument.updated_at.desc()).all()


def _overwrite(db_document: GeneratedDocument, documents: schemas.GeneratedDocumentSave) -> None:
    db_document.cover_letter = documents.cover_letter
    db_document.referral_email = documents.referral_email
    db_document.updated_at = datetime.utcnow()


def save_documents_for_application(
    db: Session,
    application_id: int,
    user_id: int,
    documents: schemas.GeneratedDocumentSave,
) -> GeneratedDocument:
    """
    Stores the cover letter and referral email of an application.

    There is at most one row per application: an existing row is overwritten
    in place, otherwise a new one is inserted. When a concurrent save wins
    the insert, its row is overwritten instead. The caller must have checked
    that the application belongs to `user_id`.
    """
    db_document = get_latest_document(db, application_id=application_id, user_id=user_id)
    if db_document is None:
        db_document = GeneratedDocument(
            application_id=application_id,
            user_id=user_id,
            cover_letter=documents.cover_letter,
            referral_email=documents.referral_email,
        )
        db.add(db_document)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            db_document = get_latest_document(db, application_id=application_id, user_id=user_id)
            if db_document is None:
                raise
            logger.info("Documents of application %s were saved concurrently; overwriting", application_id)
            _overwrite(db_document, documents)
            db.commit()
    else:
        _overwrite(db_document, documents)
        db.commit()
    db.refresh(db_document)
    return db_document


def delete_document(db: Session, application_id: int, user_id: int) -> bool:
    deleted = db.query(GeneratedDocument).filter(
        GeneratedDocument.application_id == application_id,
        GeneratedDocument.user_id == user_id
    ).delete(synchronize_session=False)
    db.commit()
    return deleted > 0
