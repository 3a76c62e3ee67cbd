import logging

from sqlalchemy.orm import Session

from ..models.db import crud
from ..models.db import user as user_model
from ..utils.encryption import decrypt_data, encrypt_data

logger = logging.getLogger(__name__)


def get_resume(db_user: user_model.User) -> str:
    """Returns the user's saved resume text, or an empty string when there is none."""
    if not db_user.encrypted_resume_text:
        return ""
    resume_text = decrypt_data(db_user.encrypted_resume_text)
    if resume_text is None:
        logger.warning("Stored resume for user %s could not be decrypted", db_user.id)
        return ""
    return resume_text


def save_resume(db: Session, db_user: user_model.User, resume_text: str) -> user_model.User:
    """Encrypts and stores the resume, replacing any previous one."""
    logger.info("Saving resume for user %s (%d chars)", db_user.id, len(resume_text))
    return crud.set_encrypted_resume(db, db_user, encrypt_data(resume_text))
