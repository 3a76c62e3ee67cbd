import logging
import smtplib
from datetime import timedelta
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from .. import schemas
from ..config.settings import get_settings
from ..models.db import crud
from ..models.db import user as user_model
from ..models.db.database import get_db
from ..security import ALGORITHM, SECRET_KEY, create_access_token, get_password_hash, verify_password
from ..utils.api_helpers import ApiError

logger = logging.getLogger(__name__)

router = APIRouter()

PASSWORD_RESET_PURPOSE = "password_reset"

# auto_error is off so missing credentials produce our own 401 body
bearer_scheme = HTTPBearer(scheme_name="Bearer", auto_error=False)


def send_reset_email(email: str, reset_token: str) -> bool:
    """Send a password reset link. Without SMTP settings the link is only logged."""
    settings = get_settings()
    reset_url = f"{settings.password_reset_url}?token={reset_token}"

    if not settings.smtp_server or not settings.smtp_username or not settings.smtp_password:
        logger.info("SMTP not configured; password reset link for %s: %s", email, reset_url)
        return True

    msg = MIMEMultipart()
    msg['From'] = settings.smtp_username
    msg['To'] = email
    msg['Subject'] = f"Password Reset - {settings.app_name}"
    body = (
        "Hi,\n\n"
        "You requested a password reset for your job tracker account.\n\n"
        f"Open the link below to choose a new password:\n{reset_url}\n\n"
        f"This link expires in {settings.password_reset_expire_minutes} minutes.\n\n"
        "If you didn't request this reset, please ignore this email.\n"
    )
    msg.attach(MIMEText(body, 'plain'))

    try:
        server = smtplib.SMTP(settings.smtp_server, settings.smtp_port)
        try:
            if settings.smtp_use_tls:
                server.starttls()
            server.login(settings.smtp_username, settings.smtp_password)
            server.sendmail(settings.smtp_username, email, msg.as_string())
        finally:
            server.quit()
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send password reset email to %s: %s", email, e)
        return False


@router.post("/register", response_model=schemas.User)
def register(user: schemas.UserCreate, db: Session = Depends(get_db)):
    db_user = crud.get_user_by_email(db, email=user.email)
    if db_user:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Email already registered")

    hashed_password = get_password_hash(user.password)
    new_user = crud.create_user(db=db, user=user, hashed_password=hashed_password)
    logger.info("Registered user %s", new_user.id)
    return new_user


@router.post("/login", response_model=schemas.Token)
def login(db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    user = crud.get_user_by_email(db, email=form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(data={"sub": user.email})
    return {"access_token": access_token, "token_type": "bearer"}


def resolve_user(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> user_model.User:
    """
    Resolves the bearer token to an active user.

    Raises:
        ApiError: 401 "Not authenticated" without a token, "Invalid token" when
            the token does not verify or names no active user.
    """
    if credentials is None or not credentials.credentials:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Not authenticated", headers={"WWW-Authenticate": "Bearer"})

    invalid_token = ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid token", headers={"WWW-Authenticate": "Bearer"})
    try:
        payload = jwt.decode(credentials.credentials, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise invalid_token
    email: Optional[str] = payload.get("sub")
    if email is None or payload.get("purpose"):
        raise invalid_token

    user = crud.get_user_by_email(db, email=email)
    if user is None or not user.is_active:
        raise invalid_token
    return user


def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> user_model.User:
    return resolve_user(db, credentials)


def get_current_active_user(current_user: user_model.User = Depends(get_current_user)) -> user_model.User:
    if not current_user.is_active:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Inactive user")
    return current_user


@router.get("/me", response_model=schemas.User)
def read_current_user(current_user: user_model.User = Depends(get_current_active_user)):
    return current_user


@router.post("/forgot-password")
def forgot_password(request: schemas.ForgotPasswordRequest, db: Session = Depends(get_db)):
    """
    Send a password reset link to the user.
    Always returns success to avoid revealing whether the email exists.
    """
    settings = get_settings()
    user = crud.get_user_by_email(db, email=request.email)

    if user:
        reset_token = create_access_token(
            data={"sub": user.email, "purpose": PASSWORD_RESET_PURPOSE},
            expires_delta=timedelta(minutes=settings.password_reset_expire_minutes),
        )
        if not send_reset_email(user.email, reset_token):
            raise ApiError(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Failed to send reset email. Please try again later.",
            )

    return {"message": "If the email exists, a password reset link has been sent."}


@router.post("/reset-password")
def reset_password(request: schemas.ResetPasswordRequest, db: Session = Depends(get_db)):
    """
    Reset the user's password with a token issued by /forgot-password.
    """
    invalid = ApiError(status.HTTP_400_BAD_REQUEST, "Invalid or expired reset token.")
    try:
        payload = jwt.decode(request.token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise invalid
    if payload.get("purpose") != PASSWORD_RESET_PURPOSE or not payload.get("sub"):
        raise invalid

    user = crud.get_user_by_email(db, email=payload["sub"])
    if not user:
        raise invalid

    crud.update_password(db, user, get_password_hash(request.new_password))
    logger.info("Password reset for user %s", user.id)
    return {"message": "Password has been reset successfully."}
