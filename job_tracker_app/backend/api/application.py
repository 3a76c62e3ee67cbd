from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db import user as user_model
from ..models.db.database import get_db
from ..services import application_tracker as application_service
from ..services.reminder_scheduler import ReminderScheduler
from ..utils.api_helpers import check_resource_exists
from .auth import get_current_active_user
from .dependencies import get_reminder_scheduler

router = APIRouter()


@router.post("/", response_model=schemas.Application, status_code=status.HTTP_201_CREATED)
def create_application(
    application: schemas.ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
    reminders: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """
    Create a new job application entry for the current user.
    """
    db_application = application_service.create_application_for_user(
        db=db, application=application, user_id=current_user.id
    )
    reminders.schedule(db_application)
    return db_application


@router.get("/", response_model=List[schemas.Application])
def read_applications(
    status_filter: Optional[schemas.ApplicationStatus] = Query(None, alias="status"),
    q: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
):
    """
    Retrieve the current user's job applications, newest first.
    """
    return application_service.get_applications_for_user(
        db, user_id=current_user.id, status=status_filter, search=q, skip=skip, limit=limit
    )


@router.get("/board", response_model=schemas.ApplicationBoard)
def read_application_board(
    q: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
):
    """
    Applications grouped into one column per status.
    """
    applications = application_service.get_applications_for_user(db, user_id=current_user.id, search=q)
    columns = application_service.group_by_status(applications)
    return schemas.ApplicationBoard(
        columns={
            column: [schemas.Application.model_validate(item) for item in items]
            for column, items in columns.items()
        },
        total=len(applications),
    )


@router.get("/{application_id}", response_model=schemas.Application)
def read_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
):
    """
    Retrieve a specific job application by its ID.
    """
    db_application = application_service.get_application_by_id(
        db, application_id=application_id, user_id=current_user.id
    )
    check_resource_exists(db_application, "Application")
    return db_application


@router.put("/{application_id}", response_model=schemas.Application)
def update_application(
    application_id: int,
    application: schemas.ApplicationUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
    reminders: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """
    Replace a job application's details.
    """
    db_application = application_service.update_application(
        db, application_id=application_id, application_update=application, user_id=current_user.id
    )
    check_resource_exists(db_application, "Application")
    reminders.schedule(db_application)
    return db_application


@router.patch("/{application_id}/status", response_model=schemas.Application)
def update_application_status(
    application_id: int,
    update: schemas.ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
    reminders: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """
    Move an application to another status column.
    """
    db_application = application_service.update_application_status(
        db, application_id=application_id, status=update.status, user_id=current_user.id
    )
    check_resource_exists(db_application, "Application")
    reminders.schedule(db_application)
    return db_application


@router.delete("/{application_id}", response_model=schemas.Application)
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_active_user),
    reminders: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """
    Delete a job application together with its saved documents and pending reminders.
    """
    deleted = application_service.delete_application(
        db, application_id=application_id, user_id=current_user.id
    )
    check_resource_exists(deleted, "Application")
    reminders.cancel(application_id)
    return deleted
