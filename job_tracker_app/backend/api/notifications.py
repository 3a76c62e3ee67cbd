from typing import List

from fastapi import APIRouter, Depends

from .. import schemas
from ..models.db import user as user_model
from ..services.reminder_scheduler import NotificationFeed
from ..utils.api_helpers import check_resource_exists
from .auth import get_current_active_user
from .dependencies import get_notification_feed

router = APIRouter()


@router.get("/", response_model=List[schemas.Notification])
def read_notifications(
    current_user: user_model.User = Depends(get_current_active_user),
    feed: NotificationFeed = Depends(get_notification_feed),
):
    """
    Interview reminders fired for the current user since the server started.
    """
    return feed.list(current_user.id)


@router.post("/{notification_id}/seen", response_model=schemas.Notification)
def mark_notification_seen(
    notification_id: str,
    current_user: user_model.User = Depends(get_current_active_user),
    feed: NotificationFeed = Depends(get_notification_feed),
):
    notification = feed.mark_seen(current_user.id, notification_id)
    check_resource_exists(notification, "Notification")
    return notification


@router.delete("/")
def clear_notifications(
    current_user: user_model.User = Depends(get_current_active_user),
    feed: NotificationFeed = Depends(get_notification_feed),
):
    return {"cleared": feed.clear(current_user.id)}
