"""FastAPI dependency providers for objects owned by the running app."""
from fastapi import Request

from ..services.reminder_scheduler import NotificationFeed, ReminderScheduler


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    return request.app.state.reminder_scheduler


def get_notification_feed(request: Request) -> NotificationFeed:
    return request.app.state.reminder_scheduler.feed
