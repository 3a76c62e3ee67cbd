"""
Interview reminders.

Each application with a future interview gets up to two fire-once timers:
one a day before and one an hour before the interview. Timers are owned by
a registry keyed by application id, so editing an application re-arms its
timers and deleting it cancels them. Fired reminders land in an in-memory
notification feed; nothing here survives a process restart.
"""
import logging
import threading
import uuid
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from .. import schemas
from .stats_service import interview_datetime

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS_PER_USER = 100


class NotificationFeed:
    """Per-user list of notifications, newest last."""

    def __init__(self, max_per_user: int = MAX_NOTIFICATIONS_PER_USER):
        self._lock = threading.Lock()
        self._items: Dict[int, List[schemas.Notification]] = defaultdict(list)
        self.max_per_user = max_per_user

    def push(self, user_id: int, title: str, message: str, application_id: Optional[int] = None) -> schemas.Notification:
        notification = schemas.Notification(
            id=uuid.uuid4().hex,
            application_id=application_id,
            title=title,
            message=message,
            seen=False,
            created_at=datetime.now(),
        )
        with self._lock:
            items = self._items[user_id]
            items.append(notification)
            del items[:-self.max_per_user]
        return notification

    def list(self, user_id: int) -> List[schemas.Notification]:
        with self._lock:
            return list(self._items.get(user_id, []))

    def mark_seen(self, user_id: int, notification_id: str) -> Optional[schemas.Notification]:
        with self._lock:
            for notification in self._items.get(user_id, []):
                if notification.id == notification_id:
                    notification.seen = True
                    return notification
        return None

    def clear(self, user_id: int) -> int:
        with self._lock:
            return len(self._items.pop(user_id, []))


class ReminderScheduler:
    """
    Registry of pending reminder timers, keyed by application id.

    Args:
        feed: Where fired reminders are delivered.
        day_before: Lead time of the first reminder.
        hour_before: Lead time of the second reminder.
        clock: Returns the current naive local time.
        timer_factory: Builds a startable, cancellable timer; threading.Timer by default.
        enabled: When False, schedule() arms nothing.
    """

    def __init__(
        self,
        feed: NotificationFeed,
        day_before: timedelta = timedelta(hours=24),
        hour_before: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = datetime.now,
        timer_factory: Callable[..., Any] = threading.Timer,
        enabled: bool = True,
    ):
        self.feed = feed
        self.day_before = day_before
        self.hour_before = hour_before
        self.clock = clock
        self.timer_factory = timer_factory
        self.enabled = enabled
        self._lock = threading.Lock()
        self._timers: Dict[int, List[Any]] = {}

    def reminders_for(self, application: Any, now: datetime) -> List[Tuple[float, str, str]]:
        """(delay in seconds, title, message) for every reminder still ahead of `now`."""
        interview_at = interview_datetime(application)
        if interview_at is None or interview_at <= now:
            return []

        company = application.company_name
        reminders = []
        day_delay = (interview_at - self.day_before - now).total_seconds()
        if day_delay > 0:
            who = application.interviewer_name or company
            reminders.append((
                day_delay,
                "Interview Tomorrow",
                f"Interview with {who} tomorrow at {application.interview_time}.",
            ))
        hour_delay = (interview_at - self.hour_before - now).total_seconds()
        if hour_delay > 0:
            reminders.append((
                hour_delay,
                "Interview Reminder",
                f"Your interview for {application.job_title} at {company} starts in 1 hour.",
            ))
        return reminders

    def schedule(self, application: Any) -> int:
        """
        (Re)arms the reminders of one application. Returns how many timers were started.

        Whatever is registered for the application when the new list is
        written gets cancelled, so concurrent calls leave exactly one live set.
        """
        timers = []
        if self.enabled:
            for delay, title, message in self.reminders_for(application, self.clock()):
                timer = self.timer_factory(
                    delay, self._fire, args=(application.user_id, application.id, title, message)
                )
                timer.daemon = True
                timers.append(timer)

        with self._lock:
            displaced = self._timers.pop(application.id, [])
            if timers:
                self._timers[application.id] = timers
        for timer in displaced:
            timer.cancel()
        for timer in timers:
            timer.start()

        if timers:
            logger.info("Scheduled %d interview reminder(s) for application %s", len(timers), application.id)
        return len(timers)

    def cancel(self, application_id: int) -> int:
        with self._lock:
            timers = self._timers.pop(application_id, [])
        for timer in timers:
            timer.cancel()
        if timers:
            logger.debug("Cancelled %d reminder(s) for application %s", len(timers), application_id)
        return len(timers)

    def pending(self, application_id: int) -> int:
        with self._lock:
            return len(self._timers.get(application_id, []))

    def shutdown(self) -> None:
        with self._lock:
            application_ids = list(self._timers)
        for application_id in application_ids:
            self.cancel(application_id)

    def _fire(self, user_id: int, application_id: int, title: str, message: str) -> None:
        current = threading.current_thread()
        with self._lock:
            timers = self._timers.get(application_id)
            if timers is not None and current in timers:
                timers.remove(current)
                if not timers:
                    del self._timers[application_id]
        self.feed.push(user_id, title, message, application_id=application_id)
        logger.info("Reminder fired for application %s: %s", application_id, title)
