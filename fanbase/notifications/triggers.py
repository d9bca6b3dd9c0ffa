# fanbase/notifications/triggers.py
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Set, Tuple
from pydantic import ValidationError
from fanbase.config import settings
from fanbase.database.dependencies import RepositorySession
from fanbase.errors import InputValidationError
from fanbase.models import CamelModel, Event
from fanbase.notifications.dispatcher import DispatchResult, NotificationDispatcher
from fanbase.notifications.templates import NotificationKind

logger = logging.getLogger(__name__)

# Sends that outlived their request keep a strong reference here until done
_background_sends: Set[asyncio.Task] = set()

def apply_event_changes(before: Event, changes: Dict[str, Any]) -> Event:
    """Return the event with changes applied and re-validated; `before` is left untouched"""
    try:
        return Event.model_validate({**before.model_dump(), **changes})
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "event"
        raise InputValidationError(f"{field}: {first['msg']}", code="invalid_event")

def detect_event_notifications(before: Event, after: Event) -> List[NotificationKind]:
    """Notifications owed for an admin edit that turned `before` into `after`"""
    kinds = []
    if after.auto_sold_out and after.is_sold_out and not before.is_sold_out:
        kinds.append(NotificationKind.SOLD_OUT)
    return kinds

async def dispatch_with_timeout(
    dispatcher: NotificationDispatcher,
    kind: NotificationKind,
    event: Event,
    timeout: float = settings.notification_timeout_seconds
) -> Optional[DispatchResult]:
    """Await a send for at most `timeout` seconds.

    On timeout the send keeps running in the background and None is returned.
    """
    task = asyncio.ensure_future(dispatcher.send_event_email(kind, event))
    _background_sends.add(task)
    task.add_done_callback(_background_sends.discard)
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{kind.value} for event {event.id} still sending after {timeout}s")
        return None

def reminder_window(now: datetime, days_ahead: int = settings.reminder_days_ahead) -> Tuple[datetime, datetime]:
    """First and last instant of the calendar day `days_ahead` after `now`"""
    target = now + timedelta(days=days_ahead)
    start = target.replace(hour=0, minute=0, second=0, microsecond=0)
    end = target.replace(hour=23, minute=59, second=59, microsecond=999999)
    return start, end

class ReminderResult(CamelModel):
    event_id: str
    event_title: str
    success: bool
    recipient_count: int
    error: Optional[str] = None

async def run_reminder_sweep(
    dispatcher: NotificationDispatcher,
    session: RepositorySession,
    now: Optional[datetime] = None
) -> List[ReminderResult]:
    """Send the one-week reminder for every eligible event not yet reminded"""
    now = now or datetime.now(timezone.utc)
    start, end = reminder_window(now)

    async with session() as repositories:
        events = await repositories.events.find_reminder_candidates(start, end)
    logger.info(f"Reminder sweep found {len(events)} events between {start} and {end}")

    results = []
    for event in events:
        outcome = await dispatcher.send_event_email(NotificationKind.REMINDER, event)
        if outcome.success:
            async with session() as repositories:
                await repositories.events.mark_reminder_sent(event.id, now)
        results.append(ReminderResult(
            event_id=event.id,
            event_title=event.title,
            success=outcome.success,
            recipient_count=outcome.recipient_count,
            error=outcome.error,
        ))
    return results
