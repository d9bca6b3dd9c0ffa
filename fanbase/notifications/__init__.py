# fanbase/notifications/__init__.py
from .templates import NotificationKind, render_template, event_variables
from .dispatcher import NotificationDispatcher, DispatchResult, ReplyResult
from .triggers import (
    apply_event_changes,
    detect_event_notifications,
    dispatch_with_timeout,
    run_reminder_sweep,
)

__all__ = [
    "NotificationKind",
    "render_template",
    "event_variables",
    "NotificationDispatcher",
    "DispatchResult",
    "ReplyResult",
    "apply_event_changes",
    "detect_event_notifications",
    "dispatch_with_timeout",
    "run_reminder_sweep",
]
