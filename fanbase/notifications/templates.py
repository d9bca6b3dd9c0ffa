# fanbase/notifications/templates.py
from enum import Enum
from typing import Dict, Optional
from jinja2 import Undefined
from jinja2.exceptions import TemplateError
from jinja2.sandbox import SandboxedEnvironment
from fanbase.errors import InputValidationError
from fanbase.models import Event, SiteSettings

class NotificationKind(str, Enum):
    ANNOUNCEMENT = "announcement"
    REMINDER = "reminder"
    SOLD_OUT = "sold_out"

SUBJECTS = {
    NotificationKind.ANNOUNCEMENT: "🎵 New Event: {title}",
    NotificationKind.REMINDER: "⏰ Reminder: {title} is in 1 week!",
    NotificationKind.SOLD_OUT: "🔥 {title} is Sold Out!",
}

TEMPLATE_FIELDS = {
    NotificationKind.ANNOUNCEMENT: "announcement_template",
    NotificationKind.REMINDER: "reminder_template",
    NotificationKind.SOLD_OUT: "sold_out_template",
}

class KeepUnknownToken(Undefined):
    """Renders an unknown variable back as the token the admin wrote"""

    def __str__(self) -> str:
        return "{{" + (self._undefined_name or "") + "}}"

    def __html__(self) -> str:
        return str(self)

# Templates are edited in the admin UI, so they run sandboxed
template_env = SandboxedEnvironment(autoescape=True, undefined=KeepUnknownToken)

def subject_for(kind: NotificationKind, event: Event) -> str:
    return SUBJECTS[kind].format(title=event.title)

def template_for(kind: NotificationKind, site_settings: Optional[SiteSettings]) -> Optional[str]:
    if site_settings is None:
        return None
    return getattr(site_settings, TEMPLATE_FIELDS[kind]) or None

def event_variables(event: Event) -> Dict[str, str]:
    # e.g. "Saturday, March 14, 2026" and "08:30 PM"
    date = event.date
    return {
        "event_title": event.title,
        "event_date": f"{date:%A}, {date:%B} {date.day}, {date.year}",
        "event_time": f"{date:%I:%M %p}",
        "event_venue": event.venue,
        "event_city": event.city,
        "event_country": event.country or "",
        "event_price": event.price or "TBA",
        "event_description": event.description or "",
        "event_image_url": event.image_url or "",
        "ticket_link": event.ticket_url or "",
    }

def render_template(template: str, variables: Dict[str, str]) -> str:
    """Render {{ name }} tokens with escaped values; unknown tokens stay in the output"""
    try:
        return template_env.from_string(template).render(**variables)
    except TemplateError as e:
        raise InputValidationError(f"Email template could not be rendered: {e}", code="invalid_template")
