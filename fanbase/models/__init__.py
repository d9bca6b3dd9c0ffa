# fanbase/models/__init__.py
from .tables import Base
from .domain import (
    CamelModel,
    Subscriber,
    Message,
    VisitorLog,
    SystemLog,
    Event,
    SiteSettings,
    EmailSignature,
    GeoLocation,
)

__all__ = [
    "Base",
    "CamelModel",
    "Subscriber",
    "Message",
    "VisitorLog",
    "SystemLog",
    "Event",
    "SiteSettings",
    "EmailSignature",
    "GeoLocation",
]
