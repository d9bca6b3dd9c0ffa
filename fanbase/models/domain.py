# fanbase/models/domain.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
from fanbase.models.audit import LogLevel, AuditAction


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for the web client"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeoLocation(CamelModel):
    country: Optional[str] = None
    city: Optional[str] = None
    country_code: Optional[str] = None
    # Set when the lookup was skipped or failed; never sent to clients
    degraded: Optional[str] = None

    @classmethod
    def unknown(cls, reason: str) -> "GeoLocation":
        return cls(degraded=reason)

    @property
    def is_degraded(self) -> bool:
        return self.degraded is not None


class Subscriber(CamelModel):
    id: str
    email: str
    receive_event_alerts: bool = True
    is_active: bool = True
    unsubscribe_token: Optional[str] = None
    unsubscribe_reason: Optional[str] = None
    unsubscribed_at: Optional[datetime] = None
    joined_at: datetime
    country: Optional[str] = None
    city: Optional[str] = None
    country_code: Optional[str] = None
    ip_address: Optional[str] = None


class Message(CamelModel):
    id: str
    name: str
    email: str
    message: str
    country: Optional[str] = None
    city: Optional[str] = None
    country_code: Optional[str] = None
    ip_address: Optional[str] = None
    is_read: bool = False
    replied: bool = False
    replied_at: Optional[datetime] = None
    reply_text: Optional[str] = None
    created_at: datetime


class VisitorLog(CamelModel):
    id: str
    visitor_hash: str
    country: Optional[str] = None
    city: Optional[str] = None
    user_agent: Optional[str] = None
    is_subscriber: bool = False
    has_messaged: bool = False
    visited_at: datetime


class SystemLog(CamelModel):
    id: str
    level: LogLevel = LogLevel.INFO
    action: AuditAction
    username: str
    details: str
    user_id: Optional[int] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime


class Event(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    date: datetime
    venue: str
    city: str
    country: Optional[str] = None
    price: Optional[str] = None
    ticket_url: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    is_free: bool = False
    is_sold_out: bool = False
    auto_reminder: bool = True
    auto_sold_out: bool = True
    announcement_sent: bool = False
    announcement_sent_at: Optional[datetime] = None
    reminder_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class SiteSettings(CamelModel):
    id: Optional[str] = None
    announcement_template: Optional[str] = None
    reminder_template: Optional[str] = None
    sold_out_template: Optional[str] = None


class EmailSignature(CamelModel):
    id: Optional[str] = None
    logo_url: Optional[str] = None
    content: Optional[str] = None
    updated_at: Optional[datetime] = None
