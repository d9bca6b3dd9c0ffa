# fanbase/models/tables.py
from sqlalchemy import Column, String, DateTime, Boolean, Text, Integer, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
import uuid

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class SubscriberTable(Base):
    __tablename__ = "subscribers"

    id = Column(String, primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    receive_event_alerts = Column(Boolean, nullable=False, server_default="true")
    is_active = Column(Boolean, nullable=False, server_default="true")
    unsubscribe_token = Column(String(64), unique=True, nullable=True)
    unsubscribe_reason = Column(Text, nullable=True)
    unsubscribed_at = Column(DateTime(timezone=True), nullable=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    country_code = Column(String(8), nullable=True)
    ip_address = Column(String(64), nullable=True, index=True)


class MessageTable(Base):
    __tablename__ = "messages"

    id = Column(String, primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    message = Column(Text, nullable=False)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    country_code = Column(String(8), nullable=True)
    ip_address = Column(String(64), nullable=True, index=True)
    is_read = Column(Boolean, nullable=False, server_default="false")
    replied = Column(Boolean, nullable=False, server_default="false")
    replied_at = Column(DateTime(timezone=True), nullable=True)
    reply_text = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class VisitorLogTable(Base):
    __tablename__ = "visitor_logs"

    id = Column(String, primary_key=True, default=_uuid)
    visitor_hash = Column(String(64), nullable=False, index=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    user_agent = Column(String(500), nullable=True)
    is_subscriber = Column(Boolean, nullable=False, server_default="false")
    has_messaged = Column(Boolean, nullable=False, server_default="false")
    visited_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)


class SystemLogTable(Base):
    __tablename__ = "system_logs"

    id = Column(String, primary_key=True, default=_uuid)
    level = Column(String(8), nullable=False, server_default="INFO")
    action = Column(String(64), nullable=False)
    username = Column(String(255), nullable=False)
    details = Column(Text, nullable=False)
    user_id = Column(Integer, nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_system_logs_level_timestamp", "level", "timestamp"),
    )


class EventTable(Base):
    __tablename__ = "events"

    id = Column(String, primary_key=True, default=_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    venue = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    country = Column(String(100), nullable=True)
    price = Column(String(64), nullable=True)
    ticket_url = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, server_default="true")
    is_free = Column(Boolean, nullable=False, server_default="false")
    is_sold_out = Column(Boolean, nullable=False, server_default="false")
    auto_reminder = Column(Boolean, nullable=False, server_default="true")
    auto_sold_out = Column(Boolean, nullable=False, server_default="true")
    announcement_sent = Column(Boolean, nullable=False, server_default="false")
    announcement_sent_at = Column(DateTime(timezone=True), nullable=True)
    reminder_sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SiteSettingsTable(Base):
    __tablename__ = "site_settings"

    id = Column(String, primary_key=True, default=_uuid)
    announcement_template = Column(Text, nullable=True)
    reminder_template = Column(Text, nullable=True)
    sold_out_template = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class EmailSignatureTable(Base):
    __tablename__ = "email_signatures"

    id = Column(String, primary_key=True, default=_uuid)
    logo_url = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
