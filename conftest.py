# conftest.py - shared fixtures: in-memory repositories and fake collaborators
import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

import httpx
import pytest

from fanbase.audit import AuditLogger, get_audit_logger
from fanbase.auth.models import AdminUser
from fanbase.auth.tokens import create_access_token
from fanbase.database.dependencies import (
    Repositories,
    get_optional_repositories,
    get_repositories,
    get_repository_session,
)
from fanbase.errors import DuplicateRecordError
from fanbase.main import app
from fanbase.models import (
    EmailSignature,
    Event,
    GeoLocation,
    Message,
    SiteSettings,
    Subscriber,
    SystemLog,
    VisitorLog,
)
from fanbase.models.audit import LogLevel
from fanbase.notifications.dispatcher import NotificationDispatcher
from fanbase.services.email_service import OutgoingEmail, SendResult, get_email_service
from fanbase.services.geolocation_service import get_geolocation_service
from fanbase.services.storage_service import UploadStorage, get_upload_storage
from fanbase.utils.rate_limiting import (
    RateLimiter,
    get_contact_limiter,
    get_subscribe_limiter,
    get_visit_limiter,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _page(items: list, page: int, limit: Optional[int]) -> list:
    if limit is None:
        return items
    start = (page - 1) * limit
    return items[start:start + limit]


class FakeSubscriberRepository:
    def __init__(self):
        self.rows: Dict[str, Subscriber] = {}

    def add(self, **fields) -> Subscriber:
        fields.setdefault("id", str(uuid.uuid4()))
        fields.setdefault("joined_at", _now())
        subscriber = Subscriber(**fields)
        self.rows[subscriber.id] = subscriber
        return subscriber

    def _update(self, subscriber_id: str, **changes) -> Subscriber:
        self.rows[subscriber_id] = self.rows[subscriber_id].model_copy(update=changes)
        return self.rows[subscriber_id]

    async def get_by_email(self, email):
        return next((s for s in self.rows.values() if s.email == email), None)

    async def get_by_token(self, token):
        return next((s for s in self.rows.values() if s.unsubscribe_token == token), None)

    async def create(self, email, receive_event_alerts, unsubscribe_token, location, ip_address):
        if await self.get_by_email(email):
            raise DuplicateRecordError(f"Subscriber already exists: {email}")
        return self.add(
            email=email,
            receive_event_alerts=receive_event_alerts,
            unsubscribe_token=unsubscribe_token,
            country=location.country,
            city=location.city,
            country_code=location.country_code,
            ip_address=ip_address,
        )

    async def update_preference(self, subscriber_id, receive_event_alerts):
        return self._update(subscriber_id, receive_event_alerts=receive_event_alerts)

    async def reactivate(self, subscriber_id, receive_event_alerts):
        return self._update(
            subscriber_id,
            is_active=True,
            unsubscribe_reason=None,
            receive_event_alerts=receive_event_alerts,
        )

    async def assign_token(self, subscriber_id, token):
        self._update(subscriber_id, unsubscribe_token=token)

    async def deactivate(self, subscriber_id, reason, unsubscribed_at):
        return self._update(
            subscriber_id,
            is_active=False,
            unsubscribe_reason=reason,
            unsubscribed_at=unsubscribed_at,
        )

    async def exists_active_with_ip(self, ip_address):
        return any(s.is_active and s.ip_address == ip_address for s in self.rows.values())

    async def list_event_alert_recipients(self):
        return [s for s in self.rows.values() if s.is_active and s.receive_event_alerts]

    async def count_event_alert_recipients(self):
        return len(await self.list_event_alert_recipients())

    async def search(self, status="all", country=None, search=None, page=1, limit=20):
        matches = list(self.rows.values())
        if status == "active":
            matches = [s for s in matches if s.is_active]
        elif status == "unsubscribed":
            matches = [s for s in matches if not s.is_active]
        if country:
            matches = [s for s in matches if s.country == country]
        if search:
            matches = [s for s in matches if search.lower() in s.email]
        matches.sort(key=lambda s: s.joined_at, reverse=True)
        return _page(matches, page, limit), len(matches)

    async def stats(self):
        rows = list(self.rows.values())
        return {
            "total": len(rows),
            "event_fans": sum(1 for s in rows if s.is_active and s.receive_event_alerts),
            "unsubscribed": sum(1 for s in rows if not s.is_active),
            "top_countries": [],
            "available_countries": sorted({s.country for s in rows if s.country}),
        }

    async def emails_in(self, emails):
        active = {s.email for s in self.rows.values() if s.is_active}
        return [email for email in emails if email in active]

    async def delete(self, subscriber_id):
        return self.rows.pop(subscriber_id, None)


class FakeMessageRepository:
    def __init__(self):
        self.rows: Dict[str, Message] = {}
        self.fail_on_create = False

    async def create(self, name, email, message, location, ip_address):
        if self.fail_on_create:
            raise ConnectionError("database went away")
        stored = Message(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            message=message,
            country=location.country,
            city=location.city,
            country_code=location.country_code,
            ip_address=ip_address,
            created_at=_now(),
        )
        self.rows[stored.id] = stored
        return stored

    async def get(self, message_id):
        return self.rows.get(message_id)

    async def exists_with_ip(self, ip_address):
        return any(m.ip_address == ip_address for m in self.rows.values())

    async def search(self, search=None, filter="all", country=None, sort="newest", page=1, limit=20):
        matches = sorted(self.rows.values(), key=lambda m: m.created_at, reverse=True)
        if filter == "unanswered":
            matches = [m for m in matches if not m.replied]
        return _page(matches, page, limit), len(matches)

    async def stats(self):
        return {
            "total": len(self.rows),
            "unanswered": sum(1 for m in self.rows.values() if not m.replied),
            "from_subscribers": 0,
        }

    async def available_countries(self):
        return sorted({m.country for m in self.rows.values() if m.country})

    async def set_read(self, message_id, is_read):
        if message_id not in self.rows:
            return None
        self.rows[message_id] = self.rows[message_id].model_copy(update={"is_read": is_read})
        return self.rows[message_id]

    async def mark_all_read(self):
        unread = [m for m in self.rows.values() if not m.is_read]
        for message in unread:
            self.rows[message.id] = message.model_copy(update={"is_read": True})
        return len(unread)

    async def mark_replied(self, message_id, reply_text, replied_at):
        self.rows[message_id] = self.rows[message_id].model_copy(update={
            "replied": True,
            "is_read": True,
            "reply_text": reply_text,
            "replied_at": replied_at,
        })
        return self.rows[message_id]

    async def delete(self, message_id):
        return self.rows.pop(message_id, None)


class FakeVisitorLogRepository:
    def __init__(self):
        self.rows: List[VisitorLog] = []

    async def append(self, visitor_hash, location, user_agent, is_subscriber, has_messaged):
        row = VisitorLog(
            id=str(uuid.uuid4()),
            visitor_hash=visitor_hash,
            country=location.country,
            city=location.city,
            user_agent=user_agent,
            is_subscriber=is_subscriber,
            has_messaged=has_messaged,
            visited_at=_now(),
        )
        self.rows.append(row)
        return row

    async def summary(self, since, country=None, page=1, limit=50):
        rows = [r for r in self.rows if r.visited_at >= since and (not country or r.country == country)]
        groups: Dict[tuple, list] = {}
        for row in rows:
            groups.setdefault((row.visitor_hash, row.country, row.city), []).append(row)
        visitors = [
            {
                "visitor_hash": key[0],
                "country": key[1],
                "city": key[2],
                "last_visit": max(r.visited_at for r in members),
                "visit_count": len(members),
                "is_subscriber": any(r.is_subscriber for r in members),
                "has_messaged": any(r.has_messaged for r in members),
            }
            for key, members in groups.items()
        ]
        hashes = {r.visitor_hash for r in rows}
        return {
            "visitors": _page(visitors, page, limit),
            "totals": {
                "total_visits": len(rows),
                "unique_visitors": len(hashes),
                "subscribers_count": len({r.visitor_hash for r in rows if r.is_subscriber}),
                "messages_count": len({r.visitor_hash for r in rows if r.has_messaged}),
            },
            "top_countries": [],
        }


class FakeSystemLogRepository:
    def __init__(self):
        self.rows: List[SystemLog] = []
        self.fail = False

    async def insert(self, level, action, username, details, user_id=None, ip_address=None, user_agent=None):
        if self.fail:
            raise ConnectionError("system_logs unavailable")
        self.rows.append(SystemLog(
            id=str(uuid.uuid4()),
            level=level,
            action=action,
            username=username,
            details=details,
            user_id=user_id,
            ip_address=ip_address,
            user_agent=user_agent,
            timestamp=_now(),
        ))

    async def search(self, level=None, action=None, username=None, start_date=None, end_date=None, page=1, limit=50):
        matches = [
            log for log in reversed(self.rows)
            if (level is None or log.level == level)
            and (action is None or action.lower() in log.action.value.lower())
            and (username is None or username.lower() in log.username.lower())
        ]
        return _page(matches, page, limit), len(matches)

    async def level_counts(self):
        counts = {level.value: 0 for level in LogLevel}
        for log in self.rows:
            counts[log.level.value] += 1
        return counts

    async def delete_older_than(self, cutoff):
        before = len(self.rows)
        self.rows = [log for log in self.rows if log.timestamp >= cutoff]
        return before - len(self.rows)

    async def delete_all(self):
        count = len(self.rows)
        self.rows = []
        return count


class FakeEventRepository:
    def __init__(self):
        self.rows: Dict[str, Event] = {}
        self.locks: Dict[str, asyncio.Lock] = {}

    async def create(self, fields):
        event = Event(id=str(uuid.uuid4()), created_at=_now(), **fields)
        self.rows[event.id] = event
        return event

    async def get(self, event_id):
        return self.rows.get(event_id)

    @asynccontextmanager
    async def locked(self, event_id):
        async with self.locks.setdefault(event_id, asyncio.Lock()):
            before = self.rows.get(event_id)
            # hand the loop to competing requests while the lock is held
            await asyncio.sleep(0)
            yield before

    async def list_all(self):
        return sorted(self.rows.values(), key=lambda e: e.date)

    async def save(self, event):
        self.rows[event.id] = event
        return event

    async def delete(self, event_id):
        return self.rows.pop(event_id, None)

    async def find_reminder_candidates(self, start, end):
        return [
            e for e in self.rows.values()
            if e.is_active and not e.is_sold_out and e.auto_reminder
            and e.reminder_sent_at is None and start <= e.date <= end
        ]

    async def mark_reminder_sent(self, event_id, sent_at):
        self.rows[event_id] = self.rows[event_id].model_copy(update={"reminder_sent_at": sent_at})

    async def mark_announcement_sent(self, event_id, sent_at):
        self.rows[event_id] = self.rows[event_id].model_copy(
            update={"announcement_sent": True, "announcement_sent_at": sent_at}
        )


class FakeSettingsRepository:
    def __init__(self):
        self.site_settings: Optional[SiteSettings] = SiteSettings(
            id="settings",
            announcement_template="<h1>{{event_title}}</h1><p>{{ event_venue }}, {{event_city}}</p>",
            reminder_template="<p>{{event_title}} is next week at {{event_venue}}</p>",
            sold_out_template="<p>{{event_title}} is sold out</p>",
        )
        self.signature: Optional[EmailSignature] = None

    async def get_site_settings(self):
        return self.site_settings

    async def save_templates(self, templates):
        base = self.site_settings or SiteSettings(id="settings")
        updates = {k: v for k, v in templates.model_dump(exclude={"id"}).items() if v is not None}
        self.site_settings = base.model_copy(update=updates)
        return self.site_settings

    async def get_signature(self):
        return self.signature

    async def save_signature(self, logo_url, content):
        self.signature = EmailSignature(id=str(uuid.uuid4()), logo_url=logo_url, content=content, updated_at=_now())
        return self.signature


class FakeEmailService:
    def __init__(self):
        self.sent: List[OutgoingEmail] = []
        self.fail_for = set()

    async def send(self, email):
        if email.to_email in self.fail_for:
            return SendResult(success=False, to_email=email.to_email, error="Email rejected: mailbox unavailable")
        self.sent.append(email)
        return SendResult(success=True, to_email=email.to_email, message_id=f"msg-{len(self.sent)}")


class FakeGeolocation:
    def __init__(self):
        self.location = GeoLocation(country="Germany", city="Berlin", country_code="DE")
        self.calls: List[str] = []

    async def resolve(self, ip):
        self.calls.append(ip)
        return self.location


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def session_for(repositories: Repositories):
    @asynccontextmanager
    async def session():
        yield repositories
    return session


async def no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repositories():
    return Repositories(
        subscribers=FakeSubscriberRepository(),
        messages=FakeMessageRepository(),
        visits=FakeVisitorLogRepository(),
        logs=FakeSystemLogRepository(),
        events=FakeEventRepository(),
        settings=FakeSettingsRepository(),
    )


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def geolocation():
    return FakeGeolocation()


@pytest.fixture
def audit(repositories):
    return AuditLogger(session_for(repositories))


@pytest.fixture
def dispatcher(email_service, repositories):
    return NotificationDispatcher(email_service, session_for(repositories), sleep=no_sleep)


@pytest.fixture
def limiters(clock):
    return {
        "contact": RateLimiter(3, 60, clock=clock),
        "subscribe": RateLimiter(3, 60, clock=clock),
        "visit": RateLimiter(1, 300, clock=clock),
    }


@pytest.fixture
async def client(repositories, email_service, geolocation, audit, limiters, tmp_path):
    """ASGI client with every external collaborator replaced by an in-memory fake"""
    async def override_repositories():
        return repositories

    app.dependency_overrides.update({
        get_repositories: override_repositories,
        get_optional_repositories: override_repositories,
        get_repository_session: lambda: session_for(repositories),
        get_email_service: lambda: email_service,
        get_geolocation_service: lambda: geolocation,
        get_audit_logger: lambda: audit,
        get_upload_storage: lambda: UploadStorage(str(tmp_path)),
        get_contact_limiter: lambda: limiters["contact"],
        get_subscribe_limiter: lambda: limiters["subscribe"],
        get_visit_limiter: lambda: limiters["visit"],
    })
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    await audit.drain()
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_access_token(AdminUser(username="admin", user_id=1))
    return {"Authorization": f"Bearer {token}"}
