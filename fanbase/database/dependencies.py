# fanbase/database/dependencies.py
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional, AsyncContextManager
from fanbase.database.connection import db_connection, get_db_connection, release_db_connection
from fanbase.database.subscriber_repository import SubscriberRepository
from fanbase.database.message_repository import MessageRepository
from fanbase.database.visitor_repository import VisitorLogRepository
from fanbase.database.system_log_repository import SystemLogRepository
from fanbase.database.event_repository import EventRepository
from fanbase.database.settings_repository import SettingsRepository
import logging

logger = logging.getLogger(__name__)

@dataclass
class Repositories:
    subscribers: SubscriberRepository
    messages: MessageRepository
    visits: VisitorLogRepository
    logs: SystemLogRepository
    events: EventRepository
    settings: SettingsRepository

    @classmethod
    def for_connection(cls, connection) -> "Repositories":
        return cls(
            subscribers=SubscriberRepository(connection),
            messages=MessageRepository(connection),
            visits=VisitorLogRepository(connection),
            logs=SystemLogRepository(connection),
            events=EventRepository(connection),
            settings=SettingsRepository(connection),
        )

RepositorySession = Callable[[], AsyncContextManager[Repositories]]

@asynccontextmanager
async def repository_session() -> AsyncIterator[Repositories]:
    """Repositories bound to a connection of their own, for work outliving a request"""
    async with db_connection() as connection:
        yield Repositories.for_connection(connection)

def get_repository_session() -> RepositorySession:
    return repository_session

async def get_repositories() -> AsyncIterator[Repositories]:
    """Request-scoped repositories sharing one pooled connection"""
    async with repository_session() as repositories:
        yield repositories

async def get_optional_repositories() -> AsyncIterator[Optional[Repositories]]:
    """Like get_repositories, but yields None when the database is unreachable"""
    try:
        connection = await get_db_connection()
    except Exception as e:
        logger.warning(f"Database unavailable, continuing without persistence: {e}")
        yield None
        return
    try:
        yield Repositories.for_connection(connection)
    finally:
        await release_db_connection(connection)
