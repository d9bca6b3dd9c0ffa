# fanbase/database/event_repository.py
import asyncpg
from contextlib import asynccontextmanager
from typing import Optional, List, Dict, Any, AsyncIterator
from datetime import datetime, timezone
import uuid
from fanbase.models import Event

EVENT_COLUMNS = """
    id, title, description, date, venue, city, country, price, ticket_url,
    image_url, is_active, is_free, is_sold_out, auto_reminder, auto_sold_out,
    announcement_sent, announcement_sent_at, reminder_sent_at, created_at
"""

# Columns an admin edit may write back
EDITABLE_COLUMNS = [
    "title", "description", "date", "venue", "city", "country", "price",
    "ticket_url", "image_url", "is_active", "is_free", "is_sold_out",
    "auto_reminder", "auto_sold_out",
]

class EventRepository:
    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def create(self, fields: Dict[str, Any]) -> Event:
        values = {column: fields[column] for column in EDITABLE_COLUMNS if column in fields}
        values["id"] = str(uuid.uuid4())
        values["created_at"] = datetime.now(timezone.utc)
        columns = list(values)
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        row = await self.conn.fetchrow(f"""
            INSERT INTO events ({", ".join(columns)}) VALUES ({placeholders})
            RETURNING {EVENT_COLUMNS}
        """, *values.values())
        return Event.model_validate(dict(row))

    async def get(self, event_id: str) -> Optional[Event]:
        row = await self.conn.fetchrow(f"SELECT {EVENT_COLUMNS} FROM events WHERE id = $1", event_id)
        return Event.model_validate(dict(row)) if row else None

    @asynccontextmanager
    async def locked(self, event_id: str) -> AsyncIterator[Optional[Event]]:
        """Read the event under a row lock held until the block exits.

        Concurrent edits of the same event queue here, so each one sees the
        state the previous edit committed.
        """
        async with self.conn.transaction():
            row = await self.conn.fetchrow(
                f"SELECT {EVENT_COLUMNS} FROM events WHERE id = $1 FOR UPDATE", event_id
            )
            yield Event.model_validate(dict(row)) if row else None

    async def list_all(self) -> List[Event]:
        rows = await self.conn.fetch(f"SELECT {EVENT_COLUMNS} FROM events ORDER BY date ASC")
        return [Event.model_validate(dict(row)) for row in rows]

    async def save(self, event: Event) -> Event:
        """Write back every editable column of an already-updated event"""
        assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(EDITABLE_COLUMNS, start=2))
        row = await self.conn.fetchrow(f"""
            UPDATE events SET {assignments} WHERE id = $1
            RETURNING {EVENT_COLUMNS}
        """, event.id, *(getattr(event, column) for column in EDITABLE_COLUMNS))
        return Event.model_validate(dict(row))

    async def delete(self, event_id: str) -> Optional[Event]:
        row = await self.conn.fetchrow(f"DELETE FROM events WHERE id = $1 RETURNING {EVENT_COLUMNS}", event_id)
        return Event.model_validate(dict(row)) if row else None

    async def find_reminder_candidates(self, start: datetime, end: datetime) -> List[Event]:
        rows = await self.conn.fetch(f"""
            SELECT {EVENT_COLUMNS} FROM events
            WHERE is_active
              AND NOT is_sold_out
              AND auto_reminder
              AND reminder_sent_at IS NULL
              AND date >= $1 AND date <= $2
            ORDER BY date ASC
        """, start, end)
        return [Event.model_validate(dict(row)) for row in rows]

    async def mark_reminder_sent(self, event_id: str, sent_at: datetime) -> None:
        await self.conn.execute("UPDATE events SET reminder_sent_at = $2 WHERE id = $1", event_id, sent_at)

    async def mark_announcement_sent(self, event_id: str, sent_at: datetime) -> None:
        await self.conn.execute(
            "UPDATE events SET announcement_sent = true, announcement_sent_at = $2 WHERE id = $1",
            event_id, sent_at
        )
