# fanbase/database/message_repository.py
import asyncpg
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime, timezone
import uuid
from fanbase.models import Message, GeoLocation
import logging

logger = logging.getLogger(__name__)

MESSAGE_COLUMNS = """
    id, name, email, message, country, city, country_code, ip_address,
    is_read, replied, replied_at, reply_text, created_at
"""

SORT_ORDERS = {
    "newest": "created_at DESC",
    "oldest": "created_at ASC",
    "name": "name ASC, created_at DESC",
    "country": "country ASC NULLS LAST, created_at DESC",
}

FROM_SUBSCRIBER = "email IN (SELECT email FROM subscribers WHERE is_active)"

class MessageRepository:
    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def create(
        self,
        name: str,
        email: str,
        message: str,
        location: GeoLocation,
        ip_address: Optional[str]
    ) -> Message:
        row = await self.conn.fetchrow(f"""
            INSERT INTO messages (
                id, name, email, message, country, city, country_code,
                ip_address, created_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING {MESSAGE_COLUMNS}
        """,
            str(uuid.uuid4()),
            name,
            email,
            message,
            location.country,
            location.city,
            location.country_code,
            ip_address,
            datetime.now(timezone.utc)
        )
        logger.info(f"Stored contact message from {email}")
        return Message.model_validate(dict(row))

    async def get(self, message_id: str) -> Optional[Message]:
        row = await self.conn.fetchrow(
            f"SELECT {MESSAGE_COLUMNS} FROM messages WHERE id = $1", message_id
        )
        return Message.model_validate(dict(row)) if row else None

    async def exists_with_ip(self, ip_address: str) -> bool:
        return await self.conn.fetchval(
            "SELECT EXISTS(SELECT 1 FROM messages WHERE ip_address = $1)", ip_address
        )

    async def search(
        self,
        search: Optional[str] = None,
        filter: str = "all",
        country: Optional[str] = None,
        sort: str = "newest",
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Message], int]:
        conditions = []
        params: List[Any] = []

        if search:
            params.append(f"%{search}%")
            n = len(params)
            conditions.append(
                f"(name ILIKE ${n} OR email ILIKE ${n} OR message ILIKE ${n} OR country ILIKE ${n})"
            )
        if country:
            params.append(country)
            conditions.append(f"country = ${len(params)}")
        if filter == "unanswered":
            conditions.append("NOT replied")
        elif filter == "fromSubscribers":
            conditions.append(FROM_SUBSCRIBER)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        total = await self.conn.fetchval(f"SELECT COUNT(*) FROM messages {where}", *params)

        order = SORT_ORDERS.get(sort, SORT_ORDERS["newest"])
        params.extend([limit, (page - 1) * limit])
        rows = await self.conn.fetch(f"""
            SELECT {MESSAGE_COLUMNS} FROM messages {where}
            ORDER BY {order}
            LIMIT ${len(params) - 1} OFFSET ${len(params)}
        """, *params)
        return [Message.model_validate(dict(row)) for row in rows], total

    async def stats(self) -> Dict[str, int]:
        row = await self.conn.fetchrow(f"""
            SELECT COUNT(*) AS total,
                   COUNT(*) FILTER (WHERE NOT replied) AS unanswered,
                   COUNT(*) FILTER (WHERE {FROM_SUBSCRIBER}) AS from_subscribers
            FROM messages
        """)
        return dict(row)

    async def available_countries(self) -> List[str]:
        rows = await self.conn.fetch(
            "SELECT DISTINCT country FROM messages WHERE country IS NOT NULL ORDER BY country"
        )
        return [row["country"] for row in rows]

    async def set_read(self, message_id: str, is_read: bool) -> Optional[Message]:
        row = await self.conn.fetchrow(f"""
            UPDATE messages SET is_read = $2 WHERE id = $1
            RETURNING {MESSAGE_COLUMNS}
        """, message_id, is_read)
        return Message.model_validate(dict(row)) if row else None

    async def mark_all_read(self) -> int:
        result = await self.conn.execute("UPDATE messages SET is_read = true WHERE NOT is_read")
        # asyncpg returns a status string such as "UPDATE 4"
        return int(result.split()[-1])

    async def mark_replied(self, message_id: str, reply_text: str, replied_at: datetime) -> Optional[Message]:
        row = await self.conn.fetchrow(f"""
            UPDATE messages
               SET replied = true, is_read = true, reply_text = $2, replied_at = $3
             WHERE id = $1
            RETURNING {MESSAGE_COLUMNS}
        """, message_id, reply_text, replied_at)
        return Message.model_validate(dict(row)) if row else None

    async def delete(self, message_id: str) -> Optional[Message]:
        row = await self.conn.fetchrow(
            f"DELETE FROM messages WHERE id = $1 RETURNING {MESSAGE_COLUMNS}", message_id
        )
        return Message.model_validate(dict(row)) if row else None
