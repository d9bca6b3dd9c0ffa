# fanbase/database/subscriber_repository.py
import asyncpg
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime, timezone
import uuid
from fanbase.errors import DuplicateRecordError
from fanbase.models import Subscriber, GeoLocation
import logging

logger = logging.getLogger(__name__)

SUBSCRIBER_COLUMNS = """
    id, email, receive_event_alerts, is_active, unsubscribe_token,
    unsubscribe_reason, unsubscribed_at, joined_at, country, city,
    country_code, ip_address
"""

class SubscriberRepository:
    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def get_by_email(self, email: str) -> Optional[Subscriber]:
        row = await self.conn.fetchrow(
            f"SELECT {SUBSCRIBER_COLUMNS} FROM subscribers WHERE email = $1",
            email
        )
        return Subscriber.model_validate(dict(row)) if row else None

    async def get_by_token(self, token: str) -> Optional[Subscriber]:
        row = await self.conn.fetchrow(
            f"SELECT {SUBSCRIBER_COLUMNS} FROM subscribers WHERE unsubscribe_token = $1",
            token
        )
        return Subscriber.model_validate(dict(row)) if row else None

    async def create(
        self,
        email: str,
        receive_event_alerts: bool,
        unsubscribe_token: str,
        location: GeoLocation,
        ip_address: Optional[str]
    ) -> Subscriber:
        """Insert a new active subscriber"""
        try:
            row = await self.conn.fetchrow(f"""
                INSERT INTO subscribers (
                    id, email, receive_event_alerts, is_active, unsubscribe_token,
                    country, city, country_code, ip_address, joined_at
                ) VALUES ($1, $2, $3, true, $4, $5, $6, $7, $8, $9)
                RETURNING {SUBSCRIBER_COLUMNS}
            """,
                str(uuid.uuid4()),
                email,
                receive_event_alerts,
                unsubscribe_token,
                location.country,
                location.city,
                location.country_code,
                ip_address,
                datetime.now(timezone.utc)
            )
            logger.info(f"Created subscriber: {email}")
            return Subscriber.model_validate(dict(row))
        except asyncpg.UniqueViolationError:
            logger.warning(f"Subscriber already exists: {email}")
            raise DuplicateRecordError(f"Subscriber already exists: {email}")

    async def update_preference(self, subscriber_id: str, receive_event_alerts: bool) -> Subscriber:
        row = await self.conn.fetchrow(f"""
            UPDATE subscribers SET receive_event_alerts = $2
            WHERE id = $1
            RETURNING {SUBSCRIBER_COLUMNS}
        """, subscriber_id, receive_event_alerts)
        return Subscriber.model_validate(dict(row))

    async def reactivate(self, subscriber_id: str, receive_event_alerts: bool) -> Subscriber:
        """Flip an inactive subscriber back to active, keeping token and history"""
        row = await self.conn.fetchrow(f"""
            UPDATE subscribers
               SET is_active = true,
                   unsubscribe_reason = NULL,
                   receive_event_alerts = $2
             WHERE id = $1
            RETURNING {SUBSCRIBER_COLUMNS}
        """, subscriber_id, receive_event_alerts)
        logger.info(f"Reactivated subscriber: {row['email']}")
        return Subscriber.model_validate(dict(row))

    async def assign_token(self, subscriber_id: str, token: str) -> None:
        await self.conn.execute(
            "UPDATE subscribers SET unsubscribe_token = $2 WHERE id = $1",
            subscriber_id, token
        )

    async def deactivate(
        self,
        subscriber_id: str,
        reason: Optional[str],
        unsubscribed_at: datetime
    ) -> Subscriber:
        row = await self.conn.fetchrow(f"""
            UPDATE subscribers
               SET is_active = false,
                   unsubscribe_reason = $2,
                   unsubscribed_at = $3
             WHERE id = $1
            RETURNING {SUBSCRIBER_COLUMNS}
        """, subscriber_id, reason, unsubscribed_at)
        return Subscriber.model_validate(dict(row))

    async def exists_active_with_ip(self, ip_address: str) -> bool:
        return await self.conn.fetchval(
            "SELECT EXISTS(SELECT 1 FROM subscribers WHERE ip_address = $1 AND is_active)",
            ip_address
        )

    async def list_event_alert_recipients(self) -> List[Subscriber]:
        rows = await self.conn.fetch(f"""
            SELECT {SUBSCRIBER_COLUMNS} FROM subscribers
            WHERE is_active AND receive_event_alerts
            ORDER BY joined_at
        """)
        return [Subscriber.model_validate(dict(row)) for row in rows]

    async def count_event_alert_recipients(self) -> int:
        return await self.conn.fetchval(
            "SELECT COUNT(*) FROM subscribers WHERE is_active AND receive_event_alerts"
        )

    async def search(
        self,
        status: str = "all",
        country: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = 20
    ) -> Tuple[List[Subscriber], int]:
        """Filtered, paginated listing. A limit of None returns every match."""
        conditions = []
        params: List[Any] = []

        if status == "active":
            conditions.append("is_active")
        elif status == "unsubscribed":
            conditions.append("NOT is_active")

        if country:
            params.append(country)
            conditions.append(f"country = ${len(params)}")

        if search:
            params.append(f"%{search.lower()}%")
            conditions.append(
                f"(email ILIKE ${len(params)} OR country ILIKE ${len(params)} OR city ILIKE ${len(params)})"
            )

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        total = await self.conn.fetchval(f"SELECT COUNT(*) FROM subscribers {where}", *params)

        query = f"SELECT {SUBSCRIBER_COLUMNS} FROM subscribers {where} ORDER BY joined_at DESC"
        if limit is not None:
            params.extend([limit, (page - 1) * limit])
            query += f" LIMIT ${len(params) - 1} OFFSET ${len(params)}"

        rows = await self.conn.fetch(query, *params)
        return [Subscriber.model_validate(dict(row)) for row in rows], total

    async def stats(self) -> Dict[str, Any]:
        counts = await self.conn.fetchrow("""
            SELECT COUNT(*) AS total,
                   COUNT(*) FILTER (WHERE is_active AND receive_event_alerts) AS event_fans,
                   COUNT(*) FILTER (WHERE NOT is_active) AS unsubscribed
            FROM subscribers
        """)
        top = await self.conn.fetch("""
            SELECT country, COUNT(*) AS count FROM subscribers
            WHERE is_active AND country IS NOT NULL
            GROUP BY country ORDER BY count DESC LIMIT 3
        """)
        countries = await self.conn.fetch("""
            SELECT DISTINCT country FROM subscribers
            WHERE country IS NOT NULL ORDER BY country
        """)
        return {
            "total": counts["total"],
            "event_fans": counts["event_fans"],
            "unsubscribed": counts["unsubscribed"],
            "top_countries": [{"country": r["country"], "count": r["count"]} for r in top],
            "available_countries": [r["country"] for r in countries],
        }

    async def emails_in(self, emails: List[str]) -> List[str]:
        """Return which of the given emails belong to active subscribers"""
        if not emails:
            return []
        rows = await self.conn.fetch(
            "SELECT email FROM subscribers WHERE is_active AND email = ANY($1::text[])",
            emails
        )
        return [row["email"] for row in rows]

    async def delete(self, subscriber_id: str) -> Optional[Subscriber]:
        row = await self.conn.fetchrow(
            f"DELETE FROM subscribers WHERE id = $1 RETURNING {SUBSCRIBER_COLUMNS}",
            subscriber_id
        )
        return Subscriber.model_validate(dict(row)) if row else None
