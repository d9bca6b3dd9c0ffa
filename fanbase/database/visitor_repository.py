# fanbase/database/visitor_repository.py
import asyncpg
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import uuid
from fanbase.models import VisitorLog, GeoLocation

class VisitorLogRepository:
    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def append(
        self,
        visitor_hash: str,
        location: GeoLocation,
        user_agent: Optional[str],
        is_subscriber: bool,
        has_messaged: bool
    ) -> VisitorLog:
        row = await self.conn.fetchrow("""
            INSERT INTO visitor_logs (
                id, visitor_hash, country, city, user_agent,
                is_subscriber, has_messaged, visited_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING id, visitor_hash, country, city, user_agent,
                      is_subscriber, has_messaged, visited_at
        """,
            str(uuid.uuid4()),
            visitor_hash,
            location.country,
            location.city,
            user_agent,
            is_subscriber,
            has_messaged,
            datetime.now(timezone.utc)
        )
        return VisitorLog.model_validate(dict(row))

    async def summary(
        self,
        since: datetime,
        country: Optional[str] = None,
        page: int = 1,
        limit: int = 50
    ) -> Dict[str, Any]:
        """Visitors grouped by hash and location, plus period totals"""
        params: List[Any] = [since]
        where = "WHERE visited_at >= $1"
        if country:
            params.append(country)
            where += " AND country = $2"

        visitors = await self.conn.fetch(f"""
            SELECT visitor_hash, country, city,
                   MAX(visited_at) AS last_visit,
                   COUNT(*) AS visit_count,
                   BOOL_OR(is_subscriber) AS is_subscriber,
                   BOOL_OR(has_messaged) AS has_messaged
            FROM visitor_logs {where}
            GROUP BY visitor_hash, country, city
            ORDER BY last_visit DESC
            LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
        """, *params, limit, (page - 1) * limit)

        totals = await self.conn.fetchrow(f"""
            SELECT COUNT(*) AS total_visits,
                   COUNT(DISTINCT visitor_hash) AS unique_visitors,
                   COUNT(DISTINCT visitor_hash) FILTER (WHERE is_subscriber) AS subscribers_count,
                   COUNT(DISTINCT visitor_hash) FILTER (WHERE has_messaged) AS messages_count
            FROM visitor_logs {where}
        """, *params)

        top_countries = await self.conn.fetch("""
            SELECT country, COUNT(DISTINCT visitor_hash) AS visitor_count
            FROM visitor_logs
            WHERE visited_at >= $1 AND country IS NOT NULL
            GROUP BY country ORDER BY visitor_count DESC LIMIT 3
        """, since)

        return {
            "visitors": [dict(row) for row in visitors],
            "totals": dict(totals),
            "top_countries": [dict(row) for row in top_countries],
        }
