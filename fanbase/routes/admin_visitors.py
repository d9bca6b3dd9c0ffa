# fanbase/routes/admin_visitors.py
from fastapi import APIRouter, Depends, Query
from datetime import datetime, timedelta, timezone
from typing import Optional, Literal
import math
from fanbase.auth.dependencies import get_current_admin
from fanbase.auth.models import AdminUser
from fanbase.database.dependencies import Repositories, get_repositories

router = APIRouter(prefix="/api/admin/visitors", tags=["admin-visitors"])

Period = Literal["today", "week", "month", "year"]

def period_start(period: Period, now: datetime) -> datetime:
    if period == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "month":
        return now - timedelta(days=30)
    if period == "year":
        return now - timedelta(days=365)
    return now - timedelta(days=7)

def conversion_rate(subscribers: int, unique_visitors: int) -> str:
    if unique_visitors == 0:
        return "0.0"
    return f"{subscribers / unique_visitors * 100:.1f}"

@router.get("")
async def visitor_summary(
    period: Period = "week",
    country: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    since = period_start(period, datetime.now(timezone.utc))
    summary = await repositories.visits.summary(since, country=country or None, page=page, limit=limit)
    totals = summary["totals"]

    return {
        "visitors": [
            {
                # Only a prefix of the hash is ever shown
                "visitorHash": f"{row['visitor_hash'][:12]}...",
                "country": row["country"],
                "city": row["city"],
                "lastVisit": row["last_visit"],
                "visitCount": row["visit_count"],
                "isSubscriber": bool(row["is_subscriber"]),
                "hasMessaged": bool(row["has_messaged"]),
            }
            for row in summary["visitors"]
        ],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": totals["unique_visitors"],
            "totalPages": math.ceil(totals["unique_visitors"] / limit),
        },
        "stats": {
            "totalVisits": totals["total_visits"],
            "uniqueVisitors": totals["unique_visitors"],
            "subscribersCount": totals["subscribers_count"],
            "messagesCount": totals["messages_count"],
            "conversionRate": conversion_rate(totals["subscribers_count"], totals["unique_visitors"]),
        },
        "topCountries": [
            {"country": row["country"], "visitorCount": row["visitor_count"]}
            for row in summary["top_countries"]
        ],
    }
