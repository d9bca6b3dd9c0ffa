# fanbase/routes/admin_subscribers.py
from fastapi import APIRouter, Depends, Query, Request, Response
from datetime import date
from typing import Optional, Literal
import logging
import math
from fanbase.audit import AuditAction, AuditLogger, LogLevel, get_audit_logger
from fanbase.auth.dependencies import get_current_admin
from fanbase.auth.models import AdminUser
from fanbase.database.dependencies import Repositories, get_repositories
from fanbase.errors import NotFoundError
from fanbase.subscribers.export import subscribers_to_csv
from fanbase.utils.client_ip import request_meta

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin/subscribers", tags=["admin-subscribers"])

StatusFilter = Literal["all", "active", "unsubscribed"]

@router.get("")
async def list_subscribers(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    status: StatusFilter = "all",
    country: Optional[str] = None,
    search: Optional[str] = None,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    subscribers, total = await repositories.subscribers.search(
        status=status,
        country=country or None,
        search=search or None,
        page=page,
        limit=limit
    )
    stats = await repositories.subscribers.stats()
    return {
        "subscribers": subscribers,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
        "stats": {
            "total": stats["total"],
            "eventFans": stats["event_fans"],
            "unsubscribed": stats["unsubscribed"],
            "topCountries": stats["top_countries"],
        },
        "availableCountries": stats["available_countries"],
    }

@router.get("/export")
async def export_subscribers(
    request: Request,
    status: StatusFilter = "all",
    country: Optional[str] = None,
    search: Optional[str] = None,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    audit: AuditLogger = Depends(get_audit_logger)
):
    subscribers, total = await repositories.subscribers.search(
        status=status,
        country=country or None,
        search=search or None,
        limit=None
    )
    audit.record(
        admin.username,
        AuditAction.EXPORT_SUBSCRIBERS,
        f"Exported {total} subscribers (status: {status})",
        user_id=admin.user_id,
        **request_meta(request)
    )
    filename = f"subscribers-{date.today().isoformat()}.csv"
    return Response(
        content=subscribers_to_csv(subscribers),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )

@router.delete("/{subscriber_id}")
async def delete_subscriber(
    subscriber_id: str,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    audit: AuditLogger = Depends(get_audit_logger)
):
    subscriber = await repositories.subscribers.delete(subscriber_id)
    if subscriber is None:
        raise NotFoundError("Subscriber not found")

    audit.record(
        admin.username,
        AuditAction.DELETE_SUBSCRIBER,
        f"Deleted subscriber {subscriber.email}",
        level=LogLevel.WARN,
        user_id=admin.user_id,
        **request_meta(request)
    )
    return {"success": True}
