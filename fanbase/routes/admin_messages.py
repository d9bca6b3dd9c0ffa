# fanbase/routes/admin_messages.py
from fastapi import APIRouter, Depends, Query, Request
from typing import Optional, Literal
import logging
import math
from fanbase.audit import AuditAction, AuditLogger, LogLevel, get_audit_logger
from fanbase.auth.dependencies import get_current_admin
from fanbase.auth.models import AdminUser
from fanbase.database.dependencies import Repositories, get_repositories
from fanbase.errors import NotFoundError
from fanbase.models import CamelModel
from fanbase.utils.client_ip import request_meta

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin/messages", tags=["admin-messages"])

class MessageIdRequest(CamelModel):
    id: str

@router.get("")
async def list_messages(
    page: int = Query(1, ge=1),
    limit: int = Query(30, ge=1, le=200),
    search: Optional[str] = None,
    filter: Literal["all", "unanswered", "fromSubscribers"] = "all",
    country: Optional[str] = None,
    sort: Literal["newest", "oldest", "name", "country"] = "newest",
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    messages, total = await repositories.messages.search(
        search=search or None,
        filter=filter,
        country=country or None,
        sort=sort,
        page=page,
        limit=limit
    )
    subscriber_emails = set(await repositories.subscribers.emails_in([m.email for m in messages]))
    stats = await repositories.messages.stats()

    return {
        "messages": [
            {**message.model_dump(by_alias=True, mode="json"), "isSubscriber": message.email in subscriber_emails}
            for message in messages
        ],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
        "stats": {
            "total": stats["total"],
            "unanswered": stats["unanswered"],
            "fromSubscribers": stats["from_subscribers"],
        },
        "availableCountries": await repositories.messages.available_countries(),
    }

@router.post("/toggle-read")
async def toggle_read(
    payload: MessageIdRequest,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    audit: AuditLogger = Depends(get_audit_logger)
):
    message = await repositories.messages.get(payload.id)
    if message is None:
        raise NotFoundError("Message not found")

    updated = await repositories.messages.set_read(message.id, not message.is_read)
    if updated.is_read:
        audit.record(
            admin.username,
            AuditAction.READ_MESSAGE,
            f"Marked message from {message.email} as read",
            user_id=admin.user_id,
            **request_meta(request)
        )
    return {"success": True, "isRead": updated.is_read}

@router.post("/mark-all-read")
async def mark_all_read(
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    count = await repositories.messages.mark_all_read()
    return {"success": True, "updatedCount": count}

@router.delete("/{message_id}")
async def delete_message(
    message_id: str,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    audit: AuditLogger = Depends(get_audit_logger)
):
    message = await repositories.messages.delete(message_id)
    if message is None:
        raise NotFoundError("Message not found")

    audit.record(
        admin.username,
        AuditAction.DELETE_MESSAGE,
        f"Deleted message from {message.name} <{message.email}>",
        level=LogLevel.WARN,
        user_id=admin.user_id,
        **request_meta(request)
    )
    return {"success": True}
