# fanbase/routes/events.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from typing import Optional, Dict, Any
import logging
from fanbase.audit import AuditAction, AuditLogger, LogLevel, get_audit_logger
from fanbase.auth.dependencies import get_current_admin
from fanbase.auth.models import AdminUser
from fanbase.database.dependencies import Repositories, get_repositories
from fanbase.errors import InputValidationError, NotFoundError
from fanbase.models import CamelModel, Event
from fanbase.notifications.dispatcher import NotificationDispatcher
from fanbase.notifications.templates import NotificationKind
from fanbase.notifications.triggers import (
    apply_event_changes,
    detect_event_notifications,
    dispatch_with_timeout,
)
from fanbase.routes.dependencies import get_dispatcher
from fanbase.services.storage_service import UploadStorage, get_upload_storage
from fanbase.utils.client_ip import request_meta

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin/events", tags=["admin-events"])
announcement_router = APIRouter(prefix="/api/events", tags=["admin-events"])

EVENT_IMAGE_FOLDER = "events"

class EventCreate(CamelModel):
    title: str
    description: Optional[str] = None
    date: datetime
    venue: str
    city: str
    country: Optional[str] = None
    price: Optional[str] = None
    ticket_url: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    is_free: bool = False
    is_sold_out: bool = False
    auto_reminder: bool = True
    auto_sold_out: bool = True

class EventUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    venue: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    price: Optional[str] = None
    ticket_url: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    is_free: Optional[bool] = None
    is_sold_out: Optional[bool] = None
    auto_reminder: Optional[bool] = None
    auto_sold_out: Optional[bool] = None

class AnnouncementRequest(CamelModel):
    event_id: Optional[str] = None

def require_ticket_url(is_free: bool, is_sold_out: bool, ticket_url: Optional[str]) -> None:
    if not is_free and not is_sold_out and not (ticket_url and ticket_url.strip()):
        raise InputValidationError("Ticket URL is required for paid events", code="invalid_ticket_url")

def store_image(fields: Dict[str, Any], storage: UploadStorage) -> None:
    image = fields.get("image_url")
    if image and image.startswith("data:image"):
        fields["image_url"] = storage.save_data_url(image, EVENT_IMAGE_FOLDER)

@router.get("")
async def list_events(
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    return {"events": await repositories.events.list_all()}

@router.get("/{event_id}")
async def get_event(
    event_id: str,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    event = await repositories.events.get(event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return {"event": event}

@router.post("", status_code=201)
async def create_event(
    payload: EventCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    storage: UploadStorage = Depends(get_upload_storage),
    audit: AuditLogger = Depends(get_audit_logger)
):
    require_ticket_url(payload.is_free, payload.is_sold_out, payload.ticket_url)
    fields = payload.model_dump()
    store_image(fields, storage)

    event = await repositories.events.create(fields)
    audit.record(
        admin.username,
        AuditAction.CREATE_EVENT,
        f'Created event "{event.title}" at {event.venue}, {event.city}',
        user_id=admin.user_id,
        **request_meta(request)
    )
    return {"success": True, "event": event}

@router.patch("/{event_id}")
async def update_event(
    event_id: str,
    payload: EventUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    storage: UploadStorage = Depends(get_upload_storage),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    audit: AuditLogger = Depends(get_audit_logger)
):
    """Apply an admin edit and send any notification the change calls for"""
    changes = payload.model_dump(exclude_unset=True)
    async with repositories.events.locked(event_id) as before:
        if before is None:
            raise NotFoundError("Event not found")

        store_image(changes, storage)
        after = apply_event_changes(before, changes)
        require_ticket_url(after.is_free, after.is_sold_out, after.ticket_url)
        saved = await repositories.events.save(after)

    if before.image_url and saved.image_url != before.image_url:
        storage.delete(before.image_url)

    audit.record(
        admin.username,
        AuditAction.UPDATE_EVENT,
        f'Updated event "{saved.title}"',
        user_id=admin.user_id,
        **request_meta(request)
    )

    notifications: Dict[str, Any] = {}
    for kind in detect_event_notifications(before, saved):
        result = await dispatch_with_timeout(dispatcher, kind, saved)
        notifications[kind.value] = result.model_dump(by_alias=True) if result else {"pending": True}

    return {"success": True, "event": saved, "notifications": notifications}

@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    storage: UploadStorage = Depends(get_upload_storage),
    audit: AuditLogger = Depends(get_audit_logger)
):
    event = await repositories.events.delete(event_id)
    if event is None:
        raise NotFoundError("Event not found")
    storage.delete(event.image_url)

    audit.record(
        admin.username,
        AuditAction.DELETE_EVENT,
        f'Deleted event "{event.title}"',
        level=LogLevel.WARN,
        user_id=admin.user_id,
        **request_meta(request)
    )
    return {"success": True}

@announcement_router.post("/send-announcement")
async def send_announcement(
    payload: AnnouncementRequest,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    audit: AuditLogger = Depends(get_audit_logger)
):
    if not payload.event_id:
        raise InputValidationError("Event ID required", code="missing_event_id")

    event: Optional[Event] = await repositories.events.get(payload.event_id)
    if event is None:
        raise NotFoundError("Event not found")

    result = await dispatcher.send_event_email(NotificationKind.ANNOUNCEMENT, event)
    if not result.success:
        return JSONResponse(
            status_code=502,
            content={"error": "send_failed", "message": result.error or "Failed to send emails"}
        )

    await repositories.events.mark_announcement_sent(event.id, datetime.now(timezone.utc))
    audit.record(
        admin.username,
        AuditAction.SEND_ANNOUNCEMENT,
        f'Sent announcement for "{event.title}" to {result.recipient_count} subscribers',
        user_id=admin.user_id,
        **request_meta(request)
    )
    return {
        "success": True,
        "recipientCount": result.recipient_count,
        "failedCount": result.failed_count,
        "message": f"Announcement sent to {result.recipient_count} subscribers",
    }

@announcement_router.get("/send-announcement")
async def announcement_recipient_count(
    admin: AdminUser = Depends(get_current_admin),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    return {"subscriberCount": await dispatcher.recipient_count()}
