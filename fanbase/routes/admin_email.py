# fanbase/routes/admin_email.py
from fastapi import APIRouter, Depends, Request
from pydantic import EmailStr
from typing import Optional
import logging
from fanbase.audit import AuditAction, AuditLogger, get_audit_logger
from fanbase.auth.dependencies import get_current_admin
from fanbase.auth.models import AdminUser
from fanbase.database.dependencies import Repositories, get_repositories
from fanbase.errors import InputValidationError, NotFoundError
from fanbase.models import CamelModel, SiteSettings
from fanbase.notifications.dispatcher import NotificationDispatcher, ReplyResult
from fanbase.notifications.templates import NotificationKind
from fanbase.routes.dependencies import get_dispatcher
from fanbase.utils.client_ip import request_meta
from fanbase.utils.validation import is_deliverable_email

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin-email"])

class SignatureUpdate(CamelModel):
    logo_url: Optional[str] = None
    content: Optional[str] = None

class ReplyRequest(CamelModel):
    message_id: str
    to: str
    subject: str
    body: str

class TestEmailRequest(CamelModel):
    to: EmailStr
    kind: NotificationKind
    event_id: str

@router.get("/email-templates")
async def get_templates(
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    return {"templates": await repositories.settings.get_site_settings() or SiteSettings()}

@router.put("/email-templates")
async def update_templates(
    payload: SiteSettings,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    audit: AuditLogger = Depends(get_audit_logger)
):
    saved = await repositories.settings.save_templates(payload)
    changed = [name for name, value in payload.model_dump(exclude={"id"}).items() if value is not None]
    audit.record(
        admin.username,
        AuditAction.UPDATE_EMAIL_TEMPLATE,
        f"Updated email templates: {', '.join(changed) or 'none'}",
        user_id=admin.user_id,
        **request_meta(request)
    )
    return {"success": True, "templates": saved}

@router.post("/email-templates/test")
async def send_test_email(
    payload: TestEmailRequest,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    event = await repositories.events.get(payload.event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return await dispatcher.send_test_email(payload.to, payload.kind, event)

@router.get("/email-signature")
async def get_signature(
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    return {"signature": await repositories.settings.get_signature()}

@router.put("/email-signature")
async def update_signature(
    payload: SignatureUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    audit: AuditLogger = Depends(get_audit_logger)
):
    saved = await repositories.settings.save_signature(payload.logo_url, payload.content)
    audit.record(
        admin.username,
        AuditAction.UPDATE_EMAIL_SIGNATURE,
        "Updated email signature",
        user_id=admin.user_id,
        **request_meta(request)
    )
    return {"success": True, "signature": saved}

@router.get("/send-reply")
async def reply_preview(
    email: Optional[str] = None,
    admin: AdminUser = Depends(get_current_admin),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    """Signature preview and address check for the reply composer"""
    return {
        "signature": await dispatcher.signature_preview(),
        "emailValid": is_deliverable_email(email) if email else None,
    }

@router.post("/send-reply", response_model=ReplyResult)
async def send_reply(
    payload: ReplyRequest,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    audit: AuditLogger = Depends(get_audit_logger)
):
    if not payload.subject.strip() or not payload.body.strip():
        raise InputValidationError("Subject and message are required", code="invalid_reply")

    result = await dispatcher.send_message_reply(payload.message_id, payload.to, payload.subject, payload.body)
    if result.success:
        audit.record(
            admin.username,
            AuditAction.REPLY_MESSAGE,
            f"Replied to {payload.to}: {payload.subject}",
            user_id=admin.user_id,
            **request_meta(request)
        )
    return result
