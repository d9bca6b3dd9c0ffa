# fanbase/notifications/dispatcher.py
import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional
from fanbase.config import settings
from fanbase.database.dependencies import RepositorySession, repository_session
from fanbase.errors import NotFoundError
from fanbase.models import CamelModel, Event
from fanbase.notifications.signature import (
    build_signature,
    compose_body,
    preview_signature_html,
    unsubscribe_footer,
)
from fanbase.notifications.templates import (
    NotificationKind,
    event_variables,
    render_template,
    subject_for,
    template_for,
)
from fanbase.services.email_service import EmailService, OutgoingEmail
from fanbase.subscribers.service import generate_unsubscribe_token
from fanbase.utils.validation import is_deliverable_email

logger = logging.getLogger(__name__)

class DispatchResult(CamelModel):
    success: bool
    recipient_count: int = 0
    failed_count: int = 0
    error: Optional[str] = None

class ReplyResult(CamelModel):
    success: bool
    email_valid: bool
    error: Optional[str] = None

class NotificationDispatcher:
    """Composes and sends event notifications and message replies.

    Event emails go to every active subscriber with event alerts on. A failed
    recipient is counted and skipped; the batch carries on.
    """

    def __init__(
        self,
        email_service: EmailService,
        session: RepositorySession = repository_session,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.email_service = email_service
        self.session = session
        self.sleep = sleep

    async def send_event_email(self, kind: NotificationKind, event: Event) -> DispatchResult:
        try:
            async with self.session() as repositories:
                template = template_for(kind, await repositories.settings.get_site_settings())
                if template is None:
                    return DispatchResult(success=False, error=f"No {kind.value} template configured")

                recipients = await repositories.subscribers.list_event_alert_recipients()
                if not recipients:
                    return DispatchResult(success=True)

                signature = build_signature(await repositories.settings.get_signature())
                content = compose_body(render_template(template, event_variables(event)), signature)
                subject = subject_for(kind, event)

                sent = failed = 0
                for subscriber in recipients:
                    try:
                        token = subscriber.unsubscribe_token
                        if not token:
                            token = generate_unsubscribe_token()
                            await repositories.subscribers.assign_token(subscriber.id, token)

                        result = await self.email_service.send(OutgoingEmail(
                            to_email=subscriber.email,
                            subject=subject,
                            html_content=content + unsubscribe_footer(token),
                            inline_images=signature.inline_images,
                        ))
                    except Exception as e:
                        logger.error(f"{kind.value} for event {event.id} failed for {subscriber.email}: {e}")
                        failed += 1
                        continue

                    if result.success:
                        sent += 1
                        if sent % settings.batch_pause_every == 0:
                            await self.sleep(settings.batch_pause_seconds)
                    else:
                        failed += 1

            logger.info(f"{kind.value} for event {event.id}: {sent} sent, {failed} failed")
            if sent == 0:
                return DispatchResult(
                    success=False,
                    failed_count=failed,
                    error=f"All {failed} deliveries failed"
                )
            return DispatchResult(success=True, recipient_count=sent, failed_count=failed)

        except Exception as e:
            logger.error(f"Sending {kind.value} for event {event.id} failed: {e}", exc_info=True)
            return DispatchResult(success=False, error=str(e))

    async def send_test_email(self, to_email: str, kind: NotificationKind, event: Event) -> DispatchResult:
        async with self.session() as repositories:
            template = template_for(kind, await repositories.settings.get_site_settings())
            signature = build_signature(await repositories.settings.get_signature())
        if template is None:
            return DispatchResult(success=False, error=f"No {kind.value} template configured")

        result = await self.email_service.send(OutgoingEmail(
            to_email=to_email,
            subject=f"[TEST] {subject_for(kind, event)}",
            html_content=compose_body(render_template(template, event_variables(event)), signature),
            inline_images=signature.inline_images,
        ))
        if not result.success:
            return DispatchResult(success=False, failed_count=1, error=result.error)
        return DispatchResult(success=True, recipient_count=1)

    async def recipient_count(self) -> int:
        async with self.session() as repositories:
            return await repositories.subscribers.count_event_alert_recipients()

    async def send_message_reply(self, message_id: str, to_email: str, subject: str, body: str) -> ReplyResult:
        email_valid = is_deliverable_email(to_email)

        async with self.session() as repositories:
            if await repositories.messages.get(message_id) is None:
                raise NotFoundError("Message not found")

            signature = build_signature(await repositories.settings.get_signature())
            result = await self.email_service.send(OutgoingEmail(
                to_email=to_email,
                subject=subject,
                html_content=compose_body(body, signature),
                inline_images=signature.inline_images,
            ))
            if not result.success:
                return ReplyResult(success=False, email_valid=email_valid, error=result.error)

            await repositories.messages.mark_replied(message_id, body, datetime.now(timezone.utc))

        return ReplyResult(success=True, email_valid=email_valid)

    async def signature_preview(self) -> str:
        async with self.session() as repositories:
            return preview_signature_html(await repositories.settings.get_signature())
