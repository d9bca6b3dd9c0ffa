# fanbase/routes/cron.py
import hmac
import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException, status
from fanbase.config import settings
from fanbase.database.dependencies import RepositorySession, get_repository_session
from fanbase.notifications.dispatcher import NotificationDispatcher
from fanbase.notifications.triggers import run_reminder_sweep
from fanbase.routes.dependencies import get_dispatcher

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cron", tags=["cron"])

def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """Require `Authorization: Bearer <cron_secret>`; refuse everything when no secret is set"""
    expected = f"Bearer {settings.cron_secret}" if settings.cron_secret else None
    if not expected or not authorization or not hmac.compare_digest(authorization.encode(), expected.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

@router.get("/event-reminders", dependencies=[Depends(verify_cron_secret)])
async def event_reminders(
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    session: RepositorySession = Depends(get_repository_session)
):
    """Daily sweep sending the one-week reminder for upcoming events"""
    now = datetime.now(timezone.utc)
    results = await run_reminder_sweep(dispatcher, session, now)
    logger.info(f"Reminder sweep processed {len(results)} events")
    return {
        "success": True,
        "eventsProcessed": len(results),
        "results": [result.model_dump(by_alias=True) for result in results],
        "timestamp": now.isoformat(),
    }
