# fanbase/routes/subscriptions.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse
from typing import Optional
import logging
from fanbase.routes.dependencies import get_subscriber_service
from fanbase.subscribers.service import (
    SubscribeResult,
    SubscriberService,
    TokenStatus,
    UnsubscribeOutcome,
    UNSUBSCRIBE_MESSAGES,
)
from fanbase.utils.client_ip import get_client_ip

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["subscribers"])

OTHER_REASON = "Other"

def is_checked(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("true", "on", "1", "yes")

@router.post("/subscribe", response_model=SubscribeResult, response_model_exclude_none=True)
async def subscribe(
    request: Request,
    email: Optional[str] = Form(None),
    receive_event_alerts: Optional[str] = Form(None, alias="receiveEventAlerts"),
    honeypot: Optional[str] = Form(None, alias="_honey"),
    website: Optional[str] = Form(None),
    service: SubscriberService = Depends(get_subscriber_service)
):
    """Subscribe, update preferences or reactivate a subscription"""
    return await service.subscribe(
        email=email,
        receive_event_alerts=is_checked(receive_event_alerts),
        client_ip=get_client_ip(request),
        honeypot=honeypot,
        website=website
    )

@router.get("/unsubscribe/{token}")
async def unsubscribe_status(token: str, service: SubscriberService = Depends(get_subscriber_service)):
    """Tell the unsubscribe page which form to show for this token"""
    status = await service.check_token(token)
    if status is TokenStatus.INVALID:
        return JSONResponse(
            status_code=404,
            content={"status": status.value, "message": UNSUBSCRIBE_MESSAGES[UnsubscribeOutcome.INVALID]}
        )
    return {"status": status.value}

@router.post("/unsubscribe/{token}")
async def unsubscribe(
    token: str,
    reason: Optional[str] = Form(None),
    custom_reason: Optional[str] = Form(None, alias="customReason"),
    service: SubscriberService = Depends(get_subscriber_service)
):
    if reason == OTHER_REASON and custom_reason and custom_reason.strip():
        reason = custom_reason

    outcome = await service.unsubscribe(token, reason)
    body = {
        "success": outcome is UnsubscribeOutcome.SUCCESS,
        "status": outcome.value,
        "message": UNSUBSCRIBE_MESSAGES[outcome],
    }
    if outcome is UnsubscribeOutcome.INVALID:
        return JSONResponse(status_code=404, content=body)
    return body
