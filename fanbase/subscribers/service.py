# fanbase/subscribers/service.py
import logging
import secrets
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from fanbase.database.dependencies import Repositories
from fanbase.errors import InputValidationError, RateLimitExceededError, DuplicateRecordError
from fanbase.models import CamelModel, Subscriber
from fanbase.services.geolocation_service import GeolocationService
from fanbase.utils.client_ip import UNKNOWN_IP
from fanbase.utils.rate_limiting import RateLimiter, check_request_allowed
from fanbase.utils.validation import normalize_email, is_valid_email, honeypot_tripped, clean_reason

logger = logging.getLogger(__name__)

def generate_unsubscribe_token() -> str:
    return secrets.token_urlsafe(32)

class SubscribeResult(CamelModel):
    success: bool = True
    message: str
    updated: Optional[bool] = None
    reactivated: Optional[bool] = None
    event_alerts_enabled: Optional[bool] = None

class TokenStatus(str, Enum):
    VALID = "valid"
    ALREADY_UNSUBSCRIBED = "already_unsubscribed"
    INVALID = "invalid"

class UnsubscribeOutcome(str, Enum):
    SUCCESS = "success"
    ALREADY_UNSUBSCRIBED = "already_unsubscribed"
    INVALID = "invalid"

UNSUBSCRIBE_MESSAGES = {
    UnsubscribeOutcome.SUCCESS: "You have been unsubscribed. Sorry to see you go!",
    UnsubscribeOutcome.ALREADY_UNSUBSCRIBED: "This email is already unsubscribed.",
    UnsubscribeOutcome.INVALID: "Invalid or expired unsubscribe link.",
}

class SubscriberService:
    """Subscribe, reactivate and unsubscribe transitions for newsletter subscribers"""

    def __init__(
        self,
        repositories: Repositories,
        limiter: RateLimiter,
        geolocation: GeolocationService
    ):
        self.subscribers = repositories.subscribers
        self.limiter = limiter
        self.geolocation = geolocation

    async def subscribe(
        self,
        email: Optional[str],
        receive_event_alerts: bool,
        client_ip: str,
        honeypot: Optional[str] = None,
        website: Optional[str] = None
    ) -> SubscribeResult:
        if honeypot_tripped(honeypot, website):
            logger.debug("Subscribe honeypot triggered, discarding")
            return SubscribeResult(message="Thanks for subscribing!")

        if not is_valid_email(email):
            raise InputValidationError("Please enter a valid email", code="invalid_email")

        email = normalize_email(email)
        if not check_request_allowed(self.limiter, email, client_ip):
            raise RateLimitExceededError("Too many requests. Please wait.")

        existing = await self.subscribers.get_by_email(email)
        if existing is None:
            location = await self.geolocation.resolve(client_ip)
            try:
                await self.subscribers.create(
                    email=email,
                    receive_event_alerts=receive_event_alerts,
                    unsubscribe_token=generate_unsubscribe_token(),
                    location=location,
                    ip_address=None if client_ip == UNKNOWN_IP else client_ip
                )
                return SubscribeResult(
                    message="Thanks for subscribing!",
                    event_alerts_enabled=receive_event_alerts
                )
            except DuplicateRecordError:
                # Lost an insert race with a concurrent request for the same email
                existing = await self.subscribers.get_by_email(email)
                if existing is None:
                    raise

        return await self._resubscribe(existing, receive_event_alerts)

    async def _resubscribe(self, subscriber: Subscriber, receive_event_alerts: bool) -> SubscribeResult:
        if not subscriber.unsubscribe_token:
            await self.subscribers.assign_token(subscriber.id, generate_unsubscribe_token())

        if subscriber.is_active:
            await self.subscribers.update_preference(subscriber.id, receive_event_alerts)
            return SubscribeResult(
                message="You're already subscribed! Your preferences have been updated.",
                updated=True,
                event_alerts_enabled=receive_event_alerts
            )

        await self.subscribers.reactivate(subscriber.id, receive_event_alerts)
        return SubscribeResult(
            message="Welcome back! Your subscription has been reactivated.",
            reactivated=True,
            event_alerts_enabled=receive_event_alerts
        )

    async def check_token(self, token: str) -> TokenStatus:
        subscriber = await self.subscribers.get_by_token(token)
        if subscriber is None:
            return TokenStatus.INVALID
        if not subscriber.is_active:
            return TokenStatus.ALREADY_UNSUBSCRIBED
        return TokenStatus.VALID

    async def unsubscribe(self, token: str, reason: Optional[str] = None) -> UnsubscribeOutcome:
        subscriber = await self.subscribers.get_by_token(token)
        if subscriber is None:
            return UnsubscribeOutcome.INVALID
        if not subscriber.is_active:
            return UnsubscribeOutcome.ALREADY_UNSUBSCRIBED

        await self.subscribers.deactivate(
            subscriber.id,
            clean_reason(reason),
            datetime.now(timezone.utc)
        )
        logger.info(f"Subscriber {subscriber.id} unsubscribed")
        return UnsubscribeOutcome.SUCCESS
