# fanbase/contact/service.py
import logging
from typing import Optional
from fanbase.database.dependencies import Repositories
from fanbase.errors import InputValidationError, RateLimitExceededError
from fanbase.models import CamelModel
from fanbase.services.geolocation_service import GeolocationService
from fanbase.utils.client_ip import UNKNOWN_IP
from fanbase.utils.rate_limiting import RateLimiter, check_request_allowed
from fanbase.utils.validation import (
    MAX_MESSAGE_LENGTH,
    MIN_NAME_LENGTH,
    honeypot_tripped,
    is_valid_email,
    normalize_email,
)

logger = logging.getLogger(__name__)

class ContactSubmission(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None
    honeypot: Optional[str] = None
    website: Optional[str] = None

    @property
    def is_spam(self) -> bool:
        return honeypot_tripped(self.honeypot, self.website)

def validate_submission(submission: ContactSubmission) -> None:
    """Raise for the first invalid field, in form order"""
    if len((submission.name or "").strip()) < MIN_NAME_LENGTH:
        raise InputValidationError("Please enter your name", code="invalid_name")
    if not is_valid_email(submission.email):
        raise InputValidationError("Please enter a valid email", code="invalid_email")
    body = (submission.message or "").strip()
    if not body or len(body) > MAX_MESSAGE_LENGTH:
        raise InputValidationError(
            f"Message must be between 1 and {MAX_MESSAGE_LENGTH} characters",
            code="invalid_message"
        )

class ContactService:
    def __init__(
        self,
        repositories: Repositories,
        limiter: RateLimiter,
        geolocation: GeolocationService
    ):
        self.messages = repositories.messages
        self.limiter = limiter
        self.geolocation = geolocation

    async def submit(self, submission: ContactSubmission, client_ip: str) -> bool:
        """Store a contact message. Returns False when the submission was silently dropped."""
        if submission.is_spam:
            return False

        validate_submission(submission)

        email = normalize_email(submission.email)
        if not check_request_allowed(self.limiter, email, client_ip):
            raise RateLimitExceededError("Too many messages. Please wait a minute.")

        location = await self.geolocation.resolve(client_ip)
        await self.messages.create(
            name=submission.name.strip(),
            email=email,
            message=submission.message.strip(),
            location=location,
            ip_address=None if client_ip == UNKNOWN_IP else client_ip
        )
        return True
