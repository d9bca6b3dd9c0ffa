# fanbase/utils/validation.py
import re
from typing import Optional

MAX_EMAIL_LENGTH = 255
MIN_NAME_LENGTH = 2
MAX_MESSAGE_LENGTH = 5000
MAX_REASON_LENGTH = 500

# Stricter check used before sending mail, not for accepting submissions
DELIVERABLE_EMAIL = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()

def is_valid_email(email: Optional[str]) -> bool:
    """Loose acceptance check for form submissions"""
    if not email:
        return False
    return "@" in email and len(email) <= MAX_EMAIL_LENGTH

def is_deliverable_email(email: Optional[str]) -> bool:
    return bool(email) and bool(DELIVERABLE_EMAIL.match(email.strip()))

def honeypot_tripped(*fields: Optional[str]) -> bool:
    """Any non-empty value counts, whitespace included"""
    return any(bool(field) for field in fields)

def clean_reason(reason: Optional[str]) -> Optional[str]:
    """Trim a free-text reason, capping length; blank becomes None"""
    if not reason:
        return None
    reason = reason.strip()[:MAX_REASON_LENGTH]
    return reason or None
