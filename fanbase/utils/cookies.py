from fastapi import Response
from datetime import datetime, timedelta, timezone
from fanbase.config import settings

def set_session_cookie(response: Response, access_token: str):
    """Set the HTTP-only admin session cookie"""
    response.set_cookie(
        key="access_token",
        value=access_token,
        max_age=settings.access_token_expire_minutes * 60,
        expires=datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes),
        domain=settings.cookie_domain,
        secure=settings.cookie_secure,
        httponly=settings.cookie_httponly,
        samesite=settings.cookie_samesite
    )

def clear_session_cookie(response: Response):
    response.delete_cookie(
        key="access_token",
        domain=settings.cookie_domain
    )
