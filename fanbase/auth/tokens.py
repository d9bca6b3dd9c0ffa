# fanbase/auth/tokens.py
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from fanbase.auth.models import AdminUser, TokenData
from fanbase.config import settings

def create_access_token(user: AdminUser, expires_minutes: int = settings.access_token_expire_minutes) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    claims = {"sub": user.username, "uid": user.user_id, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

def decode_access_token(token: str) -> Optional[AdminUser]:
    """Return the admin encoded in a session token, or None if it is invalid or expired"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    data = TokenData(**payload)
    return AdminUser(username=data.sub, user_id=data.uid)
