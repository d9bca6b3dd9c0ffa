# fanbase/auth/dependencies.py
from fastapi import HTTPException, Cookie, Header, status
from typing import Optional
from fanbase.auth.models import AdminUser
from fanbase.auth.tokens import decode_access_token

async def get_current_admin(
    access_token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None)
) -> AdminUser:
    """Get the signed-in admin from the session cookie or a bearer header - REQUIRED authentication"""
    token = access_token
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    admin = decode_access_token(token)
    if admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )
    return admin
