# fanbase/auth/routes.py
import hmac
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fanbase.audit import AuditAction, AuditLogger, LogLevel, get_audit_logger
from fanbase.auth.dependencies import get_current_admin
from fanbase.auth.models import AdminUser, LoginRequest, LoginResponse
from fanbase.auth.tokens import create_access_token
from fanbase.config import settings
from fanbase.utils.client_ip import request_meta
from fanbase.utils.cookies import set_session_cookie, clear_session_cookie

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])

ADMIN_USER_ID = 1

def credentials_match(username: str, password: str) -> bool:
    if not settings.admin_password:
        return False
    username_ok = hmac.compare_digest(username.encode(), settings.admin_username.encode())
    password_ok = hmac.compare_digest(password.encode(), settings.admin_password.encode())
    return username_ok and password_ok

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    response: Response,
    audit: AuditLogger = Depends(get_audit_logger)
):
    """Sign in with the configured admin credentials"""
    meta = request_meta(request)
    if not credentials_match(credentials.username, credentials.password):
        audit.record(
            credentials.username,
            AuditAction.LOGIN_FAILED,
            "Failed login attempt - Invalid credentials",
            level=LogLevel.WARN,
            **meta
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    user = AdminUser(username=credentials.username, user_id=ADMIN_USER_ID)
    set_session_cookie(response, create_access_token(user))
    audit.record(user.username, AuditAction.LOGIN_SUCCESS, "Successful login", user_id=user.user_id, **meta)
    logger.info(f"Admin {user.username} signed in")

    return LoginResponse(
        success=True,
        user=user,
        expires_in=settings.access_token_expire_minutes * 60
    )

@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    admin: AdminUser = Depends(get_current_admin),
    audit: AuditLogger = Depends(get_audit_logger)
):
    clear_session_cookie(response)
    audit.record(admin.username, AuditAction.LOGOUT, "Logged out", user_id=admin.user_id, **request_meta(request))
    return {"success": True}

@router.get("/me", response_model=AdminUser)
async def me(admin: AdminUser = Depends(get_current_admin)):
    return admin
