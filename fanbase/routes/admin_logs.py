# fanbase/routes/admin_logs.py
from fastapi import APIRouter, Depends, Query, Request
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import math
from fanbase.audit import AuditAction, AuditLogger, LogLevel, get_audit_logger
from fanbase.auth.dependencies import get_current_admin
from fanbase.auth.models import AdminUser
from fanbase.database.dependencies import Repositories, get_repositories
from fanbase.errors import InputValidationError
from fanbase.utils.client_ip import request_meta

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin/logs", tags=["admin-logs"])

@router.get("")
async def list_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    level: Optional[str] = None,
    action: Optional[str] = None,
    username: Optional[str] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories)
):
    if level and level != "all":
        try:
            level_filter = LogLevel(level.upper())
        except ValueError:
            raise InputValidationError(f"Unknown log level: {level}", code="invalid_level")
    else:
        level_filter = None

    logs, total = await repositories.logs.search(
        level=level_filter,
        action=action or None,
        username=username or None,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit
    )
    counts = await repositories.logs.level_counts()
    return {
        "logs": logs,
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit),
        "stats": {
            "info": counts[LogLevel.INFO.value],
            "warn": counts[LogLevel.WARN.value],
            "error": counts[LogLevel.ERROR.value],
        },
    }

@router.delete("")
async def clear_logs(
    request: Request,
    days_old: Optional[int] = Query(None, alias="daysOld", ge=0),
    clear_all: bool = Query(False, alias="clearAll"),
    admin: AdminUser = Depends(get_current_admin),
    repositories: Repositories = Depends(get_repositories),
    audit: AuditLogger = Depends(get_audit_logger)
):
    if clear_all:
        deleted = await repositories.logs.delete_all()
        scope = " (all logs)"
    elif days_old is not None:
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        deleted = await repositories.logs.delete_older_than(cutoff)
        scope = f" older than {days_old} days"
    else:
        raise InputValidationError("Specify daysOld or clearAll=true", code="missing_scope")

    # Recorded after the delete so this entry survives it
    audit.record(
        admin.username,
        AuditAction.CLEAR_LOGS,
        f"Cleared {deleted} log entries{scope}",
        level=LogLevel.WARN,
        user_id=admin.user_id,
        **request_meta(request)
    )
    return {"success": True, "deletedCount": deleted, "message": f"Cleared {deleted} log entries"}
