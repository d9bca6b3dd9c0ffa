# fanbase/audit/logger.py
import asyncio
import logging
from typing import Optional, Set
from fanbase.database.dependencies import RepositorySession, repository_session
from fanbase.models.audit import LogLevel, AuditAction

logger = logging.getLogger(__name__)

class AuditLogger:
    """Writes admin audit entries to system_logs without ever failing the caller.

    `record` schedules the insert as a background task on its own connection
    and returns immediately. Errors inside the task are logged and dropped.
    """

    def __init__(self, session: RepositorySession = repository_session):
        self.session = session
        self._pending: Set[asyncio.Task] = set()

    def record(
        self,
        username: str,
        action: AuditAction,
        details: str,
        level: LogLevel = LogLevel.INFO,
        user_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> None:
        try:
            task = asyncio.get_running_loop().create_task(
                self._write(level, action, username, details, user_id, ip_address, user_agent)
            )
        except RuntimeError as e:
            logger.error(f"Audit entry {action.value} dropped, no running loop: {e}")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, level, action, username, details, user_id, ip_address, user_agent) -> None:
        try:
            async with self.session() as repositories:
                await repositories.logs.insert(
                    level=level,
                    action=action,
                    username=username,
                    details=details,
                    user_id=user_id,
                    ip_address=ip_address,
                    user_agent=user_agent
                )
        except Exception as e:
            logger.error(f"Failed to write audit entry {action.value} for {username}: {e}")

    def log_system_error(self, username: str, action_label: str, error: BaseException) -> None:
        self.record(
            username,
            AuditAction.SYSTEM_ERROR,
            f"Error during {action_label}: {error}",
            level=LogLevel.ERROR
        )

    async def drain(self) -> None:
        """Wait for every scheduled write to finish"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

audit_logger = AuditLogger()

def get_audit_logger() -> AuditLogger:
    return audit_logger
