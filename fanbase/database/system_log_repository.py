# fanbase/database/system_log_repository.py
import asyncpg
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime, timezone
import uuid
from fanbase.models import SystemLog
from fanbase.models.audit import LogLevel, AuditAction

LOG_COLUMNS = "id, level, action, username, details, user_id, ip_address, user_agent, timestamp"

class SystemLogRepository:
    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def insert(
        self,
        level: LogLevel,
        action: AuditAction,
        username: str,
        details: str,
        user_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> None:
        await self.conn.execute(f"""
            INSERT INTO system_logs ({LOG_COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
        """,
            str(uuid.uuid4()),
            level.value,
            action.value,
            username,
            details,
            user_id,
            ip_address,
            user_agent,
            datetime.now(timezone.utc)
        )

    async def search(
        self,
        level: Optional[LogLevel] = None,
        action: Optional[str] = None,
        username: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[SystemLog], int]:
        conditions = []
        params: List[Any] = []

        if level:
            params.append(level.value)
            conditions.append(f"level = ${len(params)}")
        if action:
            params.append(f"%{action}%")
            conditions.append(f"action ILIKE ${len(params)}")
        if username:
            params.append(f"%{username}%")
            conditions.append(f"username ILIKE ${len(params)}")
        if start_date:
            params.append(start_date)
            conditions.append(f"timestamp >= ${len(params)}")
        if end_date:
            params.append(end_date)
            conditions.append(f"timestamp <= ${len(params)}")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        total = await self.conn.fetchval(f"SELECT COUNT(*) FROM system_logs {where}", *params)

        params.extend([limit, (page - 1) * limit])
        rows = await self.conn.fetch(f"""
            SELECT {LOG_COLUMNS} FROM system_logs {where}
            ORDER BY timestamp DESC
            LIMIT ${len(params) - 1} OFFSET ${len(params)}
        """, *params)
        return [SystemLog.model_validate(dict(row)) for row in rows], total

    async def level_counts(self) -> Dict[str, int]:
        rows = await self.conn.fetch("SELECT level, COUNT(*) AS count FROM system_logs GROUP BY level")
        counts = {level.value: 0 for level in LogLevel}
        for row in rows:
            counts[row["level"]] = row["count"]
        return counts

    async def delete_older_than(self, cutoff: datetime) -> int:
        result = await self.conn.execute("DELETE FROM system_logs WHERE timestamp < $1", cutoff)
        return int(result.split()[-1])

    async def delete_all(self) -> int:
        result = await self.conn.execute("DELETE FROM system_logs")
        return int(result.split()[-1])
