# fanbase/audit/__init__.py
from fanbase.models.audit import LogLevel, AuditAction
from .logger import AuditLogger, audit_logger, get_audit_logger

__all__ = ["LogLevel", "AuditAction", "AuditLogger", "audit_logger", "get_audit_logger"]
