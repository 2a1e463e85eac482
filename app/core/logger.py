"""
Centralized logging module for the FULLSCO backend.

Rules:
- Structured JSON logging suitable for Loki/ELK
- Appropriate log levels (info, warning, error)
- NEVER logs passwords, stored credentials, tokens or secrets
- Security-sensitive actions emit structured logs with user_id, action, result, timestamp
"""
import logging
import json
from typing import Any, Dict, Optional
from datetime import datetime, timezone

logger = logging.getLogger("fullsco")
logger.setLevel(logging.INFO)

_handler = logging.StreamHandler()
_handler.setLevel(logging.INFO)


class JSONFormatter(logging.Formatter):
    """Formatter that outputs structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "user_id"):
            log_data["user_id"] = record.user_id
        if hasattr(record, "action"):
            log_data["action"] = record.action
        if hasattr(record, "result"):
            log_data["result"] = record.result
        if hasattr(record, "meta"):
            log_data["meta"] = record.meta

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


_handler.setFormatter(JSONFormatter())
logger.addHandler(_handler)

# Prevent duplicate logs
logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Child logger sharing the JSON handler of the `fullsco` logger."""
    return logger.getChild(name)


def log_security_event(
    action: str,
    result: str,
    user_id: Optional[str] = None,
    meta: Optional[Dict[str, Any]] = None,
    level: str = "info",
) -> None:
    """
    Log security-sensitive actions (login, failed login, registration, user changes).

    Args:
        action: Action name (e.g., "login", "register", "user_delete")
        result: Result status (e.g., "success", "failure", "denied", "error")
        user_id: User ID (optional)
        meta: Additional metadata dict (optional, never credentials)
        level: Log level ("info", "warning", "error")
    """
    log_method = getattr(logger, level.lower(), logger.info)
    extra: Dict[str, Any] = {
        "action": action,
        "result": result,
    }
    if user_id:
        extra["user_id"] = user_id
    if meta:
        extra["meta"] = meta

    log_method("Security event", extra=extra)
