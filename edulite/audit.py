import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any

from fastapi import BackgroundTasks

from .config import settings

logger = logging.getLogger(__name__)

_write_lock = threading.Lock()

# Never written to the audit trail, whatever resource they come from.
REDACTED_FIELDS = {"password", "password_hash", "reset_token_hash", "token"}


def _scrub(details: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in details.items() if key not in REDACTED_FIELDS}


def format_entry(action: str, details: dict[str, Any]) -> str:
    timestamp = datetime.now(timezone.utc).isoformat()
    return f"[{timestamp}] {action}: {json.dumps(_scrub(details), default=str)}\n"


def write_audit(action: str, details: dict[str, Any], path: str | None = None) -> None:
    entry = format_entry(action, details)
    try:
        with _write_lock, open(path or settings.audit_log_path, "a", encoding="utf-8") as f:
            f.write(entry)
    except OSError as exc:
        logger.error(f"Audit log error ({action}): {exc}")


def log_audit(background_tasks: BackgroundTasks, action: str, details: dict[str, Any]) -> None:
    """Queue an audit line to be written after the response is sent."""
    background_tasks.add_task(write_audit, action, dict(details))
