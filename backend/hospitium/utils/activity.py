# hospitium/utils/activity.py
"""
Append-only JSON-lines activity log.

One JSON object per line: ``timestamp``, ``level``, ``message`` and a
``metadata`` mapping that always carries ``ip``, ``userAgent`` and
``userId``. The file is never rotated or indexed.

Domain writes (``log_action``) are held on the SQLAlchemy session and only
reach the file once that session commits; a rollback discards them.
"""
from __future__ import annotations

import json
import os
from collections import deque
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from flask import current_app, g, has_request_context, request
from sqlalchemy import event
from sqlalchemy.orm import Session

from hospitium.extensions import db

LOG_LEVELS = {
    "INFO",
    "SUCCESS",
    "ERROR",
    "WARNING",
    "API_CALL",
    "DB_OPERATION",
}

PENDING_KEY = "pending_activity"


def _log_path() -> str:
    return current_app.config["ACTIVITY_LOG_PATH"]


def get_request_metadata() -> Dict[str, Any]:
    if not has_request_context():
        return {}

    forwarded = request.headers.get("X-Forwarded-For") or request.headers.get("X-Real-IP")
    ip = forwarded.split(",")[0].strip() if forwarded else (request.remote_addr or "Unknown")
    if ip in ("::1", "::ffff:127.0.0.1"):
        ip = "127.0.0.1"

    return {
        "ip": ip,
        "userAgent": request.headers.get("User-Agent", "Unknown"),
        "method": request.method,
        "url": request.path,
    }


def build_entry(level: str, message: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown activity level: {level}")

    metadata = {**get_request_metadata(), **(metadata or {})}
    current_user = getattr(g, "current_user", None) if has_request_context() else None

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "message": message,
        "metadata": {
            **metadata,
            "userAgent": metadata.get("userAgent") or "Unknown",
            "ip": metadata.get("ip") or "Unknown",
            "userId": metadata.get("userId") or (current_user.id if current_user else None),
        },
    }


def write_entries(entries: List[Dict[str, Any]]) -> None:
    """
    Append entries to the log file.

    A failed write is reported through the application logger and never
    propagates into the request.
    """
    if not entries:
        return

    path = _log_path()
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "a", encoding="utf-8") as fh:
            for entry in entries:
                fh.write(json.dumps(entry, default=str) + "\n")
    except OSError as e:
        current_app.logger.error(f"Failed to write activity log {path}: {e}")


def log_activity(level: str, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Append one entry to the activity log right away."""
    write_entries([build_entry(level, message, metadata)])


@event.listens_for(Session, "after_commit")
def _flush_pending_activity(session):
    write_entries(session.info.pop(PENDING_KEY, []))


@event.listens_for(Session, "after_soft_rollback")
def _discard_pending_activity(session, previous_transaction):
    session.info.pop(PENDING_KEY, None)


def log_info(message, metadata=None):
    log_activity("INFO", message, metadata)


def log_warning(message, metadata=None):
    log_activity("WARNING", message, metadata)


def log_error(message, metadata=None):
    log_activity("ERROR", message, metadata)


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None
):
    """
    Record a domain write (``manuscript.update``, ``change.resolve`` ...).

    The entry is queued on the current session and written when it commits.
    """
    entry = build_entry(
        "DB_OPERATION",
        f"{action} {entity_type}",
        {
            "action": action,
            "entityType": entity_type,
            "entityId": str(entity_id) if entity_id is not None else None,
            "payload": payload or {},
        },
    )
    db.session.info.setdefault(PENDING_KEY, []).append(entry)


def log_api_activity(method: str, endpoint: str, status_code: int, metadata=None) -> None:
    message = f"{method} {endpoint} - {status_code}"
    details = {
        **(metadata or {}),
        "method": method,
        "endpoint": endpoint,
        "statusCode": status_code,
        "success": 200 <= status_code < 400,
    }

    if status_code >= 400:
        log_activity("ERROR", f"API Call Failed: {message}", details)
    else:
        log_activity("API_CALL", f"API Call: {message}", details)


def read_activity(*, limit: int = 100, level: Optional[str] = None) -> List[Dict[str, Any]]:
    """Return the newest ``limit`` entries (newest first), optionally by level."""
    path = _log_path()
    if not os.path.exists(path):
        return []

    entries: deque = deque(maxlen=limit)
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                current_app.logger.warning("Skipping malformed activity log line")
                continue
            if level and entry.get("level") != level:
                continue
            entries.append(entry)

    return list(reversed(entries))
