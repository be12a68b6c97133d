# hospitium/utils/pagination.py
"""
Keyset pagination over ``(created_at DESC, id DESC)``.

Cursors are opaque to clients: url-safe base64 of the last row's
timestamp and id.
"""
from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime
from typing import Any, Optional, Tuple, TypedDict, Type

from sqlalchemy.orm import Query
from sqlalchemy.sql import and_, or_
from werkzeug.exceptions import BadRequest


class CursorMeta(TypedDict):
    has_more: bool
    next_cursor: Optional[str]


def encode_cursor(created_at: datetime, row_id: Any) -> str:
    if not isinstance(created_at, datetime) or row_id is None:
        raise ValueError("created_at and row_id are required to encode cursor")

    raw = json.dumps({"t": created_at.isoformat(), "id": str(row_id)})
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()))
        return datetime.fromisoformat(payload["t"]), payload["id"]
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError) as exc:
        raise BadRequest("Invalid cursor format") from exc


def paginate_cursor(
    query: Query,
    *,
    model: Type[Any],
    limit: int,
    cursor: Optional[str] = None,
) -> tuple[list[Any], CursorMeta]:
    """
    Fetch one page of ``query`` newest first, starting after ``cursor``.

    One extra row is read to know whether another page exists.
    """
    if limit <= 0:
        raise BadRequest("Limit must be greater than zero")

    if cursor:
        cursor_ts, cursor_id = decode_cursor(cursor)
        query = query.filter(or_(
            model.created_at < cursor_ts,
            and_(model.created_at == cursor_ts, model.id < cursor_id),
        ))

    rows = (
        query.order_by(model.created_at.desc(), model.id.desc())
        .limit(limit + 1)
        .all()
    )
    items, has_more = rows[:limit], len(rows) > limit

    return items, {
        "has_more": has_more,
        "next_cursor": encode_cursor(items[-1].created_at, items[-1].id) if has_more else None,
    }
