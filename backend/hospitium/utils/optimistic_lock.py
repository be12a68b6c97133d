from datetime import timezone
from dateutil.parser import parse
from flask import request
from hospitium.domain.exceptions import Conflict, ValidationError


def as_utc(ts):
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity, header="If-Unmodified-Since"):
    """
    Refuse to write ``entity`` if it changed after the client's copy.

    No header means no check. A malformed header is a 400, a newer
    ``updated_at`` on the server a 409.
    """
    raw = request.headers.get(header)
    if not raw or entity.updated_at is None:
        return

    try:
        client_ts = as_utc(parse(raw))
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Invalid {header} header") from exc

    if as_utc(entity.updated_at) > client_ts:
        raise Conflict("Conflict detected. Manuscript has been modified.")
