# hospitium/normalizers/pagination.py
from typing import Callable, Any, List, Optional, Dict

from hospitium.utils.pagination import CursorMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    cursor: Optional[CursorMeta] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    total: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Normalize paginated API responses.

    Supports:
    - Cursor-based pagination (notifications)
    - Offset-based pagination (manuscript listings)

    Exactly ONE pagination strategy should be used per response.
    """

    normalized_items = [normalize_fn(item) for item in items]

    response: Dict[str, Any] = {
        "items": normalized_items,
    }

    if cursor is not None:
        response["pagination"] = {
            "hasMore": cursor["has_more"],
            "nextCursor": cursor["next_cursor"],
        }
        return response

    if limit is not None and offset is not None:
        response["pagination"] = {
            "limit": limit,
            "offset": offset,
        }

        if total is not None:
            response["pagination"]["total"] = total
            response["pagination"]["hasMore"] = offset + limit < total

    return response
