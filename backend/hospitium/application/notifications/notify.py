from typing import Any, Dict, Optional
from hospitium.extensions import db
from hospitium.models.notification import Notification, NOTIFICATION_TYPES


def notify(
    *,
    user_id: str,
    type: str,
    title: str,
    message: str,
    manuscript_id: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
) -> Notification:
    """Queue a notification in the current transaction (no commit)."""
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")

    notification = Notification()
    notification.user_id = user_id
    notification.manuscript_id = manuscript_id
    notification.type = type
    notification.title = title
    notification.message = message
    notification.data = data or {}
    notification.is_read = False

    db.session.add(notification)
    return notification
