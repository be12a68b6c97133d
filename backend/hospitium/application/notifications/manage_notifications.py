from typing import Any, Dict, List
from hospitium.extensions import db
from hospitium.models.base import utc_now
from hospitium.models.notification import Notification, NOTIFICATION_TYPES
from hospitium.models.user import User
from hospitium.domain.exceptions import NotFound, ValidationError
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action
from hospitium.utils.validation import string_field
from .notify import notify


def mark_notifications_read(
    *,
    user_id: str,
    notification_ids: List[str] | None = None,
    mark_all: bool = False,
) -> int:
    """Mark the caller's unread notifications as read; returns the row count."""
    if not mark_all and not isinstance(notification_ids, list):
        raise ValidationError("Provide notificationIds or markAllAsRead")
    if not mark_all and not all(isinstance(item, str) for item in notification_ids):
        raise ValidationError("notificationIds must be a list of strings")

    query = Notification.query.filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    )
    if not mark_all:
        query = query.filter(Notification.id.in_(notification_ids))

    with transactional():
        updated = query.update(
            {"is_read": True, "read_at": utc_now()},
            synchronize_session=False,
        )

    return updated


def delete_notification(*, user_id: str, notification_id: str) -> None:
    with transactional():
        notification = Notification.query.filter_by(
            id=notification_id,
            user_id=user_id,
        ).first()

        if not notification:
            raise NotFound("Notification not found")

        db.session.delete(notification)


def broadcast_notification(
    *,
    actor_id: str,
    data: Dict[str, Any],
) -> List[Notification]:
    """
    Create notifications addressed by recipient id, email or platform role.

    Edge cases handled:
    - Unknown recipient email -> 404
    - No recipient at all -> 400
    """
    notification_type = string_field(data, "type") or "SYSTEM"
    title = string_field(data, "title")
    message = string_field(data, "message")

    if notification_type not in NOTIFICATION_TYPES:
        raise ValidationError(f"Invalid notification type: {notification_type}")
    if not title or not message:
        raise ValidationError("Title and message are required")

    recipient_id = string_field(data, "recipientId")
    recipient_email = string_field(data, "recipientEmail")
    recipient_role = string_field(data, "recipientRole")

    if recipient_id:
        recipients = User.query.filter_by(id=recipient_id, is_active=True).all()
        if not recipients:
            raise NotFound("Recipient not found")
    elif recipient_email:
        recipients = User.query.filter_by(email=recipient_email, is_active=True).all()
        if not recipients:
            raise NotFound("Recipient not found")
    elif recipient_role:
        recipients = User.query.filter_by(role=recipient_role, is_active=True).all()
    else:
        raise ValidationError("No valid recipient specified")

    with transactional():
        created = [
            notify(
                user_id=user.id,
                type=notification_type,
                title=title,
                message=message,
                data=data.get("metadata") or {},
            )
            for user in recipients
        ]
        db.session.flush()

        log_action(
            action="notification.broadcast",
            entity_type="notification",
            entity_id="*",
            payload={"count": len(created), "type": notification_type, "actor_id": actor_id},
        )

    return created
