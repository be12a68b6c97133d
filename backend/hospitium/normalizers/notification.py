from .common import iso

def normalize_notification(notification):
    manuscript = notification.manuscript

    return {
        "id": notification.id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "data": notification.data or {},
        "isRead": notification.is_read,
        "readAt": iso(notification.read_at),
        "createdAt": iso(notification.created_at),
        "manuscript": {
            "id": manuscript.id,
            "title": manuscript.title,
            "type": manuscript.type,
        } if manuscript else None,
    }
