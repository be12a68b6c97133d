# hospitium/api/v1/notifications.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from hospitium.models.notification import Notification
from hospitium.application.notifications.manage_notifications import (
    broadcast_notification,
    delete_notification,
    mark_notifications_read,
)
from hospitium.normalizers.notification import normalize_notification
from hospitium.normalizers.pagination import normalize_pagination
from hospitium.utils.decorators import user_required, roles_required
from hospitium.utils.pagination import paginate_cursor
from hospitium.utils.validation import json_body
from . import v1_bp


@v1_bp.route("/notifications", methods=["GET"])
@jwt_required()
@user_required
def list_notifications():
    """
    Cursor-paginated notifications of the caller, newest first.

    Query params:
    - limit (default 20, max 100)
    - cursor (opaque, from the previous page)
    - unreadOnly=true
    """
    user = g.current_user
    limit = min(max(request.args.get("limit", 20, type=int), 1), 100)
    unread_only = request.args.get("unreadOnly", "").lower() == "true"

    query = Notification.query.filter_by(user_id=user.id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))

    items, cursor_meta = paginate_cursor(
        query,
        model=Notification,
        limit=limit,
        cursor=request.args.get("cursor"),
    )

    unread_count = Notification.query.filter_by(user_id=user.id, is_read=False).count()

    return jsonify({
        "success": True,
        "data": {
            **normalize_pagination(items, normalize_notification, cursor=cursor_meta),
            "unreadCount": unread_count,
        },
    }), 200


@v1_bp.route("/notifications", methods=["PATCH"])
@jwt_required()
@user_required
def mark_notifications():
    data = json_body()

    updated = mark_notifications_read(
        user_id=g.current_user.id,
        notification_ids=data.get("notificationIds"),
        mark_all=data.get("markAllAsRead") is True,
    )

    return jsonify({
        "success": True,
        "data": {"updated": updated},
        "message": "Notifications marked as read",
    }), 200


@v1_bp.route("/notifications/<notification_id>", methods=["DELETE"])
@jwt_required()
@user_required
def delete_notification_route(notification_id):
    delete_notification(user_id=g.current_user.id, notification_id=notification_id)

    return jsonify({
        "success": True,
        "message": "Notification deleted successfully",
    }), 200


@v1_bp.route("/notifications", methods=["POST"])
@jwt_required()
@user_required
@roles_required("admin")
def create_notification():
    data = json_body()

    created = broadcast_notification(actor_id=g.current_user.id, data=data)

    return jsonify({
        "success": True,
        "data": {
            "count": len(created),
            "notifications": [normalize_notification(n) for n in created],
        },
        "message": "Notification sent successfully",
    }), 201
