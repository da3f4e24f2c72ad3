from flask import Blueprint, request, jsonify, g

from services import notifications
from utils.auth_context import profile_required

notification_bp = Blueprint("notification", __name__, url_prefix="/notifications")


@notification_bp.get("/me")
@profile_required
def my_notifications():
    unread_only = request.args.get("unread") in ("1", "true", "True")
    rows = notifications.notifications_for(g.profile, unread_only=unread_only)
    return jsonify([n.to_dict() for n in rows]), 200


@notification_bp.post("/<int:notification_id>/read")
@profile_required
def mark_read(notification_id: int):
    row = notifications.mark_read(g.profile, notification_id)
    if row is None:
        return jsonify(error="Notification not found"), 404
    return jsonify(row.to_dict()), 200


@notification_bp.post("/read_all")
@profile_required
def mark_all_read():
    count = notifications.mark_all_read(g.profile)
    return jsonify(message="Marked as read", updated=count), 200
