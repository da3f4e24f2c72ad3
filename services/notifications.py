from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.notification import Notification

BID = "bid"
BOOKING = "booking"
AUCTION = "auction"


def format_cents(amount) -> str:
    return f"${(amount or 0) / 100:.2f}"


def notify(profile_id, title: str, message: str, notification_type: str, related_id=None) -> bool:
    """Inserts a notification; failures are logged and never propagate."""
    if not profile_id:
        return False
    db.session.add(Notification(
        profile_id=profile_id,
        title=title,
        message=message,
        notification_type=notification_type,
        related_id=related_id,
    ))
    try:
        db.session.commit()
        return True
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to notify profile %s (%s)", profile_id, title)
        return False


def notifications_for(profile, unread_only=False):
    q = Notification.query.filter_by(profile_id=profile.id)
    if unread_only:
        q = q.filter(Notification.read.is_(False))
    return q.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(200).all()


def mark_read(profile, notification_id: int):
    row = Notification.query.get(notification_id)
    if not row or row.profile_id != profile.id:
        return None
    row.read = True
    db.session.commit()
    return row


def mark_all_read(profile) -> int:
    count = (
        Notification.query
        .filter_by(profile_id=profile.id, read=False)
        .update({"read": True}, synchronize_session=False)
    )
    db.session.commit()
    return count
