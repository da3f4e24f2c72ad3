from datetime import datetime
from models.db import db

CONFIRMED = "confirmed"
CANCELLED = "cancelled"


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=False, index=True)
    slot_id = db.Column(db.Integer, db.ForeignKey("slots.id"), nullable=False, index=True)
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=True)
    provider_profile_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=True, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    bid_id = db.Column(db.Integer, db.ForeignKey("bids.id"), nullable=True)

    status = db.Column(db.String(20), nullable=False, default=CONFIRMED)
    # status values: confirmed, cancelled
    price_paid = db.Column(db.Integer, nullable=False, default=0)  # cents

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    cancel_reason = db.Column(db.String(120), nullable=True)

    # No unique constraint on slot_id: a later accepted bid cancels earlier bookings.

    slot = db.relationship("Slot")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "slot_id": self.slot_id,
            "service_id": self.service_id,
            "provider_profile_id": self.provider_profile_id,
            "customer_id": self.customer_id,
            "bid_id": self.bid_id,
            "status": self.status,
            "price_paid": self.price_paid,
            "created_at": self.created_at.isoformat(),
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "cancel_reason": self.cancel_reason,
        }
