from datetime import datetime
from models.db import db

PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"
WITHDRAWN = "withdrawn"
COUNTERED = "countered"

OWNER_CUSTOMER = "customer"
OWNER_PROVIDER = "provider"


class Bid(db.Model):
    __tablename__ = "bids"

    id = db.Column(db.Integer, primary_key=True)

    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=False, index=True)
    slot_id = db.Column(db.Integer, db.ForeignKey("slots.id"), nullable=False, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=True, index=True)
    profile_provider_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=True, index=True)

    bid_amount = db.Column(db.Integer, nullable=False)  # cents
    owner_type = db.Column(db.String(20), nullable=False, default=OWNER_CUSTOMER)
    status = db.Column(db.String(20), nullable=False, default=PENDING)
    # status values: pending, accepted, rejected, withdrawn, countered

    # counter-bids point at the customer bid they answer (one level deep)
    parent_bid_id = db.Column(db.Integer, db.ForeignKey("bids.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    slot = db.relationship("Slot")
    parent = db.relationship("Bid", remote_side=[id])

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "slot_id": self.slot_id,
            "customer_id": self.customer_id,
            "profile_provider_id": self.profile_provider_id,
            "bid_amount": self.bid_amount,
            "owner_type": self.owner_type,
            "status": self.status,
            "parent_bid_id": self.parent_bid_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
