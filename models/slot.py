from datetime import datetime
from models.db import db

AVAILABLE = "available"
BOOKED = "booked"


class Slot(db.Model):
    __tablename__ = "slots"

    id = db.Column(db.Integer, primary_key=True)

    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=False, index=True)
    provider_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=False, index=True)
    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False)

    status = db.Column(db.String(20), nullable=False, default=AVAILABLE)
    # status values: available, booked (no version column, last write wins)

    is_auction = db.Column(db.Boolean, default=False, nullable=False)
    auction_end_time = db.Column(db.DateTime, nullable=True)
    min_price = db.Column(db.Integer, nullable=True)  # cents

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    service = db.relationship("Service")
    provider = db.relationship("Profile")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "provider_id": self.provider_id,
            "service_id": self.service_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "status": self.status,
            "is_available": self.status == AVAILABLE,
            "is_auction": self.is_auction,
            "auction_end_time": self.auction_end_time.isoformat() if self.auction_end_time else None,
            "min_price": self.min_price,
        }
