from datetime import datetime
from models.db import db

class Auction(db.Model):
    __tablename__ = "auctions"

    id = db.Column(db.Integer, primary_key=True)

    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=False, index=True)
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=False)
    provider_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    starting_price = db.Column(db.Integer, nullable=False)  # cents
    current_price = db.Column(db.Integer, nullable=True)
    current_winner_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=True)

    auction_start = db.Column(db.DateTime, nullable=False)
    auction_end = db.Column(db.DateTime, nullable=False, index=True)
    closed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    service = db.relationship("Service")
    provider = db.relationship("Profile", foreign_keys=[provider_id])


class AuctionBid(db.Model):
    __tablename__ = "auction_bids"

    id = db.Column(db.Integer, primary_key=True)
    auction_id = db.Column(db.Integer, db.ForeignKey("auctions.id"), nullable=False, index=True)
    bidder_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)  # cents

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    bidder = db.relationship("Profile")

    def to_dict(self):
        return {
            "id": self.id,
            "auction_id": self.auction_id,
            "bidder_id": self.bidder_id,
            "bidder_name": self.bidder.display_name if self.bidder else None,
            "amount": self.amount,
            "created_at": self.created_at.isoformat(),
        }
