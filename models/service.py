from datetime import datetime
from models.db import db

class Service(db.Model):
    __tablename__ = "services"

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=False, index=True)
    provider_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=True, index=True)

    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=True)
    duration = db.Column(db.Integer, nullable=True)  # minutes
    base_price = db.Column(db.Integer, nullable=False, default=0)  # cents
    service_type = db.Column(db.String(40), nullable=True)
    image_url = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    provider = db.relationship("Profile")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "provider_id": self.provider_id,
            "name": self.name,
            "description": self.description,
            "duration": self.duration,
            "base_price": self.base_price,
            "service_type": self.service_type,
            "image_url": self.image_url,
        }
