from datetime import datetime
from models.db import db

CUSTOMER = "customer"
ADMIN = "admin"
PROVIDER_TYPES = ("barber", "tattoo_artist")
USER_TYPES = (CUSTOMER, ADMIN) + PROVIDER_TYPES


class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)

    # subject ("sub") of the hosted auth provider's access token
    user_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=True, index=True)

    user_type = db.Column(db.String(20), nullable=False, default=CUSTOMER)
    first_name = db.Column(db.String(80), nullable=True)
    last_name = db.Column(db.String(80), nullable=True)
    full_name = db.Column(db.String(160), nullable=True)
    username = db.Column(db.String(80), nullable=True)
    phone_number = db.Column(db.String(30), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    avatar_url = db.Column(db.String(255), nullable=True)
    instagram_handle = db.Column(db.String(80), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    tenant = db.relationship("Tenant")

    @property
    def is_provider(self) -> bool:
        return self.user_type in PROVIDER_TYPES

    @property
    def is_admin(self) -> bool:
        return self.user_type == ADMIN

    @property
    def display_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.full_name or f"Profile #{self.id}"

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "tenant_id": self.tenant_id,
            "user_type": self.user_type,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "display_name": self.display_name,
            "username": self.username,
            "phone_number": self.phone_number,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "instagram_handle": self.instagram_handle,
        }
