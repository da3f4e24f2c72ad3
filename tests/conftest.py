"""pytest configuration: app factory, auth tokens and a seeded barbershop."""
from __future__ import annotations

import sys
import time
from datetime import datetime, timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest
from jose import jwt

# Ensure the project root is available on sys.path so tests can import the app modules.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db, Tenant, Profile, Service, Slot  # noqa: E402

JWT_SECRET = "test-jwt-secret"


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    AUTH_JWT_SECRET = JWT_SECRET
    AUTH_JWT_ALGORITHMS = ["HS256"]
    AUTH_JWT_AUDIENCE = "authenticated"
    BID_INCREMENT_CENTS = 500
    CANCEL_CUTOFF_HOURS = 12


def make_token(sub: str, secret: str = JWT_SECRET, audience: str = "authenticated", expires_in: int = 3600) -> str:
    claims = {
        "sub": sub,
        "aud": audience,
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def auth(sub: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub)}"}


@pytest.fixture
def app():
    flask_app = create_app(TestConfig)
    with flask_app.app_context():
        db.create_all()
    yield flask_app
    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def shop(app):
    """
    One business with an admin, two barbers, two customers, a $25 haircut,
    an auction slot (min $35) and a fixed-price slot, both two days out.
    """
    with app.app_context():
        tenant = Tenant(name="Fade House", slug="fade-house")
        db.session.add(tenant)
        db.session.flush()

        admin = Profile(user_id="admin-1", tenant_id=tenant.id, user_type="admin", first_name="Ada")
        barber = Profile(user_id="barber-1", tenant_id=tenant.id, user_type="barber",
                         first_name="Bo", last_name="Cutter")
        other_barber = Profile(user_id="barber-2", tenant_id=tenant.id, user_type="barber", first_name="Cy")
        alice = Profile(user_id="cust-1", user_type="customer", first_name="Alice")
        bob = Profile(user_id="cust-2", user_type="customer", first_name="Bob")
        db.session.add_all([admin, barber, other_barber, alice, bob])
        db.session.flush()

        haircut = Service(tenant_id=tenant.id, provider_id=barber.id, name="Haircut",
                          base_price=2500, duration=60)
        db.session.add(haircut)
        db.session.flush()

        day = (datetime.utcnow() + timedelta(days=2)).replace(hour=10, minute=0, second=0, microsecond=0)
        auction_slot = Slot(tenant_id=tenant.id, provider_id=barber.id, service_id=haircut.id,
                            start_time=day, end_time=day + timedelta(hours=1),
                            is_auction=True, min_price=3500)
        fixed_slot = Slot(tenant_id=tenant.id, provider_id=barber.id, service_id=haircut.id,
                          start_time=day + timedelta(hours=2), end_time=day + timedelta(hours=3))
        db.session.add_all([auction_slot, fixed_slot])
        db.session.commit()

        return SimpleNamespace(
            tenant_id=tenant.id,
            slug=tenant.slug,
            admin_id=admin.id,
            barber_id=barber.id,
            other_barber_id=other_barber.id,
            alice_id=alice.id,
            bob_id=bob.id,
            service_id=haircut.id,
            auction_slot_id=auction_slot.id,
            fixed_slot_id=fixed_slot.id,
            day=day.date().isoformat(),
        )


@pytest.fixture
def as_user():
    return auth
