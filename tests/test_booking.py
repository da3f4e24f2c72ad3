"""Fixed-price bookings, cancellations and slot management."""
from __future__ import annotations

from datetime import datetime, timedelta, date

from models import db, Availability, Booking, Slot
from services.slots import generate_slots


def test_book_fixed_slot_201_at_base_price(client, shop, as_user, app):
    response = client.post("/bookings", json={"slot_id": shop.fixed_slot_id}, headers=as_user("cust-1"))
    data = response.get_json()

    assert response.status_code == 201
    assert data["booking"]["price_paid"] == 2500
    assert data["booking"]["status"] == "confirmed"
    assert data["warnings"] == []
    with app.app_context():
        assert db.session.get(Slot, shop.fixed_slot_id).status == "booked"


def test_book_already_booked_slot_409(client, shop, as_user):
    client.post("/bookings", json={"slot_id": shop.fixed_slot_id}, headers=as_user("cust-1"))

    response = client.post("/bookings", json={"slot_id": shop.fixed_slot_id}, headers=as_user("cust-2"))

    assert response.status_code == 409
    assert response.get_json()["error"] == "Slot already booked"


def test_book_auction_slot_400(client, shop, as_user):
    response = client.post("/bookings", json={"slot_id": shop.auction_slot_id}, headers=as_user("cust-1"))

    assert response.status_code == 400
    assert response.get_json()["error"] == "Auction slots must be bid on"


def test_book_missing_slot_404(client, shop, as_user):
    response = client.post("/bookings", json={"slot_id": 9999}, headers=as_user("cust-1"))

    assert response.status_code == 404


def test_book_past_slot_400(client, shop, as_user, app):
    with app.app_context():
        past = datetime.utcnow() - timedelta(hours=2)
        slot = Slot(tenant_id=shop.tenant_id, provider_id=shop.barber_id, service_id=shop.service_id,
                    start_time=past, end_time=past + timedelta(hours=1))
        db.session.add(slot)
        db.session.commit()
        slot_id = slot.id

    response = client.post("/bookings", json={"slot_id": slot_id}, headers=as_user("cust-1"))

    assert response.status_code == 400
    assert response.get_json()["error"] == "Cannot book past/started slots"


def test_customer_cancels_booking_and_slot_is_released(client, shop, as_user, app):
    booking_id = client.post("/bookings", json={"slot_id": shop.fixed_slot_id},
                             headers=as_user("cust-1")).get_json()["booking"]["id"]

    response = client.post(f"/bookings/{booking_id}/cancel", json={"reason": "Sick"}, headers=as_user("cust-1"))

    assert response.status_code == 200
    assert response.get_json()["booking"]["status"] == "cancelled"
    with app.app_context():
        assert db.session.get(Booking, booking_id).cancel_reason == "Sick"
        assert db.session.get(Slot, shop.fixed_slot_id).status == "available"


def test_customer_cancel_inside_cutoff_403(client, shop, as_user, app):
    with app.app_context():
        soon = datetime.utcnow() + timedelta(hours=2)
        slot = Slot(tenant_id=shop.tenant_id, provider_id=shop.barber_id, service_id=shop.service_id,
                    start_time=soon, end_time=soon + timedelta(hours=1))
        db.session.add(slot)
        db.session.commit()
        slot_id = slot.id

    booking_id = client.post("/bookings", json={"slot_id": slot_id},
                             headers=as_user("cust-1")).get_json()["booking"]["id"]

    response = client.post(f"/bookings/{booking_id}/cancel", headers=as_user("cust-1"))
    assert response.status_code == 403

    # the provider is not bound by the customer cutoff
    response = client.post(f"/bookings/{booking_id}/cancel", headers=as_user("barber-1"))
    assert response.status_code == 200


def test_cancel_someone_elses_booking_404(client, shop, as_user):
    booking_id = client.post("/bookings", json={"slot_id": shop.fixed_slot_id},
                             headers=as_user("cust-1")).get_json()["booking"]["id"]

    response = client.post(f"/bookings/{booking_id}/cancel", headers=as_user("cust-2"))

    assert response.status_code == 404


def test_cancel_twice_409(client, shop, as_user):
    booking_id = client.post("/bookings", json={"slot_id": shop.fixed_slot_id},
                             headers=as_user("cust-1")).get_json()["booking"]["id"]
    client.post(f"/bookings/{booking_id}/cancel", headers=as_user("cust-1"))

    response = client.post(f"/bookings/{booking_id}/cancel", headers=as_user("cust-1"))

    assert response.status_code == 409


def test_my_bookings_by_role(client, shop, as_user):
    client.post("/bookings", json={"slot_id": shop.fixed_slot_id}, headers=as_user("cust-1"))

    alice = client.get("/bookings/me", headers=as_user("cust-1")).get_json()
    bob = client.get("/bookings/me", headers=as_user("cust-2")).get_json()
    barber = client.get("/bookings/me", headers=as_user("barber-1")).get_json()
    admin = client.get("/bookings/me?status=confirmed", headers=as_user("admin-1")).get_json()

    assert len(alice) == 1
    assert alice[0]["service_name"] == "Haircut"
    assert alice[0]["customer_name"] == "Alice"
    assert bob == []
    assert len(barber) == 1
    assert len(admin) == 1


def test_get_booking_visibility(client, shop, as_user):
    booking_id = client.post("/bookings", json={"slot_id": shop.fixed_slot_id},
                             headers=as_user("cust-1")).get_json()["booking"]["id"]

    assert client.get(f"/bookings/{booking_id}", headers=as_user("cust-1")).status_code == 200
    assert client.get(f"/bookings/{booking_id}", headers=as_user("barber-1")).status_code == 200
    assert client.get(f"/bookings/{booking_id}", headers=as_user("cust-2")).status_code == 404


def test_provider_creates_auction_slot_201(client, shop, as_user):
    start = datetime.utcnow() + timedelta(days=3)
    response = client.post("/slots", json={
        "service_id": shop.service_id,
        "start_time": start.isoformat(),
        "end_time": (start + timedelta(hours=1)).isoformat(),
        "is_auction": True,
        "min_price": 6000,
        "auction_end_time": (start - timedelta(hours=12)).isoformat(),
    }, headers=as_user("barber-1"))
    data = response.get_json()

    assert response.status_code == 201
    assert data["is_auction"] is True
    assert data["min_price"] == 6000
    assert data["provider_id"] == shop.barber_id
    assert data["status"] == "available"


def test_create_slot_validation(client, shop, as_user):
    start = datetime.utcnow() + timedelta(days=3)
    payload = {"service_id": shop.service_id, "start_time": start.isoformat(),
               "end_time": (start - timedelta(hours=1)).isoformat()}

    assert client.post("/slots", json=payload, headers=as_user("barber-1")).status_code == 400
    assert client.post("/slots", json={"service_id": shop.service_id, "start_time": "nope",
                                       "end_time": "nope"}, headers=as_user("barber-1")).status_code == 400
    assert client.post("/slots", json=payload, headers=as_user("cust-1")).status_code == 403


def test_barber_cannot_create_slot_for_colleague_403(client, shop, as_user):
    start = datetime.utcnow() + timedelta(days=3)
    response = client.post("/slots", json={
        "service_id": shop.service_id,
        "provider_id": shop.other_barber_id,
        "start_time": start.isoformat(),
        "end_time": (start + timedelta(hours=1)).isoformat(),
    }, headers=as_user("barber-1"))

    assert response.status_code == 403


def test_get_slot_includes_starting_bid(client, shop):
    response = client.get(f"/slots/{shop.auction_slot_id}")
    data = response.get_json()

    assert response.status_code == 200
    assert data["starting_bid"] == 3500
    assert data["service"]["name"] == "Haircut"


def test_list_slots_for_day(client, shop):
    response = client.get(f"/tenants/{shop.slug}/slots?date={shop.day}&service_id={shop.service_id}")
    data = response.get_json()

    assert response.status_code == 200
    assert [s["id"] for s in data] == [shop.auction_slot_id, shop.fixed_slot_id]
    assert all(s["is_available"] for s in data)


def test_list_slots_requires_valid_date(client, shop):
    assert client.get(f"/tenants/{shop.slug}/slots").status_code == 400
    assert client.get(f"/tenants/{shop.slug}/slots?date=31-12-2026").status_code == 400


def test_generate_slots_from_availability(app, shop):
    with app.app_context():
        db.session.add(Availability(provider_id=shop.barber_id, day_of_week=0,
                                    start_time=datetime(2000, 1, 1, 9).time(),
                                    end_time=datetime(2000, 1, 1, 12).time()))
        db.session.commit()

        from models import Profile, Service
        barber = db.session.get(Profile, shop.barber_id)
        haircut = db.session.get(Service, shop.service_id)

        today = date.today()
        # a Monday past the seeded slots
        next_monday = today + timedelta(days=(7 - today.weekday()) % 7 or 7) + timedelta(days=7)
        created = generate_slots(barber, haircut, days=1, start_day=next_monday)

        assert [s.start_time.hour for s in created] == [9, 10, 11]
        assert all(s.end_time - s.start_time == timedelta(minutes=60) for s in created)

        # running again skips existing start times
        assert generate_slots(barber, haircut, days=1, start_day=next_monday) == []


def test_replace_availability_then_generate_via_api(client, shop, as_user):
    response = client.put("/profiles/me/availability", json={"windows": [
        {"day_of_week": d, "start_time": "13:00", "end_time": "15:00"} for d in range(7)
    ]}, headers=as_user("barber-1"))
    assert response.status_code == 200
    assert len(response.get_json()) == 7

    response = client.post("/slots/generate", json={"service_id": shop.service_id, "days": 3},
                           headers=as_user("barber-1"))

    assert response.status_code == 201
    # today's windows may already be in the past
    assert 4 <= response.get_json()["created"] <= 6


def test_replace_availability_rejects_bad_window_400(client, shop, as_user):
    response = client.put("/profiles/me/availability", json={"windows": [
        {"day_of_week": 7, "start_time": "09:00", "end_time": "11:00"}
    ]}, headers=as_user("barber-1"))

    assert response.status_code == 400

    response = client.put("/profiles/me/availability", json={"windows": [1]}, headers=as_user("barber-1"))
    assert response.status_code == 400
    assert response.get_json()["error"] == "Each window must be an object"


def test_create_slot_is_auction_must_be_boolean_400(client, shop, as_user, app):
    start = datetime.utcnow() + timedelta(days=3)
    response = client.post("/slots", json={
        "service_id": shop.service_id,
        "start_time": start.isoformat(),
        "end_time": (start + timedelta(hours=1)).isoformat(),
        "is_auction": "false",
    }, headers=as_user("barber-1"))

    assert response.status_code == 400
    with app.app_context():
        assert Slot.query.count() == 2
