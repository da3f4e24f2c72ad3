"""Businesses, their service catalogue and staff."""
from __future__ import annotations

from models import Profile


def test_create_business_makes_owner_admin_201(client, shop, as_user):
    response = client.post("/tenants", json={"name": "Ink Lab", "first_name": "Olu",
                                             "address": "12 Main St"}, headers=as_user("owner-9"))
    data = response.get_json()

    assert response.status_code == 201
    assert data["tenant"]["slug"] == "ink-lab"
    assert data["tenant"]["address"] == "12 Main St"
    assert data["profile"]["user_type"] == "admin"
    assert data["profile"]["tenant_id"] == data["tenant"]["id"]


def test_create_business_slug_taken_409(client, shop, as_user):
    response = client.post("/tenants", json={"name": "Fade House"}, headers=as_user("owner-9"))

    assert response.status_code == 409
    assert response.get_json()["error"] == "Business URL already taken"


def test_create_business_when_already_member_409(client, shop, as_user):
    response = client.post("/tenants", json={"name": "Second Shop"}, headers=as_user("barber-1"))

    assert response.status_code == 409


def test_create_business_validation(client, shop, as_user):
    assert client.post("/tenants", json={}, headers=as_user("owner-9")).status_code == 400
    assert client.post("/tenants", json={"name": "Shop", "slug": "no spaces!"},
                       headers=as_user("owner-9")).status_code == 400
    assert client.post("/tenants", json={"name": "Shop"}).status_code == 401


def test_get_business_and_unknown_404(client, shop):
    response = client.get(f"/tenants/{shop.slug}")
    assert response.status_code == 200
    assert response.get_json()["name"] == "Fade House"

    response = client.get("/tenants/nowhere")
    assert response.status_code == 404
    assert response.get_json()["error"] == "Business not found"


def test_services_catalogue(client, shop):
    services = client.get(f"/tenants/{shop.slug}/services").get_json()
    assert [s["name"] for s in services] == ["Haircut"]

    response = client.get(f"/tenants/{shop.slug}/services/{shop.service_id}")
    data = response.get_json()
    assert response.status_code == 200
    assert [p["id"] for p in data["providers"]] == [shop.barber_id]

    assert client.get(f"/tenants/{shop.slug}/services/9999").status_code == 404


def test_barber_adds_own_service_201(client, shop, as_user):
    response = client.post(f"/tenants/{shop.slug}/services", json={
        "name": "Beard Trim", "base_price": 1500, "duration": 30, "service_type": "beard",
    }, headers=as_user("barber-2"))
    data = response.get_json()

    assert response.status_code == 201
    assert data["provider_id"] == shop.other_barber_id
    assert data["base_price"] == 1500


def test_service_creation_rules(client, shop, as_user):
    payload = {"name": "Fade", "base_price": 2000}

    assert client.post(f"/tenants/{shop.slug}/services", json=payload,
                       headers=as_user("cust-1")).status_code == 403
    assert client.post(f"/tenants/{shop.slug}/services", json={"name": "Fade", "base_price": -1},
                       headers=as_user("barber-1")).status_code == 400
    assert client.post(f"/tenants/{shop.slug}/services", json={**payload, "duration": 0},
                       headers=as_user("barber-1")).status_code == 400


def test_staff_of_other_business_cannot_add_services_403(client, shop, as_user):
    client.post("/tenants", json={"name": "Ink Lab"}, headers=as_user("owner-9"))

    response = client.post("/tenants/ink-lab/services", json={"name": "Fade", "base_price": 2000},
                           headers=as_user("barber-1"))

    assert response.status_code == 403


def test_admin_adds_staff(client, shop, as_user, app):
    response = client.post(f"/tenants/{shop.slug}/staff", json={
        "user_id": "artist-1", "user_type": "tattoo_artist", "first_name": "Ren",
    }, headers=as_user("admin-1"))

    assert response.status_code == 201
    assert response.get_json()["user_type"] == "tattoo_artist"

    staff = client.get(f"/tenants/{shop.slug}/staff").get_json()
    assert {p["first_name"] for p in staff} == {"Bo", "Cy", "Ren"}

    with app.app_context():
        assert Profile.query.filter_by(user_id="artist-1").one().tenant_id == shop.tenant_id


def test_add_staff_rules(client, shop, as_user):
    payload = {"user_id": "cust-1", "user_type": "barber"}

    assert client.post(f"/tenants/{shop.slug}/staff", json=payload,
                       headers=as_user("barber-1")).status_code == 403
    assert client.post(f"/tenants/{shop.slug}/staff", json={"user_id": "cust-1", "user_type": "admin"},
                       headers=as_user("admin-1")).status_code == 400

    # an existing customer profile is promoted in place
    response = client.post(f"/tenants/{shop.slug}/staff", json=payload, headers=as_user("admin-1"))
    assert response.status_code == 200
    assert response.get_json()["id"] == shop.alice_id


def test_admin_reads_tenant_audit_trail(client, shop, as_user):
    client.post(f"/slots/{shop.auction_slot_id}/bids", json={"amount": 4000}, headers=as_user("cust-1"))
    client.post("/tenants", json={"name": "Ink Lab"}, headers=as_user("owner-9"))

    response = client.get(f"/tenants/{shop.slug}/audit-logs?action=BID_PLACE", headers=as_user("admin-1"))
    rows = response.get_json()

    assert response.status_code == 200
    assert len(rows) == 1
    assert rows[0]["profile_id"] == shop.alice_id
    assert rows[0]["metadata"] == {"slot_id": shop.auction_slot_id, "amount": 4000}

    # other businesses' events stay out of the trail
    actions = {r["action"] for r in client.get(f"/tenants/{shop.slug}/audit-logs",
                                               headers=as_user("admin-1")).get_json()}
    assert "TENANT_CREATE" not in actions


def test_audit_trail_is_admin_only(client, shop, as_user):
    assert client.get(f"/tenants/{shop.slug}/audit-logs", headers=as_user("barber-1")).status_code == 403
    client.post("/tenants", json={"name": "Ink Lab"}, headers=as_user("owner-9"))
    assert client.get(f"/tenants/{shop.slug}/audit-logs", headers=as_user("owner-9")).status_code == 403
