"""Access-token verification and profile bootstrap."""
from __future__ import annotations

from conftest import make_token


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_missing_token_401(client, shop):
    response = client.get("/bids/me")

    assert response.status_code == 401
    assert response.get_json()["error"] == "Authentication required"


def test_malformed_header_401(client, shop):
    response = client.get("/bids/me", headers={"Authorization": make_token("cust-1")})

    assert response.status_code == 401


def test_token_signed_with_other_secret_401(client, shop):
    response = client.get("/bids/me", headers=_bearer(make_token("cust-1", secret="not-the-secret")))

    assert response.status_code == 401


def test_expired_token_401(client, shop):
    response = client.get("/bids/me", headers=_bearer(make_token("cust-1", expires_in=-60)))

    assert response.status_code == 401


def test_wrong_audience_401(client, shop):
    response = client.get("/bids/me", headers=_bearer(make_token("cust-1", audience="service_role")))

    assert response.status_code == 401


def test_valid_token_without_profile_403(client, shop, as_user):
    response = client.get("/bids/me", headers=as_user("newcomer"))

    assert response.status_code == 403
    assert response.get_json()["error"] == "Profile required"


def test_profile_me_404_then_created_then_updated(client, shop, as_user):
    headers = as_user("newcomer")

    response = client.get("/profiles/me", headers=headers)
    assert response.status_code == 404
    assert response.get_json()["auth_user_id"] == "newcomer"

    response = client.post("/profiles/me", json={"first_name": "Nia"}, headers=headers)
    assert response.status_code == 201
    assert response.get_json()["user_type"] == "customer"
    assert response.get_json()["tenant_id"] is None

    response = client.post("/profiles/me", json={"last_name": "Reyes"}, headers=headers)
    assert response.status_code == 200
    assert response.get_json()["display_name"] == "Nia Reyes"

    assert client.get("/bids/me", headers=headers).status_code == 200


def test_profile_update_rejects_non_string_field_400(client, shop, as_user):
    response = client.post("/profiles/me", json={"first_name": 42}, headers=as_user("cust-1"))

    assert response.status_code == 400


def test_customer_cannot_use_provider_routes_403(client, shop, as_user):
    assert client.get("/profiles/me/availability", headers=as_user("cust-1")).status_code == 403
    assert client.get("/profiles/me/availability", headers=as_user("barber-1")).status_code == 200
    # admins pass provider checks
    assert client.get("/profiles/me/availability", headers=as_user("admin-1")).status_code == 200
