from flask import Blueprint, request, jsonify, g

from models import db
from models.profile import Profile, PROVIDER_TYPES
from security.rbac import require_roles
from services.slots import set_weekly_availability, weekly_availability
from utils.audit import log_event
from utils.auth_context import login_required, profile_required

profile_bp = Blueprint("profile", __name__, url_prefix="/profiles")

EDITABLE_FIELDS = {
    "first_name": 80,
    "last_name": 80,
    "full_name": 160,
    "username": 80,
    "phone_number": 30,
    "bio": 2000,
    "avatar_url": 255,
    "instagram_handle": 80,
}


def _availability_dict(row):
    return {
        "id": row.id,
        "day_of_week": row.day_of_week,
        "start_time": row.start_time.strftime("%H:%M"),
        "end_time": row.end_time.strftime("%H:%M"),
    }


@profile_bp.get("/me")
@login_required
def me():
    if g.profile is None:
        return jsonify(error="Profile not found", auth_user_id=g.auth_user_id), 404
    return jsonify(g.profile.to_dict()), 200


@profile_bp.post("/me")
@login_required
def upsert_profile():
    """First call registers a customer profile; later calls update it."""
    data = request.get_json(silent=True) or {}

    for field, max_len in EDITABLE_FIELDS.items():
        value = data.get(field)
        if value is not None and (not isinstance(value, str) or len(value.strip()) > max_len):
            return jsonify(error=f"Invalid {field}"), 400

    profile = g.profile
    created = profile is None
    if created:
        profile = Profile(user_id=g.auth_user_id)
        db.session.add(profile)

    for field in EDITABLE_FIELDS:
        value = data.get(field)
        if value is not None:
            setattr(profile, field, value.strip() or None)

    db.session.commit()
    log_event("PROFILE_CREATE" if created else "PROFILE_UPDATE", profile_id=profile.id)
    return jsonify(profile.to_dict()), 201 if created else 200


@profile_bp.get("/me/availability")
@require_roles(*PROVIDER_TYPES)
def my_availability():
    return jsonify([_availability_dict(r) for r in weekly_availability(g.profile.id)]), 200


@profile_bp.put("/me/availability")
@require_roles(*PROVIDER_TYPES)
def replace_availability():
    data = request.get_json(silent=True) or {}
    windows = data.get("windows")
    if not isinstance(windows, list):
        return jsonify(error="windows must be a list"), 400

    rows = set_weekly_availability(g.profile, windows)
    log_event("AVAILABILITY_UPDATE", profile_id=g.profile.id, metadata={"windows": len(rows)})
    return jsonify([_availability_dict(r) for r in rows]), 200


@profile_bp.get("/<int:profile_id>/availability")
@profile_required
def provider_availability(profile_id: int):
    provider = Profile.query.get(profile_id)
    if not provider or not provider.is_provider:
        return jsonify(error="Provider not found"), 404
    return jsonify([_availability_dict(r) for r in weekly_availability(provider.id)]), 200
