from flask import Blueprint, request, jsonify, g

from models.booking import Booking
from models.profile import Profile, PROVIDER_TYPES
from models.service import Service
from security.rbac import require_roles
from services import booking as booking_service
from services.negotiation import starting_bid
from services.slots import generate_slots
from utils.audit import log_event
from utils.auth_context import profile_required
from utils.parsing import parse_iso, parse_cents

booking_bp = Blueprint("booking", __name__)


# ---------- PROVIDERS: create slots ----------
@booking_bp.post("/slots")
@require_roles(*PROVIDER_TYPES)
def create_slot():
    data = request.get_json(silent=True) or {}
    service_id = data.get("service_id")
    start_time = data.get("start_time")
    end_time = data.get("end_time")

    if not service_id or not start_time or not end_time:
        return jsonify(error="service_id, start_time, end_time are required"), 400

    try:
        st = parse_iso(start_time)
        et = parse_iso(end_time)
        auction_end = parse_iso(data["auction_end_time"]) if data.get("auction_end_time") else None
    except (TypeError, ValueError):
        return jsonify(error="Invalid datetime format. Use ISO e.g. 2026-01-20T18:00:00"), 400

    is_auction = data.get("is_auction", False)
    if not isinstance(is_auction, bool):
        return jsonify(error="is_auction must be true or false"), 400

    min_price = None
    if data.get("min_price") is not None:
        min_price = parse_cents(data.get("min_price"))
        if min_price is None:
            return jsonify(error="min_price must be an amount in cents"), 400

    slot = booking_service.create_slot(
        g.profile,
        service_id,
        st,
        et,
        provider_id=data.get("provider_id"),
        is_auction=is_auction,
        min_price=min_price,
        auction_end_time=auction_end,
    )
    return jsonify(slot.to_dict()), 201


@booking_bp.post("/slots/generate")
@require_roles(*PROVIDER_TYPES)
def generate_provider_slots():
    data = request.get_json(silent=True) or {}
    days = data.get("days")
    if days is not None and (not isinstance(days, int) or not 0 < days <= 90):
        return jsonify(error="days must be between 1 and 90"), 400

    service = Service.query.get(data.get("service_id") or 0)
    if not service or service.tenant_id != g.profile.tenant_id:
        return jsonify(error="Service not found"), 404

    provider = g.profile
    if data.get("provider_id") and g.profile.is_admin:
        provider = Profile.query.get(data["provider_id"])
        if not provider or provider.tenant_id != g.profile.tenant_id or not provider.is_provider:
            return jsonify(error="Provider not found"), 404

    created = generate_slots(provider, service, days=days)
    log_event("SLOT_GENERATE", profile_id=g.profile.id, entity="service", entity_id=service.id,
              metadata={"created": len(created)})
    return jsonify(created=len(created), slots=[s.to_dict() for s in created]), 201


@booking_bp.get("/slots/<int:slot_id>")
def get_slot(slot_id: int):
    slot = booking_service.get_slot_or_404(slot_id)
    out = slot.to_dict()
    out["service"] = slot.service.to_dict() if slot.service else None
    out["provider"] = slot.provider.to_dict() if slot.provider else None
    if slot.is_auction:
        out["starting_bid"] = starting_bid(slot)
    return jsonify(out), 200


# ---------- CUSTOMERS: book a fixed-price slot ----------
@booking_bp.post("/bookings")
@profile_required
def create_booking():
    data = request.get_json(silent=True) or {}
    slot_id = data.get("slot_id")
    if not slot_id:
        return jsonify(error="slot_id required"), 400

    slot = booking_service.get_slot_or_404(slot_id)
    booking, warnings = booking_service.book_slot(g.profile, slot)
    return jsonify(booking=booking.to_dict(), warnings=warnings), 201


# ---------- cancel booking (policy window for customers) ----------
@booking_bp.post("/bookings/<int:booking_id>/cancel")
@profile_required
def cancel_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    reason = (data.get("reason") or "").strip()[:120] or None

    booking = Booking.query.get(booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404

    booking, warnings = booking_service.cancel_booking(g.profile, booking, reason)
    return jsonify(message="Cancelled", booking=booking.to_dict(), warnings=warnings), 200


# ---------- view my bookings ----------
@booking_bp.get("/bookings/me")
@profile_required
def my_bookings():
    # optional: status filter (confirmed/cancelled)
    status = request.args.get("status")
    rows = booking_service.bookings_for(g.profile, status=status)
    return jsonify([booking_service.booking_details(b) for b in rows]), 200


@booking_bp.get("/bookings/<int:booking_id>")
@profile_required
def get_booking(booking_id: int):
    booking = Booking.query.get(booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404

    visible = (
        booking.customer_id == g.profile.id
        or booking.provider_profile_id == g.profile.id
        or (g.profile.is_admin and g.profile.tenant_id == booking.tenant_id)
    )
    if not visible:
        return jsonify(error="Booking not found"), 404
    return jsonify(booking_service.booking_details(booking)), 200
