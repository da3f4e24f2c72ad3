from flask import Blueprint, request, jsonify, g

from models.profile import PROVIDER_TYPES
from security.rbac import require_roles
from services import negotiation
from services.booking import get_slot_or_404
from utils.auth_context import profile_required
from utils.parsing import parse_cents

bids_bp = Blueprint("bids", __name__)


def _amount_from_request():
    data = request.get_json(silent=True) or {}
    # "amount" in cents; "bid_amount" accepted for older clients
    amount = parse_cents(data.get("amount", data.get("bid_amount")))
    if amount is None or amount <= 0:
        return None
    return amount


@bids_bp.post("/slots/<int:slot_id>/bids")
@profile_required
def place_bid(slot_id: int):
    amount = _amount_from_request()
    if amount is None:
        return jsonify(error="amount must be a positive number of cents"), 400

    slot = get_slot_or_404(slot_id)
    bid = negotiation.place_bid(g.profile, slot, amount)
    return jsonify(bid.to_dict()), 201


@bids_bp.get("/slots/<int:slot_id>/bids")
@profile_required
def list_slot_bids(slot_id: int):
    slot = get_slot_or_404(slot_id)
    bids = negotiation.slot_bids(g.profile, slot)
    return jsonify(
        slot_id=slot.id,
        starting_bid=negotiation.starting_bid(slot),
        bids=[b.to_dict() for b in bids],
    ), 200


@bids_bp.get("/bids/me")
@profile_required
def my_bids():
    # optional: status filter (pending/accepted/rejected/withdrawn/countered)
    rows = negotiation.bids_for(g.profile, status=request.args.get("status"))
    return jsonify([negotiation.bid_details(b) for b in rows]), 200


@bids_bp.get("/bids/<int:bid_id>")
@profile_required
def get_bid_thread(bid_id: int):
    bid = negotiation.get_bid_or_404(bid_id)
    thread = negotiation.bid_thread(g.profile, bid)
    return jsonify(bid=negotiation.bid_details(bid), thread=[b.to_dict() for b in thread]), 200


@bids_bp.post("/bids/<int:bid_id>/withdraw")
@profile_required
def withdraw_bid(bid_id: int):
    bid = negotiation.get_bid_or_404(bid_id)
    bid = negotiation.withdraw_bid(g.profile, bid)
    return jsonify(bid.to_dict()), 200


@bids_bp.post("/bids/<int:bid_id>/reject")
@profile_required
def reject_bid(bid_id: int):
    bid = negotiation.get_bid_or_404(bid_id)
    bid = negotiation.reject_bid(g.profile, bid)
    return jsonify(bid.to_dict()), 200


@bids_bp.post("/bids/<int:bid_id>/counter")
@require_roles(*PROVIDER_TYPES)
def counter_bid(bid_id: int):
    amount = _amount_from_request()
    if amount is None:
        return jsonify(error="amount must be a positive number of cents"), 400

    bid = negotiation.get_bid_or_404(bid_id)
    counter = negotiation.counter_bid(g.profile, bid, amount)
    return jsonify(counter.to_dict()), 201


@bids_bp.post("/bids/<int:bid_id>/accept")
@profile_required
def accept_bid(bid_id: int):
    bid = negotiation.get_bid_or_404(bid_id)
    result = negotiation.accept_bid(g.profile, bid)
    return jsonify(
        bid=result.bid.to_dict(),
        booking=result.booking.to_dict() if result.booking is not None else None,
        warnings=result.warnings,
    ), 200
