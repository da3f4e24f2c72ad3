from flask import Blueprint, request, jsonify, g

from models.profile import PROVIDER_TYPES
from security.rbac import require_roles
from services import auctions as auction_service
from utils.auth_context import profile_required
from utils.parsing import parse_iso, parse_cents
from utils.tenancy import get_tenant_or_404

auction_bp = Blueprint("auction", __name__, url_prefix="/auctions")


@auction_bp.get("")
def list_auctions():
    tenant_id = None
    slug = request.args.get("tenant")
    if slug:
        tenant_id = get_tenant_or_404(slug).id
    rows = auction_service.list_auctions(tenant_id=tenant_id, status=request.args.get("status"))
    return jsonify([auction_service.auction_details(a) for a in rows]), 200


@auction_bp.post("")
@require_roles(*PROVIDER_TYPES)
def create_auction():
    data = request.get_json(silent=True) or {}
    if not data.get("service_id") or not data.get("auction_start") or not data.get("auction_end"):
        return jsonify(error="service_id, auction_start, auction_end are required"), 400
    try:
        start = parse_iso(data["auction_start"])
        end = parse_iso(data["auction_end"])
    except (TypeError, ValueError):
        return jsonify(error="Invalid datetime format. Use ISO e.g. 2026-01-20T18:00:00"), 400

    auction = auction_service.create_auction(
        g.profile,
        data["service_id"],
        parse_cents(data.get("starting_price")),
        start,
        end,
    )
    return jsonify(auction_service.auction_details(auction)), 201


@auction_bp.get("/<int:auction_id>")
def get_auction(auction_id: int):
    auction = auction_service.get_auction_or_404(auction_id)
    out = auction_service.auction_details(auction)
    out["bids"] = [b.to_dict() for b in auction_service.auction_bids(auction)]
    return jsonify(out), 200


@auction_bp.post("/<int:auction_id>/bids")
@profile_required
def place_auction_bid(auction_id: int):
    data = request.get_json(silent=True) or {}
    amount = parse_cents(data.get("amount"))
    if amount is None or amount <= 0:
        return jsonify(error="Please enter a valid bid amount."), 400

    auction = auction_service.get_auction_or_404(auction_id)
    row = auction_service.place_auction_bid(g.profile, auction, amount)
    return jsonify(
        bid=row.to_dict(),
        auction=auction_service.auction_details(auction),
    ), 201


@auction_bp.get("/<int:auction_id>/bids")
def poll_auction_bids(auction_id: int):
    """Polling endpoint: bids newer than ``since`` plus the current price."""
    auction = auction_service.get_auction_or_404(auction_id)
    since = None
    if request.args.get("since"):
        try:
            since = parse_iso(request.args["since"])
        except ValueError:
            return jsonify(error="Invalid since timestamp"), 400

    rows = auction_service.auction_bids(auction, since=since)
    details = auction_service.auction_details(auction)
    return jsonify(
        bids=[b.to_dict() for b in rows],
        current_price=auction.current_price,
        current_winner_id=auction.current_winner_id,
        status=details["status"],
        seconds_left=details["seconds_left"],
    ), 200
