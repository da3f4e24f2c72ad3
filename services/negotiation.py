"""
Bid / counter-bid negotiation on auction slots.

A bid moves ``pending -> accepted | rejected | withdrawn | countered``.
Only ``countered`` has a follow-up: the provider's reply is a new bid
(``owner_type="provider"``) whose ``parent_bid_id`` points at the customer
bid. Replies cannot be countered again, so chains are one level deep.

Accepting a bid is a sequence of independently committed steps:

1. the bid is marked ``accepted``
2. a confirmed booking is inserted at the bid amount
3. the slot is marked ``booked``
4. other confirmed bookings on the slot are cancelled
5. other pending bids on the slot are rejected

Only step 1 is required to succeed. Steps 2-5 are best-effort: a failure is
logged and reported back as a warning, and earlier steps are not undone.
There is no lock or idempotency key, so two accepts racing on one slot can
both produce bookings.
"""
from collections import namedtuple
from datetime import datetime

from flask import current_app

from models import db
from models.bid import (
    Bid, PENDING, ACCEPTED, REJECTED, WITHDRAWN, COUNTERED,
    OWNER_CUSTOMER, OWNER_PROVIDER,
)
from models.booking import Booking, CONFIRMED, CANCELLED
from models.profile import Profile
from models.service import Service
from models.slot import Slot, AVAILABLE, BOOKED
from services import notifications
from services.booking import manages_slot, mark_slot
from services.errors import Conflict, Forbidden, InvalidTransition, NotFound, ValidationFailed
from services.steps import run_best_effort
from utils.audit import log_event

AcceptResult = namedtuple("AcceptResult", ["bid", "booking", "warnings"])


def starting_bid(slot) -> int:
    """Service base price plus the configured increment, or the slot minimum if higher."""
    service = Service.query.get(slot.service_id)
    base_price = (service.base_price if service else 0) or 0
    increment = current_app.config.get("BID_INCREMENT_CENTS", 500)
    return max(base_price + increment, slot.min_price or 0)


def get_bid_or_404(bid_id: int) -> Bid:
    bid = Bid.query.get(bid_id)
    if not bid:
        raise NotFound("Bid not found")
    return bid


def _is_customer_side(actor, bid) -> bool:
    return actor is not None and bid.customer_id == actor.id


def _is_provider_side(actor, bid) -> bool:
    if actor is None:
        return False
    if bid.profile_provider_id == actor.id:
        return True
    return manages_slot(actor, Slot.query.get(bid.slot_id))


def _owns(actor, bid) -> bool:
    if bid.owner_type == OWNER_PROVIDER:
        return _is_provider_side(actor, bid)
    return _is_customer_side(actor, bid)


def _may_answer(actor, bid) -> bool:
    # the party a pending bid is addressed to
    if bid.owner_type == OWNER_PROVIDER:
        return _is_customer_side(actor, bid)
    return _is_provider_side(actor, bid)


def _require_pending(bid, action: str):
    if bid.status != PENDING:
        raise InvalidTransition(f"Only pending bids can be {action} (bid is {bid.status})")


def _other_party(actor, bid):
    if actor.id == bid.customer_id:
        return bid.profile_provider_id
    return bid.customer_id


def place_bid(customer, slot, amount: int) -> Bid:
    if not slot.is_auction:
        raise ValidationFailed("Slot is not open for bidding")
    if slot.status != AVAILABLE:
        raise InvalidTransition("Slot already booked")
    if slot.auction_end_time and slot.auction_end_time <= datetime.utcnow():
        raise InvalidTransition("Bidding has closed for this slot")
    if manages_slot(customer, slot):
        raise Forbidden("Providers cannot bid on their own slots")

    minimum = starting_bid(slot)
    if amount < minimum:
        raise ValidationFailed(f"Your bid must be at least {notifications.format_cents(minimum)}.")

    existing = (
        Bid.query
        .filter(
            Bid.slot_id == slot.id,
            Bid.customer_id == customer.id,
            Bid.owner_type == OWNER_CUSTOMER,
            Bid.parent_bid_id.is_(None),
            Bid.status != WITHDRAWN,
        )
        .first()
    )
    if existing:
        raise Conflict("You have already placed a bid on this slot.")

    bid = Bid(
        tenant_id=slot.tenant_id,
        slot_id=slot.id,
        customer_id=customer.id,
        profile_provider_id=slot.provider_id,
        bid_amount=amount,
        owner_type=OWNER_CUSTOMER,
        status=PENDING,
    )
    db.session.add(bid)
    db.session.commit()

    current_app.logger.info("Bid %s placed on slot %s for %s", bid.id, slot.id, amount)
    log_event("BID_PLACE", profile_id=customer.id, entity="bid", entity_id=bid.id,
              metadata={"slot_id": slot.id, "amount": amount}, tenant_id=slot.tenant_id)
    notifications.notify(
        slot.provider_id,
        "New Bid Placed",
        f"{customer.display_name} placed a bid of {notifications.format_cents(amount)} "
        f"on your slot at {slot.start_time.isoformat()}.",
        notifications.BID,
        related_id=bid.id,
    )
    return bid


def withdraw_bid(actor, bid) -> Bid:
    if not _owns(actor, bid):
        raise Forbidden("You can only withdraw your own bids")
    _require_pending(bid, "withdrawn")

    bid.status = WITHDRAWN
    db.session.commit()

    log_event("BID_WITHDRAW", profile_id=actor.id, entity="bid", entity_id=bid.id, tenant_id=bid.tenant_id)
    return bid


def reject_bid(actor, bid) -> Bid:
    if not _may_answer(actor, bid):
        raise Forbidden("You cannot reject this bid")
    _require_pending(bid, "rejected")

    bid.status = REJECTED
    db.session.commit()

    log_event("BID_REJECT", profile_id=actor.id, entity="bid", entity_id=bid.id, tenant_id=bid.tenant_id)
    notifications.notify(
        _other_party(actor, bid),
        "Bid Rejected",
        f"Your bid of {notifications.format_cents(bid.bid_amount)} was rejected.",
        notifications.BID,
        related_id=bid.id,
    )
    return bid


def counter_bid(actor, bid, amount: int) -> Bid:
    if bid.owner_type != OWNER_CUSTOMER:
        raise InvalidTransition("Counter-bids cannot be countered")
    if not _is_provider_side(actor, bid):
        raise Forbidden("Only the slot's provider can counter this bid")
    _require_pending(bid, "countered")
    if amount <= bid.bid_amount:
        raise ValidationFailed("Counter-bid must be higher than the original bid")

    counter = Bid(
        tenant_id=bid.tenant_id,
        slot_id=bid.slot_id,
        customer_id=bid.customer_id,
        profile_provider_id=bid.profile_provider_id,
        bid_amount=amount,
        owner_type=OWNER_PROVIDER,
        status=PENDING,
        parent_bid_id=bid.id,
    )
    db.session.add(counter)
    bid.status = COUNTERED
    db.session.commit()

    log_event("BID_COUNTER", profile_id=actor.id, entity="bid", entity_id=counter.id,
              metadata={"parent_bid_id": bid.id, "amount": amount}, tenant_id=bid.tenant_id)
    notifications.notify(
        bid.customer_id,
        "Counter Offer",
        f"The provider countered your bid of {notifications.format_cents(bid.bid_amount)} "
        f"with {notifications.format_cents(amount)}.",
        notifications.BID,
        related_id=counter.id,
    )
    return counter


def _insert_booking(bid) -> Booking:
    slot = Slot.query.get(bid.slot_id)
    booking = Booking(
        tenant_id=bid.tenant_id,
        slot_id=bid.slot_id,
        service_id=slot.service_id if slot else None,
        provider_profile_id=bid.profile_provider_id or (slot.provider_id if slot else None),
        customer_id=bid.customer_id,
        bid_id=bid.id,
        status=CONFIRMED,
        price_paid=bid.bid_amount,
    )
    db.session.add(booking)
    return booking


def _cancel_other_bookings(slot_id: int, keep_booking_id=None) -> int:
    q = Booking.query.filter(Booking.slot_id == slot_id, Booking.status == CONFIRMED)
    if keep_booking_id is not None:
        q = q.filter(Booking.id != keep_booking_id)
    now = datetime.utcnow()
    rows = q.all()
    for row in rows:
        row.status = CANCELLED
        row.cancelled_at = now
        row.cancel_reason = "Slot awarded to an accepted bid"
    return len(rows)


def _reject_other_bids(slot_id: int, accepted_bid_id: int) -> int:
    rows = (
        Bid.query
        .filter(Bid.slot_id == slot_id, Bid.id != accepted_bid_id, Bid.status == PENDING)
        .all()
    )
    for row in rows:
        row.status = REJECTED
    return len(rows)


def accept_bid(actor, bid) -> AcceptResult:
    """Providers accept customer bids; customers accept provider counter-bids."""
    if not _may_answer(actor, bid):
        raise Forbidden("You cannot accept this bid")
    _require_pending(bid, "accepted")

    bid.status = ACCEPTED
    db.session.commit()

    bid_id = bid.id
    slot_id = bid.slot_id
    log_event("BID_ACCEPT", profile_id=actor.id, entity="bid", entity_id=bid_id,
              metadata={"slot_id": slot_id, "amount": bid.bid_amount}, tenant_id=bid.tenant_id)

    warnings = []
    booking = run_best_effort("create booking", lambda: _insert_booking(bid), warnings)
    booking_id = booking.id if booking is not None else None

    run_best_effort("mark slot booked", lambda: mark_slot(slot_id, BOOKED), warnings)
    cancelled = run_best_effort(
        "cancel other bookings", lambda: _cancel_other_bookings(slot_id, booking_id), warnings
    )
    rejected = run_best_effort(
        "reject other bids", lambda: _reject_other_bids(slot_id, bid_id), warnings
    )

    if cancelled:
        current_app.logger.warning("Accepting bid %s cancelled %s booking(s) on slot %s",
                                   bid_id, cancelled, slot_id)
    if warnings:
        current_app.logger.warning("Bid %s accepted with incomplete follow-up: %s", bid_id, warnings)

    notifications.notify(
        _other_party(actor, bid),
        "Bid Accepted",
        f"Your bid of {notifications.format_cents(bid.bid_amount)} was accepted.",
        notifications.BID,
        related_id=bid_id,
    )
    if booking_id is not None:
        log_event("BOOKING_CREATE", profile_id=actor.id, entity="booking", entity_id=booking_id,
                  metadata={"slot_id": slot_id, "bid_id": bid_id, "rejected_bids": rejected or 0},
                  tenant_id=bid.tenant_id)

    return AcceptResult(bid=bid, booking=booking, warnings=warnings)


def bids_for(profile, status=None):
    """Customers see their bids, providers bids addressed to them, admins their tenant's."""
    q = Bid.query
    if profile.is_admin:
        q = q.filter(Bid.tenant_id == profile.tenant_id)
    elif profile.is_provider:
        q = q.filter(Bid.profile_provider_id == profile.id)
    else:
        q = q.filter(Bid.customer_id == profile.id)
    if status:
        q = q.filter(Bid.status == status)
    return q.order_by(Bid.created_at.desc(), Bid.id.desc()).limit(200).all()


def slot_bids(actor, slot):
    q = Bid.query.filter(Bid.slot_id == slot.id)
    if not manages_slot(actor, slot):
        q = q.filter(Bid.customer_id == actor.id)
    return q.order_by(Bid.created_at.asc(), Bid.id.asc()).all()


def bid_thread(actor, bid):
    """The root customer bid followed by its counter-bids, oldest first."""
    root = bid.parent if bid.parent_bid_id else bid
    if not (_is_customer_side(actor, root) or _is_provider_side(actor, root)):
        raise NotFound("Bid not found")
    replies = (
        Bid.query
        .filter(Bid.parent_bid_id == root.id)
        .order_by(Bid.created_at.asc(), Bid.id.asc())
        .all()
    )
    return [root] + replies


def bid_details(bid) -> dict:
    slot = Slot.query.get(bid.slot_id)
    service = Service.query.get(slot.service_id) if slot else None
    provider = Profile.query.get(slot.provider_id) if slot else None

    out = bid.to_dict()
    out.update({
        "service_id": slot.service_id if slot else None,
        "provider_id": slot.provider_id if slot else None,
        "start_time": slot.start_time.isoformat() if slot else None,
        "end_time": slot.end_time.isoformat() if slot else None,
        "is_auction": slot.is_auction if slot else None,
        "min_price": slot.min_price if slot else None,
        "service_name": service.name if service else f"Service #{slot.service_id if slot else None}",
        "provider_name": provider.display_name if provider else f"Provider #{slot.provider_id if slot else None}",
    })
    return out
