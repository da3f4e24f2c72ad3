"""
Fixed-price slot booking.

Booking is a read-then-write sequence: the slot status is checked, a
booking row is inserted, then the slot is flipped to ``booked`` as a
separate best-effort step. Nothing locks the slot in between, so two
customers racing for the same slot can both end up with a booking.
"""
from datetime import datetime, timedelta

from flask import current_app

from models import db
from models.booking import Booking, CONFIRMED, CANCELLED
from models.profile import Profile
from models.service import Service
from models.slot import Slot, AVAILABLE, BOOKED
from services import notifications
from services.errors import Forbidden, InvalidTransition, NotFound, ValidationFailed, Conflict
from services.steps import run_best_effort
from utils.audit import log_event


def manages_slot(profile, slot) -> bool:
    """The slot's own provider, or an admin of the slot's tenant."""
    if profile is None or slot is None:
        return False
    if profile.id == slot.provider_id:
        return True
    return profile.is_admin and profile.tenant_id == slot.tenant_id


def get_slot_or_404(slot_id: int, tenant_id=None) -> Slot:
    slot = Slot.query.get(slot_id)
    if not slot or (tenant_id is not None and slot.tenant_id != tenant_id):
        raise NotFound("Slot not found")
    return slot


def mark_slot(slot_id: int, status: str):
    slot = Slot.query.get(slot_id)
    if slot:
        slot.status = status
    return slot


def slots_for_day(tenant_id: int, day: datetime, service_id=None, provider_id=None):
    start = datetime(day.year, day.month, day.day)
    end = start + timedelta(days=1)

    q = Slot.query.filter(
        Slot.tenant_id == tenant_id,
        Slot.start_time >= start,
        Slot.start_time < end,
    )
    if service_id:
        q = q.filter(Slot.service_id == service_id)
    if provider_id:
        q = q.filter(Slot.provider_id == provider_id)
    return q.order_by(Slot.start_time.asc()).all()


def create_slot(actor, service_id, start_time, end_time, provider_id=None,
                is_auction=False, min_price=None, auction_end_time=None) -> Slot:
    if end_time <= start_time:
        raise ValidationFailed("end_time must be after start_time")
    if min_price is not None and min_price < 0:
        raise ValidationFailed("min_price must not be negative")
    if auction_end_time is not None and not is_auction:
        raise ValidationFailed("auction_end_time requires is_auction")
    if auction_end_time is not None and auction_end_time > start_time:
        raise ValidationFailed("auction_end_time must not be after start_time")

    service = Service.query.get(service_id)
    if not service or service.tenant_id != actor.tenant_id:
        raise NotFound("Service not found")

    provider_id = provider_id or actor.id
    if provider_id != actor.id and not actor.is_admin:
        raise Forbidden("Providers can only create their own slots")

    provider = Profile.query.get(provider_id)
    if not provider or provider.tenant_id != service.tenant_id or not provider.is_provider:
        raise NotFound("Provider not found")

    slot = Slot(
        tenant_id=service.tenant_id,
        provider_id=provider.id,
        service_id=service.id,
        start_time=start_time,
        end_time=end_time,
        status=AVAILABLE,
        is_auction=bool(is_auction),
        min_price=min_price,
        auction_end_time=auction_end_time,
    )
    db.session.add(slot)
    db.session.commit()

    log_event("SLOT_CREATE", profile_id=actor.id, entity="slot", entity_id=slot.id,
              metadata={"is_auction": slot.is_auction}, tenant_id=slot.tenant_id)
    return slot


def book_slot(customer, slot):
    """
    Books a fixed-price slot at the service's base price.
    Returns ``(booking, warnings)``.
    """
    if slot.is_auction:
        raise ValidationFailed("Auction slots must be bid on")
    if slot.status != AVAILABLE:
        raise Conflict("Slot already booked")
    if slot.start_time <= datetime.utcnow():
        raise ValidationFailed("Cannot book past/started slots")

    service = Service.query.get(slot.service_id)
    booking = Booking(
        tenant_id=slot.tenant_id,
        slot_id=slot.id,
        service_id=slot.service_id,
        provider_profile_id=slot.provider_id,
        customer_id=customer.id,
        status=CONFIRMED,
        price_paid=(service.base_price if service else 0) or 0,
    )
    db.session.add(booking)
    db.session.commit()

    warnings = []
    run_best_effort("mark slot booked", lambda: mark_slot(slot.id, BOOKED), warnings)

    log_event("BOOKING_CREATE", profile_id=customer.id, entity="booking", entity_id=booking.id,
              metadata={"slot_id": slot.id}, tenant_id=slot.tenant_id)
    notifications.notify(
        slot.provider_id,
        "New Booking",
        f"{customer.display_name} booked {service.name if service else 'a service'} "
        f"at {slot.start_time.isoformat()}.",
        notifications.BOOKING,
        related_id=booking.id,
    )
    return booking, warnings


def cancel_booking(actor, booking, reason=None):
    """
    Customers may cancel their own booking outside the cutoff window;
    the slot's provider and tenant admins may cancel at any time.
    Returns ``(booking, warnings)``.
    """
    slot = Slot.query.get(booking.slot_id)
    is_customer = booking.customer_id == actor.id
    is_manager = manages_slot(actor, slot)

    if not is_customer and not is_manager:
        raise NotFound("Booking not found")
    if booking.status != CONFIRMED:
        raise InvalidTransition("Booking not cancellable")

    if is_customer and not is_manager and slot:
        cutoff_hours = current_app.config.get("CANCEL_CUTOFF_HOURS", 12)
        if (slot.start_time - datetime.utcnow()).total_seconds() < cutoff_hours * 3600:
            raise Forbidden(f"Cancellation not allowed within {cutoff_hours} hours of start")

    booking.status = CANCELLED
    booking.cancelled_at = datetime.utcnow()
    booking.cancel_reason = reason or ("Customer cancellation" if is_customer else "Provider cancellation")
    db.session.commit()

    warnings = []
    run_best_effort("release slot", lambda: _release_slot(booking.slot_id), warnings)

    log_event("BOOKING_CANCEL", profile_id=actor.id, entity="booking", entity_id=booking.id,
              metadata={"reason": booking.cancel_reason}, tenant_id=booking.tenant_id)

    other_party = booking.provider_profile_id if is_customer else booking.customer_id
    notifications.notify(
        other_party,
        "Booking Cancelled",
        f"Booking #{booking.id} was cancelled: {booking.cancel_reason}.",
        notifications.BOOKING,
        related_id=booking.id,
    )
    return booking, warnings


def _release_slot(slot_id: int):
    still_booked = Booking.query.filter_by(slot_id=slot_id, status=CONFIRMED).count()
    if still_booked:
        return None
    return mark_slot(slot_id, AVAILABLE)


def bookings_for(profile, status=None):
    """Customers see their bookings, providers the ones they serve, admins their tenant's."""
    q = Booking.query
    if profile.is_admin:
        q = q.filter(Booking.tenant_id == profile.tenant_id)
    elif profile.is_provider:
        q = q.filter(Booking.provider_profile_id == profile.id)
    else:
        q = q.filter(Booking.customer_id == profile.id)
    if status:
        q = q.filter(Booking.status == status)
    return q.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(200).all()


def booking_details(booking) -> dict:
    slot = Slot.query.get(booking.slot_id)
    service = Service.query.get(booking.service_id) if booking.service_id else None
    provider = Profile.query.get(booking.provider_profile_id) if booking.provider_profile_id else None
    customer = Profile.query.get(booking.customer_id)

    out = booking.to_dict()
    out.update({
        "start_time": slot.start_time.isoformat() if slot else None,
        "end_time": slot.end_time.isoformat() if slot else None,
        "service_name": service.name if service else f"Service #{booking.service_id}",
        "provider_name": provider.display_name if provider else f"Provider #{booking.provider_profile_id}",
        "customer_name": customer.display_name if customer else f"Customer #{booking.customer_id}",
        "customer_phone": customer.phone_number if customer else None,
    })
    return out
