"""Weekly availability and slot generation for providers."""
from datetime import datetime, date, timedelta

from flask import current_app

from models import db
from models.availability import Availability
from models.service import Service
from models.slot import Slot, AVAILABLE
from services.errors import ValidationFailed
from utils.parsing import parse_clock


def set_weekly_availability(provider, windows) -> list:
    """
    Replaces a provider's weekly hours.
    ``windows`` is a list of ``{"day_of_week": 0-6, "start_time": "09:00", "end_time": "17:00"}``.
    """
    rows = []
    for window in windows or []:
        if not isinstance(window, dict):
            raise ValidationFailed("Each window must be an object")
        try:
            day = int(window.get("day_of_week"))
            start = parse_clock(window.get("start_time") or "")
            end = parse_clock(window.get("end_time") or "")
        except (TypeError, ValueError):
            raise ValidationFailed("Each window needs day_of_week, start_time and end_time (HH:MM)")
        if day < 0 or day > 6:
            raise ValidationFailed("day_of_week must be between 0 (Monday) and 6 (Sunday)")
        if end <= start:
            raise ValidationFailed("end_time must be after start_time")
        rows.append(Availability(provider_id=provider.id, day_of_week=day, start_time=start, end_time=end))

    Availability.query.filter_by(provider_id=provider.id).delete(synchronize_session=False)
    db.session.add_all(rows)
    db.session.commit()
    return rows


def weekly_availability(provider_id: int):
    return (
        Availability.query
        .filter_by(provider_id=provider_id)
        .order_by(Availability.day_of_week.asc(), Availability.start_time.asc())
        .all()
    )


def generate_slots(provider, service, days=None, start_day=None) -> list:
    """
    Creates fixed-price slots for ``service`` from the provider's weekly hours,
    starting at ``start_day`` (default today) for ``days`` days.
    Start times that already have a slot for this provider are skipped.
    """
    days = days or current_app.config.get("SLOT_GENERATION_DAYS", 14)
    start_day = start_day or date.today()
    length = timedelta(minutes=service.duration or current_app.config.get("SLOT_LENGTH_MINUTES", 60))

    windows = weekly_availability(provider.id)
    if not windows:
        return []

    range_start = datetime(start_day.year, start_day.month, start_day.day)
    range_end = range_start + timedelta(days=days)
    existing = {
        s.start_time
        for s in Slot.query.filter(
            Slot.provider_id == provider.id,
            Slot.start_time >= range_start,
            Slot.start_time < range_end,
        ).all()
    }

    now = datetime.utcnow()
    created = []
    for offset in range(days):
        day = start_day + timedelta(days=offset)
        for window in windows:
            if window.day_of_week != day.weekday():
                continue
            cursor = datetime.combine(day, window.start_time)
            window_end = datetime.combine(day, window.end_time)
            while cursor + length <= window_end:
                if cursor > now and cursor not in existing:
                    slot = Slot(
                        tenant_id=service.tenant_id,
                        provider_id=provider.id,
                        service_id=service.id,
                        start_time=cursor,
                        end_time=cursor + length,
                        status=AVAILABLE,
                    )
                    db.session.add(slot)
                    created.append(slot)
                    existing.add(cursor)
                cursor += length

    db.session.commit()
    current_app.logger.info("Generated %s slot(s) for provider %s / service %s",
                            len(created), provider.id, service.id)
    return created


def services_for_provider(provider):
    return (
        Service.query
        .filter(Service.tenant_id == provider.tenant_id)
        .filter((Service.provider_id == provider.id) | (Service.provider_id.is_(None)))
        .all()
    )
