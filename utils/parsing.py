from datetime import datetime, time, timezone

def parse_iso(dt_str: str) -> datetime:
    # Expect ISO format like "2026-01-20T18:00:00"; aware values are stored as naive UTC
    value = datetime.fromisoformat(dt_str.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

def parse_clock(value: str) -> time:
    # "09:30" or "09:30:00"
    return time.fromisoformat(value)

def parse_cents(value):
    """Integer cents from a JSON number or numeric string; None when missing or invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        cents = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if isinstance(value, float) and value != cents:
        return None
    return cents
