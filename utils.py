from datetime import datetime, timezone


def utc_now():
    """Return the current instant as a naive UTC datetime, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value):
    """Parse an ISO 8601 string into a naive UTC datetime.

    Accepts a trailing ``Z`` and explicit offsets; aware values are converted
    to UTC before the offset is dropped. Raises ``ValueError`` on bad input.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if not text:
            raise ValueError("empty datetime")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def format_window(start, end):
    """Human label for a booking window, e.g. ``02/01/2024 08:00 to 10:00``."""
    if start.date() == end.date():
        return f"{start.strftime('%d/%m/%Y %H:%M')} to {end.strftime('%H:%M')}"
    return f"{start.strftime('%d/%m/%Y %H:%M')} to {end.strftime('%d/%m/%Y %H:%M')}"


def split_upcoming_past(bookings, now):
    """Split bookings into ``(upcoming, past)`` around ``now``.

    A booking still running counts as upcoming. Upcoming bookings come back in
    chronological order, past ones most recent first.
    """
    upcoming = sorted((b for b in bookings if b.end_at >= now), key=lambda b: b.start_at)
    past = sorted(
        (b for b in bookings if b.end_at < now), key=lambda b: b.start_at, reverse=True
    )
    return upcoming, past
