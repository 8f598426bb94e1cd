"""Calendar-day helpers. All arithmetic is on whole UTC calendar days."""

from datetime import date, datetime, timedelta

import pytz


def parse_date(value):
    """Coerce a date-like value to ``datetime.date``.

    Accepts ``date``, ``datetime`` (aware values are converted to UTC first)
    and ISO ``YYYY-MM-DD`` / ISO datetime strings. Anything else, including
    unparsable strings, returns None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None:
            value = value.astimezone(pytz.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return parse_date(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def add_days_utc(value, days):
    """Add ``days`` calendar days to a date-like value; None if unparsable."""
    base = parse_date(value)
    if base is None:
        return None
    return base + timedelta(days=days)


def days_between(later, earlier):
    """Whole days from ``earlier`` to ``later``, never negative."""
    return max(0, (later - earlier).days)
