# utils.py
import datetime

from dateutil import parser as date_parser

DISPLAY_FORMAT = "%a %b %d %Y"


def to_day(value):
    """Return *value* truncated to a ``datetime.date`` (``None`` stays ``None``)."""
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def compare_dates(first, second) -> bool:
    """Return ``True`` when both values fall on the same day (or are both ``None``)."""
    return to_day(first) == to_day(second)


def default_format_date(value) -> str:
    """Format like ``Date.toDateString``: ``Wed Jan 15 2020``.

    The year is always four digits (``Mon Jan 01 0001``), platform ``%Y``
    does not pad years below 1000.
    """
    day = to_day(value)
    return f"{day:%a %b %d} {day.year:04d}"


def default_parse_date(text: str):
    """Return the date described by *text* or ``None`` if it cannot be parsed.

    Accepts the loose formats people actually type, e.g. ``Jan 1 2010``,
    ``Wed Jan 15 2020`` or ``2020-01-15``.
    """
    if not text or not text.strip():
        return None
    text = text.strip()
    try:
        # own output first, dateutil reads "0001" as the current century
        return datetime.datetime.strptime(text, DISPLAY_FORMAT).date()
    except ValueError:
        pass
    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError):
        return None
