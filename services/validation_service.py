from datetime import datetime

import pytz

from models import CARD_STATUSES


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ["1", "true", "yes", "on"]


def parse_int_id(raw):
    if isinstance(raw, bool):
        return None
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def parse_iso_instant(raw):
    """
    Parse an ISO-8601 date or timestamp into a naive UTC datetime.

    Accepts a trailing 'Z'. Naive timestamps and bare dates are taken as UTC.
    Returns None on failure.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return None
    if value.tzinfo is not None:
        try:
            value = value.astimezone(pytz.UTC).replace(tzinfo=None)
        except (ValueError, OverflowError):
            return None
    return value


def normalize_status(raw):
    """Map a status value to its canonical lowercase key, or None when unknown."""
    if raw is None:
        return None
    key = str(raw).strip().lower().replace("-", "_").replace(" ", "_")
    if key == "in_review":
        key = "review"
    return key if key in CARD_STATUSES else None
