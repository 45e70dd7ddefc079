"""
Calendar grid math: which days are visible for a pivot date, and which items
land on each of those days.

Weeks start on Sunday. Due dates arrive as ISO-8601 strings and are bucketed
by their calendar day in the configured local timezone.
"""

import calendar
import os
from datetime import date, datetime, time, timedelta

import pytz

from backend.status_styles import status_key

MONTH = "month"
WEEK = "week"
VIEW_MODES = (MONTH, WEEK)

WEEK_START = calendar.SUNDAY
MAX_INLINE_ITEMS = 4


def resolve_timezone(name=None):
    """pytz zone for the given name, else CALENDAR_TIMEZONE, else UTC."""
    if name is not None and not isinstance(name, str):
        return name
    return pytz.timezone(name or os.environ.get("CALENDAR_TIMEZONE") or "UTC")


def _as_day(value):
    return value.date() if isinstance(value, datetime) else value


def start_of_week(day):
    day = _as_day(day)
    return day - timedelta(days=(day.weekday() - WEEK_START) % 7)


def visible_days(pivot, mode=MONTH):
    """
    Ordered days shown for the pivot: every full week touching the pivot's
    month, or the single week containing the pivot. Always a multiple of 7.
    """
    pivot = _as_day(pivot)
    if mode == WEEK:
        first = start_of_week(pivot)
        return [first + timedelta(days=offset) for offset in range(7)]
    if mode != MONTH:
        raise ValueError(f"Unknown view mode: {mode}")
    weeks = calendar.Calendar(firstweekday=WEEK_START).monthdatescalendar(pivot.year, pivot.month)
    return [day for week in weeks for day in week]


def to_utc_iso(moment):
    return moment.astimezone(pytz.UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def day_start_iso(day, tz=None):
    """Local midnight of the day, as a UTC ISO string."""
    tz = resolve_timezone(tz)
    return to_utc_iso(tz.localize(datetime.combine(_as_day(day), time.min)))


def day_end_iso(day, tz=None):
    tz = resolve_timezone(tz)
    return to_utc_iso(tz.localize(datetime.combine(_as_day(day), time.max)))


def visible_range(pivot, mode=MONTH, tz=None):
    """(startDate, endDate) covering the visible grid, for the range fetch."""
    days = visible_days(pivot, mode)
    return day_start_iso(days[0], tz), day_end_iso(days[-1], tz)


def shift_month(pivot, months):
    pivot = _as_day(pivot)
    month_index = pivot.year * 12 + (pivot.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(pivot.day, last_day))


def shift_pivot(pivot, mode, steps):
    """Move the pivot by whole months or weeks depending on the view mode."""
    if mode == WEEK:
        return _as_day(pivot) + timedelta(weeks=steps)
    return shift_month(pivot, steps)


def parse_due_day(raw, tz=None):
    """
    Local calendar day of a due date, or None.

    Bare dates are taken as-is, naive timestamps as local time, and aware
    timestamps are converted into the local zone first.
    """
    if not raw:
        return None
    if isinstance(raw, datetime):
        moment = raw
    elif isinstance(raw, date):
        return raw
    else:
        text = str(raw).strip()
        if len(text) == 10:
            try:
                return datetime.strptime(text, "%Y-%m-%d").date()
            except ValueError:
                return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            return None
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(resolve_timezone(tz)).date()


def matches_filter(item, status_filter=None):
    return status_filter is None or status_key(item.status) == status_key(status_filter)


def items_for_day(items, day, status_filter=None, tz=None):
    """Items due on the given day, narrowed to the active status filter."""
    day = _as_day(day)
    tz = resolve_timezone(tz)
    return [
        item for item in items
        if parse_due_day(item.due_date, tz) == day and matches_filter(item, status_filter)
    ]


def bucket_by_day(items, days, status_filter=None, tz=None):
    """Map every visible day to its items; days with nothing due map to []."""
    tz = resolve_timezone(tz)
    buckets = {day: [] for day in days}
    for item in items:
        if not matches_filter(item, status_filter):
            continue
        due_day = parse_due_day(item.due_date, tz)
        if due_day in buckets:
            buckets[due_day].append(item)
    return buckets


def cell_preview(day_items, limit=MAX_INLINE_ITEMS):
    """First `limit` items to render inline plus the count summarized as "+N more"."""
    return list(day_items[:limit]), max(0, len(day_items) - limit)
