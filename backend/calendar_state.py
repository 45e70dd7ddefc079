"""View state owned by the calendar controller: pivot, selection, filters and the item cache."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from backend.calendar_grid import (
    MONTH,
    VIEW_MODES,
    bucket_by_day,
    items_for_day,
    matches_filter,
    parse_due_day,
    visible_days,
)
from backend.calendar_models import Board, CalendarItem
from backend.status_styles import CardStatus


@dataclass
class CalendarViewState:
    pivot: date
    view_mode: str = MONTH
    selected_day: Optional[date] = None
    status_filter: Optional[str] = None
    board_id: Optional[str] = None
    tz: object = None

    items: List[CalendarItem] = field(default_factory=list)
    selected_items: List[CalendarItem] = field(default_factory=list)
    board_view: Optional[Board] = None

    # Loading flags are scoped to the action that set them
    is_loading: bool = False
    is_moving: bool = False
    toggling_ids: set = field(default_factory=set)
    error: Optional[str] = None

    def visible_days(self):
        return visible_days(self.pivot, self.view_mode)

    def set_view_mode(self, mode):
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode}")
        self.view_mode = mode

    def items_for(self, day):
        return items_for_day(self.items, day, self.status_filter, self.tz)

    def day_buckets(self):
        return bucket_by_day(self.items, self.visible_days(), self.status_filter, self.tz)

    def select_day(self, day):
        if isinstance(day, datetime):
            day = day.date()
        self.selected_day = day
        self.selected_items = self.items_for(day)
        return self.selected_items

    def close_day(self):
        self.selected_day = None
        self.selected_items = []

    def set_status_filter(self, status):
        self.status_filter = None if status is None else CardStatus.parse(status).value
        if self.selected_day is not None:
            self.selected_items = self.items_for(self.selected_day)

    def replace_items(self, items):
        self.items = list(items)
        self.error = None
        if self.selected_day is not None:
            self.selected_items = self.items_for(self.selected_day)

    def clear_items(self, error):
        self.items = []
        self.selected_items = []
        self.error = error

    def find_item(self, item_id):
        item_id = str(item_id)
        return next((item for item in self.items if item.id == item_id), None)

    def apply_changes(self, item_id, **changes):
        """
        Patch a cached item after a confirmed mutation. The selected-day list is
        patched in place; an entry that no longer passes the status filter drops out.
        """
        item_id = str(item_id)
        updated = None
        for index, item in enumerate(self.items):
            if item.id == item_id:
                updated = item.with_changes(**changes)
                self.items[index] = updated

        panel = []
        for item in self.selected_items:
            if item.id == item_id:
                item = item.with_changes(**changes)
                if not matches_filter(item, self.status_filter):
                    continue
            panel.append(item)
        self.selected_items = panel
        return updated

    def apply_move(self, moved, due_date, new_day):
        """
        Reflect a confirmed due-date change: the item leaves the old day's
        panel and joins the new day's panel when that day is the selected one.
        """
        current = self.find_item(moved.id) or moved
        old_day = parse_due_day(current.due_date, self.tz)
        updated = self.apply_changes(moved.id, due_date=due_date) or current.with_changes(due_date=due_date)

        if self.selected_day is None:
            return updated
        if self.selected_day == old_day:
            self.selected_items = [item for item in self.selected_items if item.id != updated.id]
        if self.selected_day == new_day and matches_filter(updated, self.status_filter):
            self.selected_items = [item for item in self.selected_items if item.id != updated.id]
            self.selected_items.append(updated)
        return updated
