"""
Calendar view controller.

Owns the view state, keeps the item cache in step with the server through the
gateway, and exposes the actions a calendar page needs: navigation, day
selection, status and board filters, completion toggles and drag-and-drop.
Failures never raise out of an action; they surface as notices and, for range
fetches, as an error on the state.
"""

import logging
from collections import namedtuple
from datetime import datetime

from backend.calendar_gateway import GatewayError
from backend.calendar_grid import MONTH, cell_preview, resolve_timezone, shift_pivot, visible_range
from backend.calendar_state import CalendarViewState
from backend.drag_drop import DragDropReconciler

logger = logging.getLogger(__name__)

Notice = namedtuple("Notice", ["level", "message"])
DayCell = namedtuple(
    "DayCell",
    ["day", "items", "overflow", "in_month", "is_today", "is_selected", "is_drag_over"],
)


class CalendarController:
    def __init__(self, gateway, user_id, pivot=None, view_mode=MONTH, board_id=None, tz=None):
        self.gateway = gateway
        self.user_id = user_id
        self.initial_board_id = None if board_id is None else str(board_id)
        self.boards = []
        self.notices = []
        tz = resolve_timezone(tz)
        self.state = CalendarViewState(pivot=pivot or datetime.now(tz).date(), tz=tz)
        self.state.set_view_mode(view_mode)
        self.drag = DragDropReconciler(gateway, self.state, self.notify)
        self._latest_request = 0

    def today(self):
        return datetime.now(self.state.tz).date()

    def notify(self, level, message):
        self.notices.append(Notice(level, message))
        if level == "error":
            logger.warning(message)
        else:
            logger.info(message)

    # --- Remote sync -------------------------------------------------------

    def refresh(self):
        """
        Fetch the items for the visible window. Each fetch is tagged with a
        request id; a response that is no longer the latest is dropped.
        """
        self._latest_request += 1
        request_id = self._latest_request
        start_date, end_date = visible_range(self.state.pivot, self.state.view_mode, self.state.tz)

        self.state.is_loading = True
        self.state.error = None
        try:
            items = self.gateway.fetch_range(self.user_id, start_date, end_date, self.state.board_id)
        except GatewayError as exc:
            if request_id != self._latest_request:
                return False
            self.state.is_loading = False
            self.state.clear_items(str(exc) or "Could not load your calendar data")
            self.notify("error", "Failed to load calendar data")
            return False

        if request_id != self._latest_request:
            logger.debug("Discarding stale calendar response %s (latest is %s)", request_id, self._latest_request)
            return False
        self.state.is_loading = False
        self.state.replace_items(items)
        logger.info("Loaded calendar items: %s", len(items))
        return True

    def retry(self):
        return self.refresh()

    def load_boards(self):
        """Discover boards through the user's workspaces and apply the initial board, if any."""
        try:
            self.boards = self.gateway.fetch_all_boards(self.user_id)
        except GatewayError as exc:
            logger.warning("Error fetching boards: %s", exc)
            self.notify("error", "Failed to load boards")
            return self.boards

        if self.initial_board_id:
            match = self._find_board(self.initial_board_id)
            if match:
                self.state.board_id = match.id
                self.load_board_view(match.id)
        return self.boards

    def load_board_view(self, board_id):
        try:
            self.state.board_view = self.gateway.fetch_full_board(board_id)
        except GatewayError as exc:
            logger.warning("Error loading full board data: %s", exc)
            self.notify("error", "Failed to load board details")
            return None
        return self.state.board_view

    def _find_board(self, board_id):
        board_id = str(board_id)
        return next((board for board in self.boards if board.id == board_id), None)

    # --- Navigation and filters --------------------------------------------

    def set_pivot(self, pivot):
        self.state.pivot = pivot.date() if isinstance(pivot, datetime) else pivot
        return self.refresh()

    def go_previous(self):
        return self.set_pivot(shift_pivot(self.state.pivot, self.state.view_mode, -1))

    def go_next(self):
        return self.set_pivot(shift_pivot(self.state.pivot, self.state.view_mode, 1))

    def go_today(self):
        return self.set_pivot(self.today())

    def set_view_mode(self, mode):
        if mode == self.state.view_mode:
            return False
        self.state.set_view_mode(mode)
        return self.refresh()

    def set_status_filter(self, status):
        """Narrow the grid to one status ('all' or None clears it). Re-derives from the cache without a fetch."""
        if status in (None, "", "all"):
            status = None
        try:
            self.state.set_status_filter(status)
        except ValueError:
            self.notify("error", f"Unknown status filter: {status}")
            return False
        return True

    def set_board(self, board_id):
        """Scope the calendar to one board ('all' or None for every board)."""
        if board_id in (None, "all"):
            if self.state.board_id is None:
                return False
            self.state.board_id = None
            self.state.board_view = None
            return self.refresh()

        board = self._find_board(board_id)
        if board is None:
            self.notify("error", "Board not found")
            return False
        if board.id == self.state.board_id:
            self.load_board_view(board.id)
            return False
        self.state.board_id = board.id
        self.load_board_view(board.id)
        return self.refresh()

    # --- Day selection -----------------------------------------------------

    def select_day(self, day):
        return self.state.select_day(day)

    def close_day(self):
        self.state.close_day()

    def day_cells(self):
        """Per-day render data for the grid, derived from the cached items."""
        today = self.today()
        buckets = self.state.day_buckets()
        cells = []
        for day, day_items in buckets.items():
            inline, overflow = cell_preview(day_items)
            cells.append(DayCell(
                day=day,
                items=inline,
                overflow=overflow,
                in_month=self.state.view_mode != MONTH or day.month == self.state.pivot.month,
                is_today=day == today,
                is_selected=day == self.state.selected_day,
                is_drag_over=day == self.drag.hover_day,
            ))
        return cells

    # --- Mutations ---------------------------------------------------------

    def toggle_completion(self, item):
        new_completed = not item.completed
        self.state.toggling_ids.add(item.id)
        try:
            confirmed = self.gateway.toggle_completion(item.id, new_completed)
        except GatewayError as exc:
            logger.warning("Error toggling item completion: %s", exc)
            self.notify("error", "Failed to update status")
            return False
        finally:
            self.state.toggling_ids.discard(item.id)

        self.state.apply_changes(item.id, completed=confirmed.completed)
        self.notify("success", "Card status updated")
        return True

    def change_status(self, item, status):
        try:
            confirmed = self.gateway.update_status(item.id, status)
        except GatewayError as exc:
            logger.warning("Error changing status of card %s: %s", item.id, exc)
            self.notify("error", "Failed to update status")
            return False

        self.state.apply_changes(item.id, status=confirmed.status)
        self.notify("success", "Card status updated")
        return True

    def card_detail_path(self, item):
        if item.board_ref is None:
            self.notify("error", "Could not locate the board for this card")
            return None
        return f"/dashboard/{self.user_id}/boards/{item.board_ref.id}?cardId={item.id}"

    # --- Drag and drop -----------------------------------------------------

    def drag_start(self, item):
        self.drag.drag_start(item)

    def drag_over(self, day):
        self.drag.drag_over(day)

    def drag_leave(self):
        self.drag.drag_leave()

    def drop(self, day):
        return self.drag.drop(day)

    def drag_end(self):
        self.drag.drag_end()

    @property
    def dragging_item_id(self):
        item = self.drag.dragged_item
        return item.id if item is not None else None
