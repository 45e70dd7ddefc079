"""
Drag-and-drop due-date reassignment.

IDLE -> DRAGGING (drag_start) -> HOVERING_DAY (drag_over) -> DROPPED (drop)
-> IDLE. drag_end always returns to IDLE, whether or not a drop happened.
"""

import logging
from enum import Enum

from backend.calendar_gateway import GatewayError
from backend.calendar_grid import day_start_iso

logger = logging.getLogger(__name__)


class DragPhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    HOVERING_DAY = "hovering_day"
    DROPPED = "dropped"


class DragDropReconciler:
    def __init__(self, gateway, state, notify):
        self.gateway = gateway
        self.state = state
        self.notify = notify
        self.phase = DragPhase.IDLE
        self.dragged_item = None
        self.hover_day = None

    def _reset(self):
        self.phase = DragPhase.IDLE
        self.dragged_item = None
        self.hover_day = None

    def drag_start(self, item):
        self.dragged_item = item
        self.hover_day = None
        self.phase = DragPhase.DRAGGING

    def drag_over(self, day):
        if self.dragged_item is None:
            return
        self.hover_day = day
        self.phase = DragPhase.HOVERING_DAY

    def drag_leave(self):
        self.hover_day = None
        if self.dragged_item is not None:
            self.phase = DragPhase.DRAGGING

    def drag_end(self):
        self._reset()

    def drop(self, day):
        """
        Move the dragged item onto `day`. Returns True only when the server
        confirmed the move; the local cache is untouched otherwise.
        """
        self.hover_day = None
        item = self.dragged_item
        if item is None or day is None:
            return False

        self.phase = DragPhase.DROPPED
        due_date = day_start_iso(day, self.state.tz)
        self.state.is_moving = True
        try:
            results = self.gateway.patch_due_dates([(item.id, due_date)])
        except GatewayError as exc:
            logger.warning("Moving card %s to %s failed: %s", item.id, day, exc)
            self.notify("error", "Failed to move card")
            return False
        finally:
            self.state.is_moving = False
            self._reset()

        result = results[0] if results else None
        if result is None or not result.success:
            self.notify("error", (result.error if result else None) or "Failed to move card")
            return False

        self.state.apply_move(item, due_date, day)
        self.notify("success", "Card moved successfully")
        return True
