"""Card status values and the badge style each one renders with."""

from collections import namedtuple
from enum import Enum


class CardStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    CANCELED = "canceled"
    # Legacy variants still present on older boards
    BACKLOG = "backlog"
    REVIEW = "review"

    @classmethod
    def parse(cls, raw):
        """Accept 'IN_PROGRESS', 'in-progress', 'In Review' etc. Raises ValueError for unknown values."""
        if isinstance(raw, cls):
            return raw
        key = str(raw or "").strip().lower().replace("-", "_").replace(" ", "_")
        if key == "in_review":
            key = "review"
        return cls(key)


StatusStyle = namedtuple("StatusStyle", ["label", "tone"])

STATUS_STYLES = {
    CardStatus.TODO: StatusStyle("To Do", "blue"),
    CardStatus.IN_PROGRESS: StatusStyle("In Progress", "yellow"),
    CardStatus.DONE: StatusStyle("Done", "green"),
    CardStatus.CANCELED: StatusStyle("Canceled", "red"),
    CardStatus.BACKLOG: StatusStyle("Backlog", "gray"),
    CardStatus.REVIEW: StatusStyle("In Review", "purple"),
}

_unstyled = [status.value for status in CardStatus if status not in STATUS_STYLES]
if _unstyled:
    raise RuntimeError(f"Missing status styles for: {', '.join(_unstyled)}")


def status_style(raw) -> StatusStyle:
    return STATUS_STYLES[CardStatus.parse(raw)]


def status_key(raw) -> str:
    """Canonical status string; unknown values pass through lowercased."""
    try:
        return CardStatus.parse(raw).value
    except ValueError:
        return str(raw or "").strip().lower()
