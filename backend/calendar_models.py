"""Client-side mirrors of the calendar payloads returned by the API."""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from backend.status_styles import status_key


@dataclass(frozen=True)
class ListRef:
    id: str
    title: str


@dataclass(frozen=True)
class BoardRef:
    id: str
    title: str


@dataclass(frozen=True)
class Assignee:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class CalendarItem:
    """
    A card with (possibly) a due date, as shown on the calendar.

    due_date keeps the wire representation (ISO-8601 string); it is parsed into
    a local calendar day only when placing the item on the grid.
    """
    id: str
    title: str
    completed: bool = False
    due_date: Optional[str] = None
    status: str = "todo"
    list_id: Optional[str] = None
    list_ref: Optional[ListRef] = None
    board_ref: Optional[BoardRef] = None
    assignees: List[Assignee] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        list_data = data.get("list") or None
        board_data = (list_data or {}).get("board") or None
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            completed=bool(data.get("completed")),
            due_date=data.get("dueDate") or None,
            status=status_key(data.get("status") or "todo"),
            list_id=_str_or_none(data.get("listId")),
            list_ref=ListRef(str(list_data["id"]), list_data.get("title") or "") if list_data else None,
            board_ref=BoardRef(str(board_data["id"]), board_data.get("title") or "") if board_data else None,
            assignees=[
                Assignee(str(a["id"]), a.get("name"), a.get("email"))
                for a in (data.get("assignees") or [])
            ],
        )

    def with_changes(self, **changes):
        return replace(self, **changes)


@dataclass(frozen=True)
class PatchResult:
    """Outcome of one entry in a batch due-date update."""
    success: bool
    id: Optional[str] = None
    error: Optional[str] = None
    item: Optional[CalendarItem] = None

    @classmethod
    def from_dict(cls, data):
        item_data = data.get("data")
        return cls(
            success=bool(data.get("success")),
            id=_str_or_none(data.get("id")),
            error=data.get("error"),
            item=CalendarItem.from_dict(item_data) if item_data else None,
        )


@dataclass
class Board:
    id: str
    title: str
    workspace_id: Optional[str] = None
    lists: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            workspace_id=_str_or_none(data.get("workspaceId")),
            lists=list(data.get("lists") or []),
        )


def _str_or_none(value):
    return None if value is None else str(value)
