"""HTTP client for the calendar, card and board endpoints."""

import logging

import requests

from backend.calendar_models import Board, CalendarItem, PatchResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


class GatewayError(Exception):
    """A request failed in transport or came back with a non-2xx status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class CalendarGateway:
    def __init__(self, base_url, session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s unreachable: %s", method, path, exc)
            raise GatewayError(f"Could not reach the server: {exc}") from exc

        if not response.ok:
            logger.warning("%s %s failed with status %s", method, path, response.status_code)
            raise GatewayError(
                f"Request failed: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError("Server returned invalid JSON", status_code=response.status_code) from exc

    def fetch_range(self, user_id, start_date, end_date, board_id=None):
        """Items due within [start_date, end_date], ordered by due date."""
        params = {"userId": user_id, "startDate": start_date, "endDate": end_date}
        if board_id:
            params["boardId"] = board_id
        payload = self._request("GET", "/api/calendar", params=params)
        return [CalendarItem.from_dict(row) for row in payload or []]

    def toggle_completion(self, item_id, completed):
        payload = self._request("PATCH", f"/api/cards/{item_id}", json={"completed": bool(completed)})
        return CalendarItem.from_dict(payload)

    def update_status(self, item_id, status):
        payload = self._request("PATCH", f"/api/cards/{item_id}", json={"status": status})
        return CalendarItem.from_dict(payload)

    def patch_due_dates(self, updates):
        """
        Batch due-date update. `updates` is an iterable of (item_id, due_date)
        pairs; results come back aligned by position.
        """
        body = [{"id": item_id, "dueDate": due_date} for item_id, due_date in updates]
        payload = self._request("PATCH", "/api/calendar", json=body)
        return [PatchResult.from_dict(row) for row in payload or []]

    def fetch_workspaces(self, user_id):
        return self._request("GET", "/api/workspace", params={"userId": user_id}) or []

    def fetch_boards(self, workspace_id):
        payload = self._request("GET", "/api/board", params={"workspaceId": workspace_id})
        return [Board.from_dict(row) for row in payload or []]

    def fetch_all_boards(self, user_id):
        """Boards across every workspace; a workspace whose boards fail to load is skipped."""
        boards = []
        for workspace in self.fetch_workspaces(user_id):
            try:
                boards.extend(self.fetch_boards(workspace["id"]))
            except GatewayError as exc:
                logger.warning("Skipping boards for workspace %s: %s", workspace.get("id"), exc)
        return boards

    def fetch_full_board(self, board_id):
        return Board.from_dict(self._request("GET", f"/api/board/{board_id}/full"))
