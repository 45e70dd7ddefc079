#!/usr/bin/env python3
"""
Print a user's month calendar from a running server.

Authenticates with the shared API key headers (API_SHARED_KEY on the server).
Usage:  python scripts/calendar_report.py --user-id 1 --month 2024-03
"""
import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

import requests
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from backend.calendar_controller import CalendarController  # noqa: E402
from backend.calendar_gateway import CalendarGateway  # noqa: E402
from backend.calendar_grid import MONTH, WEEK  # noqa: E402
from backend.status_styles import status_style  # noqa: E402


def format_cell(cell):
    lines = [f"{cell.day:%a %d %b}{'  (today)' if cell.is_today else ''}"]
    for item in cell.items:
        mark = "x" if item.completed else " "
        try:
            label = status_style(item.status).label
        except ValueError:
            label = item.status
        lines.append(f"  [{mark}] {item.title} ({label})")
    if cell.overflow:
        lines.append(f"  +{cell.overflow} more")
    return "\n".join(lines)


def main() -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Print calendar items for a month or week.")
    parser.add_argument("--user-id", required=True, help="User id to report for.")
    parser.add_argument("--month", help="Pivot month as YYYY-MM (default: current month).")
    parser.add_argument("--week", action="store_true", help="Show only the week containing the pivot.")
    parser.add_argument("--board-id", help="Restrict to one board.")
    parser.add_argument("--status", help="Only show items with this status.")
    parser.add_argument(
        "--api-url",
        default=os.environ.get("BOARDCAL_API_URL", "http://127.0.0.1:5000"),
        help="Base URL of the server (default: BOARDCAL_API_URL or http://127.0.0.1:5000).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log requests and notices.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    session = requests.Session()
    shared_key = os.environ.get("API_SHARED_KEY")
    if shared_key:
        session.headers.update({"X-API-Key": shared_key, "X-User-Id": str(args.user_id)})

    pivot = datetime.strptime(args.month, "%Y-%m").date() if args.month else None
    controller = CalendarController(
        CalendarGateway(args.api_url, session=session),
        args.user_id,
        pivot=pivot,
        view_mode=WEEK if args.week else MONTH,
        board_id=args.board_id,
        tz=os.environ.get("CALENDAR_TIMEZONE"),
    )
    if args.board_id:
        controller.load_boards()
    if args.status and not controller.set_status_filter(args.status):
        print(controller.notices[-1].message, file=sys.stderr)
        return 2
    if not controller.refresh():
        print(f"Could not load calendar: {controller.state.error}", file=sys.stderr)
        return 1

    for cell in controller.day_cells():
        if cell.in_month and (cell.items or cell.is_today):
            print(format_cell(cell))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
