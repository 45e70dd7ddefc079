#!/usr/bin/env python3
"""
Create a demo user with one workspace, a board, three lists and cards due
around the current month. Safe to re-run: an existing user is left alone.

Usage:  python scripts/seed_sample_data.py --username demo --password demo1234
"""
import argparse
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import app  # noqa: E402
from models import Board, BoardList, Card, User, Workspace, db  # noqa: E402

SAMPLE_LISTS = {
    "To Do": [("Draft release notes", "todo", 2), ("Review onboarding copy", "todo", 5)],
    "In Progress": [("Migrate calendar API", "in_progress", 0), ("Board export", "in_progress", 3)],
    "Done": [("Set up staging", "done", -4), ("Fix login redirect", "done", -1)],
}


def seed(username, password, days_from=None):
    base = (days_from or datetime.utcnow()).replace(hour=12, minute=0, second=0, microsecond=0)
    user = User.query.filter_by(username=username).first()
    if user:
        return user, False

    user = User(username=username, name=username.title())
    user.set_password(password)
    db.session.add(user)
    db.session.flush()

    workspace = Workspace(name=f"{user.name}'s workspace", user_id=user.id)
    db.session.add(workspace)
    db.session.flush()

    board = Board(title="Product launch", workspace_id=workspace.id, order_index=1)
    db.session.add(board)
    db.session.flush()

    for list_order, (list_title, cards) in enumerate(SAMPLE_LISTS.items(), start=1):
        board_list = BoardList(title=list_title, board_id=board.id, order_index=list_order)
        db.session.add(board_list)
        db.session.flush()
        for card_order, (title, status, offset) in enumerate(cards, start=1):
            db.session.add(Card(
                list_id=board_list.id,
                title=title,
                status=status,
                completed=status == "done",
                order_index=card_order,
                due_date=base + timedelta(days=offset),
            ))
    db.session.commit()
    return user, True


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a demo workspace with dated cards.")
    parser.add_argument("--username", default="demo", help="Username to create (default: demo).")
    parser.add_argument("--password", default="demo1234", help="Password for the new user.")
    args = parser.parse_args()

    with app.app_context():
        user, created = seed(args.username, args.password)

    if created:
        print(f"Created user {user.username} (id {user.id}) with sample board.")
    else:
        print(f"User {args.username} already exists (id {user.id}); nothing to do.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
