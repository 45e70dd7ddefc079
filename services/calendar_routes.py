"""Calendar range fetch and batch due-date updates for the calendar view."""

from flask import current_app, jsonify, request

from models import Board, BoardList, Card, db
from services.access_service import accessible_workspace_ids, has_permission
from services.auth_service import get_current_user
from services.validation_service import parse_int_id, parse_iso_instant


def calendar_items():
    if request.method == 'PATCH':
        return update_due_dates()
    return list_calendar_items()


def list_calendar_items():
    """Cards with a due date across the user's workspaces, optionally bounded by a range and a board."""
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    if not request.args.get('userId'):
        return jsonify({'error': 'Missing userId'}), 400

    start_raw = request.args.get('startDate')
    end_raw = request.args.get('endDate')
    board_raw = request.args.get('boardId')

    query = Card.query.join(BoardList, Card.list_id == BoardList.id).join(
        Board, BoardList.board_id == Board.id
    ).filter(
        Board.workspace_id.in_(accessible_workspace_ids(user.id)),
        Card.due_date.isnot(None)
    )

    # Range filtering only applies when both ends are given
    if start_raw and end_raw:
        start_at = parse_iso_instant(start_raw)
        if not start_at:
            return jsonify({'error': 'Invalid startDate'}), 400
        end_at = parse_iso_instant(end_raw)
        if not end_at:
            return jsonify({'error': 'Invalid endDate'}), 400
        if end_at < start_at:
            return jsonify({'error': 'endDate must be on/after startDate'}), 400
        query = query.filter(Card.due_date >= start_at, Card.due_date <= end_at)

    if board_raw:
        board_id = parse_int_id(board_raw)
        if board_id is None:
            return jsonify({'error': 'Invalid boardId'}), 400
        query = query.filter(BoardList.board_id == board_id)

    cards = query.order_by(Card.due_date.asc(), Card.id.asc()).all()
    return jsonify([card.to_dict() for card in cards])


def update_due_dates():
    """Apply [{id, dueDate}] updates; the response is aligned with the request by position."""
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    updates = request.get_json(silent=True)
    if not isinstance(updates, list):
        return jsonify({'error': 'Invalid format: expected array of updates'}), 400

    results = []
    for update in updates:
        if not isinstance(update, dict) or not update.get('id'):
            results.append({'success': False, 'error': 'Missing card ID'})
            continue
        raw_id = update.get('id')
        card_id = parse_int_id(raw_id)
        card = db.session.get(Card, card_id) if card_id is not None else None
        if not card:
            results.append({'id': raw_id, 'success': False, 'error': 'Card not found'})
            continue

        workspace = card.workspace
        if not has_permission(user.id, workspace, 'EDIT_CARD'):
            results.append({'id': raw_id, 'success': False, 'error': 'Access denied'})
            continue

        raw_due = update.get('dueDate')
        if raw_due:
            due_date = parse_iso_instant(raw_due)
            if not due_date:
                results.append({'id': raw_id, 'success': False, 'error': 'Invalid due date'})
                continue
        else:
            due_date = None

        card.due_date = due_date
        db.session.commit()
        results.append({'id': raw_id, 'success': True, 'data': card.to_dict()})

    moved = sum(1 for r in results if r['success'])
    current_app.logger.info("Calendar due-date batch by user %s: %s/%s updated", user.id, moved, len(results))
    return jsonify(results)
