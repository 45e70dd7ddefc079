"""Workspace and board discovery routes used by the calendar's board picker."""

from flask import current_app, jsonify, request

from models import Board, Workspace, db
from services.access_service import accessible_workspace_ids, has_permission
from services.auth_service import get_current_user
from services.validation_service import parse_int_id


def list_workspaces():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401
    if not request.args.get('userId'):
        return jsonify({'error': 'Missing userId'}), 400

    workspaces = Workspace.query.filter(
        Workspace.id.in_(accessible_workspace_ids(user.id))
    ).order_by(Workspace.created_at.asc(), Workspace.id.asc()).all()
    return jsonify([ws.to_dict(user_id=user.id) for ws in workspaces])


def list_boards():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    workspace_raw = request.args.get('workspaceId')
    if not workspace_raw:
        return jsonify({'error': 'Missing workspaceId'}), 400
    workspace_id = parse_int_id(workspace_raw)
    workspace = db.session.get(Workspace, workspace_id) if workspace_id is not None else None
    if not workspace:
        return jsonify({'error': 'Workspace not found'}), 404
    if not has_permission(user.id, workspace, 'VIEW_BOARD'):
        return jsonify({'error': 'Forbidden'}), 403

    boards = Board.query.filter_by(workspace_id=workspace.id).order_by(
        Board.order_index.asc(), Board.id.asc()
    ).all()
    return jsonify([board.to_dict() for board in boards])


def full_board(board_id):
    """Board with its workspace, ordered lists and ordered cards."""
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    board = db.session.get(Board, board_id)
    if not board:
        return jsonify({'error': 'Board not found'}), 404
    if not has_permission(user.id, board.workspace, 'VIEW_BOARD'):
        current_app.logger.warning("User %s denied access to board %s", user.id, board.id)
        return jsonify({'error': 'Not authorized to access this board'}), 403

    return jsonify(board.to_dict(include_lists=True))
