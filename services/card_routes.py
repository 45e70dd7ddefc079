"""Card detail and partial update routes."""

from flask import current_app, jsonify, request

from models import BoardList, Card, db
from services.access_service import get_workspace_role, has_permission
from services.auth_service import get_current_user
from services.validation_service import normalize_status, parse_bool, parse_int_id, parse_iso_instant

EDITABLE_FIELDS = ('title', 'description', 'dueDate', 'status', 'completed', 'listId', 'order')


def handle_card(card_id):
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    card = db.session.get(Card, card_id)
    if not card:
        return jsonify({'error': 'Card not found'}), 404
    workspace = card.workspace

    if request.method == 'GET':
        if not has_permission(user.id, workspace, 'VIEW_BOARD'):
            return jsonify({'error': 'Cannot view this card'}), 403
        payload = card.to_dict()
        payload['permissions'] = {
            'canEdit': has_permission(user.id, workspace, 'EDIT_CARD'),
            'userRole': get_workspace_role(user.id, workspace),
        }
        return jsonify(payload)

    if not has_permission(user.id, workspace, 'EDIT_CARD'):
        role = get_workspace_role(user.id, workspace)
        return jsonify({'error': f"Insufficient permissions to edit this card. Your role: {role or 'Not a member'}"}), 403

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid payload'}), 400
    updates = {key: data[key] for key in EDITABLE_FIELDS if key in data}

    if 'title' in updates:
        if not isinstance(updates['title'], str):
            return jsonify({'error': 'Invalid title'}), 400
        title = updates['title'].strip()
        if not title:
            return jsonify({'error': 'Title cannot be empty'}), 400
        card.title = title
    if 'description' in updates:
        description = updates['description']
        if description is not None and not isinstance(description, str):
            return jsonify({'error': 'Invalid description'}), 400
        card.description = (description or '').strip() or None
    if 'status' in updates:
        status = normalize_status(updates['status'])
        if not status:
            return jsonify({'error': 'Invalid status'}), 400
        card.status = status
    if 'completed' in updates:
        card.completed = parse_bool(updates['completed'])
    if 'dueDate' in updates:
        if updates['dueDate']:
            due_date = parse_iso_instant(updates['dueDate'])
            if not due_date:
                return jsonify({'error': 'Invalid dueDate'}), 400
            card.due_date = due_date
        else:
            card.due_date = None
    if 'listId' in updates:
        list_id = parse_int_id(updates['listId'])
        if list_id != card.list_id:
            target = db.session.get(BoardList, list_id) if list_id is not None else None
            if not target or target.board.workspace_id != workspace.id:
                return jsonify({'error': 'Invalid target list'}), 400
            if not has_permission(user.id, workspace, 'MOVE_CARDS'):
                return jsonify({'error': 'Cannot move cards between lists'}), 403
            card.list_id = target.id
    if 'order' in updates:
        if not has_permission(user.id, workspace, 'REORDER_CARDS'):
            return jsonify({'error': 'Cannot reorder cards'}), 403
        order = parse_int_id(updates['order'])
        if order is None:
            return jsonify({'error': 'Invalid order'}), 400
        card.order_index = order

    db.session.commit()
    current_app.logger.info("Card %s updated by user %s (%s)", card.id, user.id, ', '.join(sorted(updates)) or 'no fields')
    return jsonify(card.to_dict())
