"""User/session routes: pick a user, create one, read or clear the current session."""

from flask import jsonify, request, session

from models import User, db
from services.auth_service import get_current_user


def list_users():
    users = User.query.order_by(User.username.asc()).all()
    return jsonify([{'id': u.id, 'username': u.username, 'name': u.name} for u in users])


def set_user(user_id):
    """Set the current user in session after checking the password."""
    data = request.get_json(silent=True) or {}
    password = str(data.get('password', '')) if isinstance(data, dict) else ''

    user = db.get_or_404(User, user_id)
    if not user.check_password(password):
        return jsonify({'error': 'Invalid password'}), 401

    session['user_id'] = user.id
    session.permanent = True  # Make session persistent across browser restarts
    return jsonify({'success': True, 'username': user.username, 'user_id': user.id})


def create_user():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid payload'}), 400
    for field in ('username', 'name', 'email'):
        if data.get(field) is not None and not isinstance(data[field], str):
            return jsonify({'error': f'Invalid {field}'}), 400

    username = (data.get('username') or '').strip()
    password = str(data.get('password') or '')
    email = (data.get('email') or '').strip() or None

    if not username:
        return jsonify({'error': 'Username is required'}), 400
    if len(password) < 4:
        return jsonify({'error': 'Password must be at least 4 characters'}), 400
    if User.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already exists'}), 400
    if email and User.query.filter_by(email=email).first():
        return jsonify({'error': 'Email already in use'}), 400

    user = User(username=username, name=(data.get('name') or '').strip() or username, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    # Automatically set as current user
    session['user_id'] = user.id
    session.permanent = True
    return jsonify({'success': True, 'user_id': user.id, 'username': user.username}), 201


def current_user_info():
    user = get_current_user()
    if user:
        return jsonify({'user_id': user.id, 'username': user.username})
    return jsonify({'user_id': None, 'username': None})


def logout_user():
    session.pop('user_id', None)
    return jsonify({'success': True})
