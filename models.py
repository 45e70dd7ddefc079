from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime

db = SQLAlchemy()

CARD_STATUSES = ('todo', 'in_progress', 'done', 'canceled', 'backlog', 'review')


def isoformat_utc(value):
    """Serialize a naive UTC datetime as an ISO-8601 string with a Z suffix."""
    if value is None:
        return None
    return value.replace(tzinfo=None).isoformat(timespec='milliseconds') + 'Z'


card_assignees = db.Table(
    'card_assignee',
    db.Column('card_id', db.Integer, db.ForeignKey('card.id'), primary_key=True),
    db.Column('user_id', db.Integer, db.ForeignKey('user.id'), primary_key=True),
)


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=True)
    email = db.Column(db.String(120), unique=True, nullable=True)
    password_hash = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    workspaces = db.relationship('Workspace', backref='owner', lazy=True, cascade="all, delete-orphan")
    memberships = db.relationship('WorkspaceMember', backref='user', lazy=True, cascade="all, delete-orphan")

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_summary(self):
        return {'id': self.id, 'name': self.name, 'email': self.email}


class Workspace(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    members = db.relationship('WorkspaceMember', backref='workspace', lazy=True, cascade="all, delete-orphan")
    boards = db.relationship(
        'Board',
        backref='workspace',
        lazy=True,
        cascade="all, delete-orphan",
        order_by="Board.order_index"
    )

    def role_for(self, user_id):
        """Return the user's role in this workspace, or None when they have no access."""
        if self.user_id == user_id:
            return 'owner'
        for member in self.members:
            if member.user_id == user_id:
                return member.role
        return None

    def to_dict(self, user_id=None):
        data = {
            'id': self.id,
            'name': self.name,
            'userId': self.user_id,
            'createdAt': isoformat_utc(self.created_at),
        }
        if user_id is not None:
            data['role'] = self.role_for(user_id)
            data['isOwner'] = self.user_id == user_id
        return data


class WorkspaceMember(db.Model):
    __table_args__ = (db.UniqueConstraint('user_id', 'workspace_id', name='uq_workspace_member'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    workspace_id = db.Column(db.Integer, db.ForeignKey('workspace.id'), nullable=False)
    role = db.Column(db.String(20), default='member')  # owner | admin | member | guest
    joined_at = db.Column(db.DateTime, default=datetime.utcnow)


class Board(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    workspace_id = db.Column(db.Integer, db.ForeignKey('workspace.id'), nullable=False)
    order_index = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, onupdate=datetime.utcnow)

    lists = db.relationship(
        'BoardList',
        backref='board',
        lazy=True,
        cascade="all, delete-orphan",
        order_by="BoardList.order_index"
    )

    def to_dict(self, include_lists=False):
        data = {
            'id': self.id,
            'title': self.title,
            'workspaceId': self.workspace_id,
            'order': self.order_index,
            'createdAt': isoformat_utc(self.created_at),
            'updatedAt': isoformat_utc(self.updated_at),
            'workspace': {'id': self.workspace.id, 'name': self.workspace.name} if self.workspace else None,
        }
        if include_lists:
            data['lists'] = [board_list.to_dict(include_cards=True) for board_list in self.lists]
        return data


class BoardList(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    board_id = db.Column(db.Integer, db.ForeignKey('board.id'), nullable=False)
    order_index = db.Column(db.Integer, default=0)

    cards = db.relationship(
        'Card',
        backref='list',
        lazy=True,
        cascade="all, delete-orphan",
        order_by="Card.order_index"
    )

    def to_dict(self, include_cards=False):
        data = {
            'id': self.id,
            'title': self.title,
            'boardId': self.board_id,
            'order': self.order_index,
        }
        if include_cards:
            data['cards'] = [card.to_dict() for card in self.cards]
        return data


class Card(db.Model):
    """
    Task unit on a board list. due_date is an instant stored as naive UTC.
    """
    id = db.Column(db.Integer, primary_key=True)
    list_id = db.Column(db.Integer, db.ForeignKey('board_list.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), default='todo')  # todo | in_progress | done | canceled (+ legacy backlog | review)
    completed = db.Column(db.Boolean, default=False)
    order_index = db.Column(db.Integer, default=0)
    due_date = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    assignees = db.relationship('User', secondary=card_assignees, lazy='subquery', order_by='User.id')

    @property
    def workspace(self):
        return self.list.board.workspace if self.list and self.list.board else None

    def to_dict(self):
        board = self.list.board if self.list else None
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'completed': bool(self.completed),
            'dueDate': isoformat_utc(self.due_date),
            'status': self.status,
            'listId': self.list_id,
            'order': self.order_index,
            'list': {
                'id': self.list.id,
                'title': self.list.title,
                'board': {'id': board.id, 'title': board.title} if board else None,
            } if self.list else None,
            'assignees': [user.to_summary() for user in self.assignees],
            'createdAt': isoformat_utc(self.created_at),
            'updatedAt': isoformat_utc(self.updated_at),
        }
