import os
from datetime import datetime
from types import SimpleNamespace

os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['API_SHARED_KEY'] = 'test-shared-key'
os.environ['CALENDAR_TIMEZONE'] = 'UTC'
os.environ.setdefault('SECRET_KEY', 'test-secret')

import pytest

from app import app as flask_app
from models import Board, BoardList, Card, User, Workspace, WorkspaceMember, db


@pytest.fixture
def app():
    flask_app.config['TESTING'] = True
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _user(username, password='secret-pass'):
    user = User(username=username, name=username.title(), email=f'{username}@example.com')
    user.set_password(password)
    db.session.add(user)
    db.session.flush()
    return user


@pytest.fixture
def sample(app):
    """
    alice owns "Studio" (boards Launch and Ops); bob is a member and gina a
    guest there. oscar owns an unrelated workspace.
    """
    alice = _user('alice')
    bob = _user('bob')
    gina = _user('gina')
    oscar = _user('oscar')

    studio = Workspace(name='Studio', user_id=alice.id)
    other = Workspace(name='Elsewhere', user_id=oscar.id)
    db.session.add_all([studio, other])
    db.session.flush()
    db.session.add_all([
        WorkspaceMember(user_id=bob.id, workspace_id=studio.id, role='member'),
        WorkspaceMember(user_id=gina.id, workspace_id=studio.id, role='guest'),
    ])

    launch = Board(title='Launch', workspace_id=studio.id, order_index=1)
    ops = Board(title='Ops', workspace_id=studio.id, order_index=2)
    private = Board(title='Private', workspace_id=other.id, order_index=1)
    db.session.add_all([launch, ops, private])
    db.session.flush()

    todo_list = BoardList(title='To Do', board_id=launch.id, order_index=1)
    done_list = BoardList(title='Done', board_id=launch.id, order_index=2)
    ops_list = BoardList(title='Backlog', board_id=ops.id, order_index=1)
    private_list = BoardList(title='Mine', board_id=private.id, order_index=1)
    db.session.add_all([todo_list, done_list, ops_list, private_list])
    db.session.flush()

    write = Card(list_id=todo_list.id, title='Write brief', status='todo', order_index=1,
                 due_date=datetime(2024, 3, 15, 12, 0))
    undated = Card(list_id=todo_list.id, title='Someday', status='todo', order_index=2)
    later = Card(list_id=todo_list.id, title='Retro', status='todo', order_index=3,
                 due_date=datetime(2024, 5, 1, 9, 0))
    ship = Card(list_id=done_list.id, title='Ship it', status='done', completed=True, order_index=1,
                due_date=datetime(2024, 3, 15, 15, 30))
    plan = Card(list_id=ops_list.id, title='Plan on-call', status='in_progress', order_index=1,
                due_date=datetime(2024, 3, 20, 9, 0))
    secret = Card(list_id=private_list.id, title='Hidden', status='todo', order_index=1,
                  due_date=datetime(2024, 3, 16, 9, 0))
    db.session.add_all([write, undated, later, ship, plan, secret])
    db.session.flush()
    write.assignees.append(bob)
    db.session.commit()

    return SimpleNamespace(
        alice=alice.id, bob=bob.id, gina=gina.id, oscar=oscar.id,
        studio=studio.id, other=other.id,
        launch=launch.id, ops=ops.id, private=private.id,
        todo_list=todo_list.id, done_list=done_list.id, ops_list=ops_list.id, private_list=private_list.id,
        write=write.id, undated=undated.id, later=later.id, ship=ship.id, plan=plan.id, secret=secret.id,
    )


def login(client, user_id):
    with client.session_transaction() as sess:
        sess['user_id'] = user_id


@pytest.fixture
def login_as(client):
    def _login(user_id):
        login(client, user_id)
        return client
    return _login
