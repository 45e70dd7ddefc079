"""Workspace role checks shared by the board, card and calendar routes."""

from models import Workspace, WorkspaceMember, db

# Role levels; higher roles inherit everything a lower role may do.
ROLE_LEVELS = {
    'guest': 0,
    'member': 1,
    'admin': 2,
    'owner': 3,
}

PERMISSIONS = {
    'VIEW_BOARD': 'guest',
    'EDIT_CARD': 'member',
    'MOVE_CARDS': 'member',
    'REORDER_CARDS': 'member',
}


def get_workspace_role(user_id, workspace):
    if workspace is None:
        return None
    return workspace.role_for(user_id)


def has_permission(user_id, workspace, permission):
    role = get_workspace_role(user_id, workspace)
    if role not in ROLE_LEVELS:
        return False
    return ROLE_LEVELS[role] >= ROLE_LEVELS[PERMISSIONS[permission]]


def accessible_workspace_ids(user_id):
    """Ids of workspaces the user owns or is a member of."""
    owned = db.session.query(Workspace.id).filter(Workspace.user_id == user_id).all()
    joined = db.session.query(WorkspaceMember.workspace_id).filter(WorkspaceMember.user_id == user_id).all()
    return {row[0] for row in owned} | {row[0] for row in joined}
