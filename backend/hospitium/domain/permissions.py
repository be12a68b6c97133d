# hospitium/domain/permissions.py
from enum import Enum
from sqlalchemy import and_, exists, or_, select
from hospitium.extensions import db
from hospitium.models.manuscript import Manuscript
from hospitium.models.collaborator import ManuscriptCollaborator
from .exceptions import NotFoundOrForbidden


class Permission(str, Enum):
    VIEW = "VIEW"
    EDIT = "EDIT"
    DELETE = "DELETE"
    INVITE = "INVITE"
    MANAGE = "MANAGE"  # change roles / remove collaborators


def _collaborator_clause(permission: Permission):
    """Extra conditions a collaborator row must satisfy for ``permission``."""
    if permission == Permission.VIEW:
        return None
    if permission == Permission.EDIT:
        return ManuscriptCollaborator.can_edit.is_(True)
    if permission == Permission.DELETE:
        return ManuscriptCollaborator.can_delete.is_(True)
    if permission == Permission.INVITE:
        return ManuscriptCollaborator.can_invite.is_(True)
    if permission == Permission.MANAGE:
        return or_(
            ManuscriptCollaborator.role == "OWNER",
            and_(
                ManuscriptCollaborator.role == "ADMIN",
                ManuscriptCollaborator.can_invite.is_(True),
            ),
        )
    raise ValueError(f"Unknown permission: {permission}")


def accessible_manuscripts(user_id: str, permission: Permission = Permission.VIEW):
    """
    Select statement for manuscripts ``user_id`` holds ``permission`` on.

    The creator implicitly holds every permission.
    """
    conditions = [
        ManuscriptCollaborator.manuscript_id == Manuscript.id,
        ManuscriptCollaborator.user_id == user_id,
    ]
    extra = _collaborator_clause(Permission(permission))
    if extra is not None:
        conditions.append(extra)

    return select(Manuscript).where(
        or_(
            Manuscript.created_by == user_id,
            exists().where(*conditions),
        )
    )


def can_access(user_id: str, manuscript_id: str, permission: Permission) -> bool:
    stmt = accessible_manuscripts(user_id, permission).where(Manuscript.id == manuscript_id)
    return db.session.execute(stmt).scalar_one_or_none() is not None


def get_accessible_manuscript(
    *,
    user_id: str,
    manuscript_id: str,
    permission: Permission = Permission.VIEW,
    lock: bool = False,
) -> Manuscript:
    """
    Fetch a manuscript the caller may act on, or raise NotFoundOrForbidden.

    With ``lock`` the row is selected FOR UPDATE so that version numbering
    and restores on the same manuscript serialize.
    """
    stmt = accessible_manuscripts(user_id, permission).where(Manuscript.id == manuscript_id)
    if lock:
        stmt = stmt.with_for_update()

    manuscript = db.session.execute(stmt).scalar_one_or_none()
    if manuscript is None:
        raise NotFoundOrForbidden()
    return manuscript
