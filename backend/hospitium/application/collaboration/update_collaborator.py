from typing import Any, Dict
from hospitium.models.collaborator import ManuscriptCollaborator, COLLABORATOR_ROLES
from hospitium.domain.exceptions import Forbidden, NotFound, ValidationError
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action
from hospitium.utils.validation import string_field
from hospitium.application.notifications.notify import notify

PERMISSION_FIELDS = {
    "canEdit": "can_edit",
    "canInvite": "can_invite",
    "canDelete": "can_delete",
}


def find_collaborator(manuscript_id: str, collaborator_id: str) -> ManuscriptCollaborator:
    collaborator = ManuscriptCollaborator.query.filter_by(
        id=collaborator_id,
        manuscript_id=manuscript_id,
    ).first()
    if not collaborator:
        raise NotFound("Collaborator not found")
    return collaborator


def update_collaborator(
    *,
    manuscript_id: str,
    collaborator_id: str,
    actor_id: str,
    data: Dict[str, Any],
) -> ManuscriptCollaborator:
    """
    Change a collaborator's role and/or permission flags.

    A new role resets the flags to that role's defaults before explicit
    flags in the payload are applied.
    """
    role = string_field(data, "role")
    flags = {
        column: data[key]
        for key, column in PERMISSION_FIELDS.items()
        if key in data
    }

    if role is None and not flags:
        raise ValidationError("No valid fields provided for update")
    if role is not None and (role not in COLLABORATOR_ROLES or role == "OWNER"):
        raise ValidationError(f"Invalid role: {role}")
    for column, value in flags.items():
        if not isinstance(value, bool):
            raise ValidationError(f"{column} must be a boolean")

    with transactional():
        manuscript = get_accessible_manuscript(
            user_id=actor_id,
            manuscript_id=manuscript_id,
            permission=Permission.MANAGE,
        )
        collaborator = find_collaborator(manuscript.id, collaborator_id)

        if collaborator.role == "OWNER":
            if collaborator.user_id == actor_id:
                raise Forbidden("Owners cannot modify their own collaboration")
            raise Forbidden("Cannot change the role of the manuscript owner")

        if role is not None:
            collaborator.apply_role(role)
        for column, value in flags.items():
            setattr(collaborator, column, value)

        notify(
            user_id=collaborator.user_id,
            type="MANUSCRIPT_UPDATE",
            title="Collaboration updated",
            message=f'Your role on "{manuscript.title}" is now {collaborator.role.lower()}',
            manuscript_id=manuscript.id,
            data={"role": collaborator.role, "updatedBy": actor_id},
        )

        log_action(
            action="collaborator.update",
            entity_type="manuscript",
            entity_id=manuscript.id,
            payload={"collaborator_id": collaborator.id, "role": collaborator.role, **flags},
        )

    return collaborator
