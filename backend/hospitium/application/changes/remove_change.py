# hospitium/application/changes/remove_change.py
from hospitium.extensions import db
from hospitium.domain.exceptions import Forbidden
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action
from .resolve_change import find_change


def remove_change(
    *,
    manuscript_id: str,
    change_key: str,
    actor_id: str,
) -> None:
    """
    Delete a tracked change in any state.

    Only the change author or the manuscript creator may delete, even
    among collaborators who can edit.
    """
    with transactional():
        manuscript = get_accessible_manuscript(
            user_id=actor_id,
            manuscript_id=manuscript_id,
            permission=Permission.EDIT,
        )

        change = find_change(manuscript_id, change_key)

        if change.author_id != actor_id and manuscript.created_by != actor_id:
            raise Forbidden("Insufficient permissions to delete this change")

        db.session.delete(change)

        log_action(
            action="change.delete",
            entity_type="tracked_change",
            entity_id=change.id,
            payload={"manuscript_id": manuscript_id, "change_id": change.change_id},
        )
