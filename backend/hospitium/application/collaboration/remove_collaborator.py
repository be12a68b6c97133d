from hospitium.extensions import db
from hospitium.domain.exceptions import Forbidden
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action
from hospitium.application.notifications.notify import notify
from .update_collaborator import find_collaborator


def remove_collaborator(*, manuscript_id: str, collaborator_id: str, actor_id: str) -> None:
    with transactional():
        manuscript = get_accessible_manuscript(
            user_id=actor_id,
            manuscript_id=manuscript_id,
            permission=Permission.MANAGE,
        )
        collaborator = find_collaborator(manuscript.id, collaborator_id)

        if collaborator.role == "OWNER":
            raise Forbidden("Cannot remove the manuscript owner")

        removed_user_id = collaborator.user_id
        db.session.delete(collaborator)

        notify(
            user_id=removed_user_id,
            type="MANUSCRIPT_UPDATE",
            title="Removed from manuscript",
            message=f'You have been removed from "{manuscript.title}"',
            manuscript_id=manuscript.id,
            data={"removedBy": actor_id},
        )

        log_action(
            action="collaborator.remove",
            entity_type="manuscript",
            entity_id=manuscript.id,
            payload={"collaborator_id": collaborator_id, "user_id": removed_user_id},
        )
