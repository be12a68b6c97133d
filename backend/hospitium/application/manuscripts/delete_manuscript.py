from hospitium.extensions import db
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action


def delete_manuscript(
    *,
    manuscript_id: str,
    actor_id: str,
) -> None:
    """
    Hard-delete a manuscript.

    Collaborators, invitations, tracked changes, versions and
    notifications go with it through the relationship cascades.
    """
    with transactional():
        manuscript = get_accessible_manuscript(
            user_id=actor_id,
            manuscript_id=manuscript_id,
            permission=Permission.DELETE,
        )

        title = manuscript.title
        db.session.delete(manuscript)

        log_action(
            action="manuscript.delete",
            entity_type="manuscript",
            entity_id=manuscript_id,
            payload={"title": title},
        )
