from typing import Any, Dict
from hospitium.extensions import db
from hospitium.models.base import utc_now
from hospitium.models.manuscript import Manuscript, MANUSCRIPT_STATUSES
from hospitium.models.collaborator import ManuscriptCollaborator
from hospitium.domain.exceptions import ValidationError
from hospitium.utils.transaction import transactional
from hospitium.utils.versioning import word_count
from hospitium.utils.activity import log_action
from hospitium.utils.validation import string_field


def create_manuscript(
    *,
    actor_id: str,
    data: Dict[str, Any],
) -> Manuscript:
    """
    Create a manuscript owned by ``actor_id``.

    The creator is also recorded as an OWNER collaborator so that listings
    and author strings include them.
    """
    title: str | None = (string_field(data, "title") or "").strip() or None
    if not title:
        raise ValidationError("Title is required")

    status = string_field(data, "status") or "DRAFT"
    if status not in MANUSCRIPT_STATUSES:
        raise ValidationError(f"Invalid status: {status}")

    content = string_field(data, "content") or ""

    manuscript = Manuscript()
    manuscript.title = title
    manuscript.type = string_field(data, "type")
    manuscript.field = string_field(data, "field")
    manuscript.description = string_field(data, "description")
    manuscript.content = content
    manuscript.word_count = word_count(content)
    manuscript.status = status
    manuscript.created_by = actor_id
    manuscript.last_saved = utc_now()

    with transactional():
        db.session.add(manuscript)
        db.session.flush()  # ensures manuscript.id exists

        owner = ManuscriptCollaborator()
        owner.manuscript_id = manuscript.id
        owner.user_id = actor_id
        owner.apply_role("OWNER")
        db.session.add(owner)

        log_action(
            action="manuscript.create",
            entity_type="manuscript",
            entity_id=manuscript.id,
            payload={"title": manuscript.title, "type": manuscript.type},
        )

    return manuscript
