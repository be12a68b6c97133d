from typing import Any, Dict
from hospitium.models.base import utc_now
from hospitium.models.manuscript import Manuscript, MANUSCRIPT_STATUSES
from hospitium.domain.exceptions import ValidationError
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.utils.transaction import transactional
from hospitium.utils.versioning import word_count
from hospitium.utils.optimistic_lock import enforce_optimistic_lock
from hospitium.utils.activity import log_action
from hospitium.utils.validation import string_field


ALLOWED_UPDATE_FIELDS = ("title", "type", "field", "description", "content", "status")


def update_manuscript(
    *,
    manuscript_id: str,
    actor_id: str,
    data: Dict[str, Any],
) -> Manuscript:
    """
    Save edits to a manuscript.

    Design rules:
    - Only whitelisted fields are mutable
    - No silent no-op updates
    - Word count follows the content
    """
    with transactional():
        manuscript = get_accessible_manuscript(
            user_id=actor_id,
            manuscript_id=manuscript_id,
            permission=Permission.EDIT,
        )

        enforce_optimistic_lock(manuscript)

        present = [field for field in ALLOWED_UPDATE_FIELDS if field in data]
        if not present:
            raise ValidationError("No valid fields provided for update")

        values = {field: string_field(data, field) for field in present}

        if "title" in values and not (values["title"] or "").strip():
            raise ValidationError("Title cannot be empty")

        if "status" in values and values["status"] not in MANUSCRIPT_STATUSES:
            raise ValidationError(f"Invalid status: {values['status']}")

        changed_fields: list[str] = []
        for field, value in values.items():
            if field == "content":
                value = value or ""
            if getattr(manuscript, field) != value:
                setattr(manuscript, field, value)
                changed_fields.append(field)

        if "content" in changed_fields:
            manuscript.word_count = word_count(manuscript.content)

        manuscript.last_saved = utc_now()

        if changed_fields:
            log_action(
                action="manuscript.update",
                entity_type="manuscript",
                entity_id=manuscript.id,
                payload={"fields": changed_fields},
            )

    return manuscript
