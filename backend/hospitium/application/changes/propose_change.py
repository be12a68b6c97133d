# hospitium/application/changes/propose_change.py
from typing import Any, Dict
from hospitium.extensions import db
from hospitium.models.tracked_change import TrackedChange
from hospitium.domain.exceptions import ValidationError
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action
from hospitium.utils.validation import string_field

REQUIRED_FIELDS = ("changeId", "type", "operation", "startOffset", "endOffset")


def _validate(data: Dict[str, Any]) -> None:
    # Offsets of 0 are valid, so presence is checked against None only
    missing = [
        field for field in REQUIRED_FIELDS
        if data.get(field) is None or data.get(field) == ""
    ]
    if missing:
        raise ValidationError(
            "Missing required fields: changeId, type, operation, startOffset, endOffset"
        )

    for field in ("changeId", "type", "operation"):
        string_field(data, field, required=True)

    for field in ("startOffset", "endOffset"):
        value = data[field]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"{field} must be a non-negative integer")

    if data["endOffset"] < data["startOffset"]:
        raise ValidationError("endOffset must not be before startOffset")


def propose_change(
    *,
    manuscript_id: str,
    actor_id: str,
    data: Dict[str, Any],
) -> TrackedChange:
    """
    Record a proposed edit against a manuscript in PENDING state.

    Offsets are stored as given and are only meaningful against the
    content the author saw; they are not rebased on later edits.
    """
    get_accessible_manuscript(
        user_id=actor_id,
        manuscript_id=manuscript_id,
        permission=Permission.EDIT,
    )

    _validate(data)

    change = TrackedChange()
    change.manuscript_id = manuscript_id
    change.change_id = data["changeId"]
    change.type = data["type"]
    change.operation = data["operation"]
    change.content = string_field(data, "content") or None
    change.old_content = string_field(data, "oldContent") or None
    change.start_offset = data["startOffset"]
    change.end_offset = data["endOffset"]
    change.node_type = string_field(data, "nodeType") or None
    change.author_id = actor_id
    change.status = "PENDING"

    with transactional():
        db.session.add(change)
        db.session.flush()

        log_action(
            action="change.propose",
            entity_type="tracked_change",
            entity_id=change.id,
            payload={
                "manuscript_id": manuscript_id,
                "change_id": change.change_id,
                "type": change.type,
            },
        )

    return change
