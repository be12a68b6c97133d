# hospitium/application/changes/resolve_change.py
from hospitium.models.base import utc_now
from hospitium.models.tracked_change import TrackedChange
from hospitium.domain.exceptions import NotFound
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.domain.lifecycle.tracked_change import (
    assert_change_transition,
    assert_resolution_status,
)
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action


def find_change(manuscript_id: str, change_key: str) -> TrackedChange:
    change = TrackedChange.query.filter_by(
        manuscript_id=manuscript_id,
        change_id=change_key,
    ).first()

    if not change:
        raise NotFound("Tracked change not found")
    return change


def resolve_change(
    *,
    manuscript_id: str,
    change_key: str,
    actor_id: str,
    status,
) -> TrackedChange:
    """
    Accept or reject a pending tracked change.

    ``accepted_by`` records the resolver for both outcomes; exactly one of
    ``accepted_at`` / ``rejected_at`` is set.
    """
    with transactional():
        get_accessible_manuscript(
            user_id=actor_id,
            manuscript_id=manuscript_id,
            permission=Permission.EDIT,
        )

        change = find_change(manuscript_id, change_key)

        assert_resolution_status(status)
        assert_change_transition(from_status=change.status, to_status=status)

        now = utc_now()
        change.status = status
        change.accepted_by = actor_id
        if status == "ACCEPTED":
            change.accepted_at = now
            change.rejected_at = None
        else:
            change.rejected_at = now
            change.accepted_at = None

        log_action(
            action=f"change.{status.lower()}",
            entity_type="tracked_change",
            entity_id=change.id,
            payload={"manuscript_id": manuscript_id, "change_id": change.change_id},
        )

    return change
