from typing import Set
from hospitium.domain.exceptions import Conflict, ValidationError

RESOLVED_STATUSES = {"ACCEPTED", "REJECTED"}

# Explicit allowed state transitions
ALLOWED_CHANGE_TRANSITIONS: dict[str, Set[str]] = {
    "PENDING": {"ACCEPTED", "REJECTED"},
    "ACCEPTED": set(),
    "REJECTED": set(),
}

def assert_resolution_status(status) -> None:
    if not isinstance(status, str) or status not in RESOLVED_STATUSES:
        raise ValidationError("Status must be either ACCEPTED or REJECTED")

def assert_change_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards tracked-change lifecycle transitions.
    A change is resolved exactly once.
    """
    allowed = ALLOWED_CHANGE_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise Conflict(
            f"Illegal change transition: {from_status} → {to_status}"
        )
