from typing import Set
from hospitium.domain.exceptions import Conflict

ALLOWED_INVITATION_TRANSITIONS: dict[str, Set[str]] = {
    "PENDING": {"ACCEPTED", "DECLINED", "EXPIRED"},
    "ACCEPTED": set(),
    "DECLINED": set(),
    "EXPIRED": set(),
}

def assert_invitation_transition(*, from_status: str, to_status: str) -> None:
    allowed = ALLOWED_INVITATION_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise Conflict(
            f"Illegal invitation transition: {from_status} → {to_status}"
        )
