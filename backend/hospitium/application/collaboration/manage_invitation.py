from datetime import timedelta
from flask import current_app
from hospitium.models.base import utc_now
from hospitium.models.invitation import ManuscriptInvitation
from hospitium.domain.exceptions import Forbidden, NotFound, ValidationError
from hospitium.domain.lifecycle.invitation import assert_invitation_transition
from hospitium.domain.permissions import Permission, can_access
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action
from hospitium.application.notifications.notify import notify


def _load_managed_invitation(invitation_id: str, actor_id: str) -> ManuscriptInvitation:
    """
    Pending invitation the actor may cancel or resend.

    Allowed: the inviter, the manuscript creator, or a collaborator
    holding MANAGE.
    """
    invitation = ManuscriptInvitation.query.filter_by(id=invitation_id).first()
    if not invitation:
        raise NotFound("Invitation not found")

    if (
        invitation.invited_by != actor_id
        and invitation.manuscript.created_by != actor_id
        and not can_access(actor_id, invitation.manuscript_id, Permission.MANAGE)
    ):
        raise Forbidden("Insufficient permissions to manage this invitation")

    if invitation.status != "PENDING":
        raise ValidationError("Only pending invitations can be modified")

    return invitation


def cancel_invitation(*, invitation_id: str, actor_id: str) -> ManuscriptInvitation:
    with transactional():
        invitation = _load_managed_invitation(invitation_id, actor_id)
        assert_invitation_transition(from_status=invitation.status, to_status="EXPIRED")

        invitation.status = "EXPIRED"
        invitation.responded_at = utc_now()

        if invitation.invited_user_id:
            notify(
                user_id=invitation.invited_user_id,
                type="COLLABORATION_INVITATION",
                title="Invitation cancelled",
                message=f'Your invitation to collaborate on "{invitation.manuscript.title}" was cancelled',
                manuscript_id=invitation.manuscript_id,
                data={"invitationId": invitation.id},
            )

        log_action(
            action="invitation.cancel",
            entity_type="manuscript",
            entity_id=invitation.manuscript_id,
            payload={"invitation_id": invitation.id},
        )

    return invitation


def resend_invitation(*, invitation_id: str, actor_id: str) -> ManuscriptInvitation:
    with transactional():
        invitation = _load_managed_invitation(invitation_id, actor_id)
        invitation.expires_at = utc_now() + timedelta(days=current_app.config["INVITATION_TTL_DAYS"])

        if invitation.invited_user_id:
            notify(
                user_id=invitation.invited_user_id,
                type="COLLABORATION_INVITATION",
                title="Invitation reminder",
                message=f'Reminder: you have been invited to collaborate on "{invitation.manuscript.title}"',
                manuscript_id=invitation.manuscript_id,
                data={"invitationId": invitation.id, "role": invitation.role},
            )

        log_action(
            action="invitation.resend",
            entity_type="manuscript",
            entity_id=invitation.manuscript_id,
            payload={"invitation_id": invitation.id, "expires_at": invitation.expires_at},
        )

    return invitation
