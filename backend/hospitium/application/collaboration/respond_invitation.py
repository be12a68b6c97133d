from hospitium.extensions import db
from hospitium.models.base import utc_now
from hospitium.models.user import User
from hospitium.models.collaborator import ManuscriptCollaborator
from hospitium.models.invitation import ManuscriptInvitation
from hospitium.domain.exceptions import Conflict, Forbidden, NotFound, ValidationError
from hospitium.domain.lifecycle.invitation import assert_invitation_transition
from hospitium.utils.optimistic_lock import as_utc
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action
from hospitium.application.notifications.notify import notify

RESPONSE_ACTIONS = {"accept": "ACCEPTED", "decline": "DECLINED"}


def _is_invitee(invitation: ManuscriptInvitation, user: User) -> bool:
    if invitation.invited_user_id:
        return invitation.invited_user_id == user.id
    return bool(
        (invitation.orcid_id and invitation.orcid_id == user.orcid_id)
        or (invitation.email and invitation.email == (user.email or "").lower())
    )


def respond_invitation(
    *,
    invitation_id: str,
    actor_id: str,
    action: str,
) -> ManuscriptInvitation:
    """
    Accept or decline an invitation addressed to the caller.

    An invitation found past its expiry is marked EXPIRED and the
    response is refused with 409.
    """
    target_status = RESPONSE_ACTIONS.get(action) if isinstance(action, str) else None
    if not target_status:
        raise ValidationError("Action must be either accept or decline")

    expired = False

    with transactional():
        invitation = ManuscriptInvitation.query.filter_by(id=invitation_id).first()
        if not invitation:
            raise NotFound("Invitation not found")

        user = User.query.filter_by(id=actor_id, is_active=True).first()
        if not user or not _is_invitee(invitation, user):
            raise Forbidden("This invitation is not addressed to you")

        if invitation.status == "PENDING" and as_utc(invitation.expires_at) < utc_now():
            invitation.status = "EXPIRED"
            expired = True
        else:
            assert_invitation_transition(from_status=invitation.status, to_status=target_status)

            invitation.status = target_status
            invitation.responded_at = utc_now()
            invitation.invited_user_id = user.id

            if target_status == "ACCEPTED":
                existing = ManuscriptCollaborator.query.filter_by(
                    manuscript_id=invitation.manuscript_id,
                    user_id=user.id,
                ).first()
                if existing:
                    raise Conflict("You are already a collaborator on this manuscript")

                collaborator = ManuscriptCollaborator()
                collaborator.manuscript_id = invitation.manuscript_id
                collaborator.user_id = user.id
                collaborator.invited_by = invitation.invited_by
                collaborator.joined_at = utc_now()
                collaborator.apply_role(invitation.role)
                db.session.add(collaborator)

            verb = "accepted" if target_status == "ACCEPTED" else "declined"
            notify(
                user_id=invitation.invited_by,
                type="COLLABORATION_INVITATION",
                title=f"Invitation {verb}",
                message=f'{user.full_name} {verb} your invitation to collaborate on "{invitation.manuscript.title}"',
                manuscript_id=invitation.manuscript_id,
                data={"invitationId": invitation.id, "userId": user.id},
            )

            log_action(
                action=f"invitation.{action}",
                entity_type="manuscript",
                entity_id=invitation.manuscript_id,
                payload={"invitation_id": invitation.id, "role": invitation.role},
            )

    # Committed before refusing so the EXPIRED status sticks
    if expired:
        raise Conflict("Invitation has expired")

    return invitation
