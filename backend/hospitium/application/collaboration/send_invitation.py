from datetime import timedelta
from typing import Any, Dict
from flask import current_app
from sqlalchemy import or_
from hospitium.extensions import db
from hospitium.models.base import utc_now
from hospitium.models.user import User
from hospitium.models.collaborator import ManuscriptCollaborator, COLLABORATOR_ROLES
from hospitium.models.invitation import ManuscriptInvitation
from hospitium.domain.exceptions import Conflict, ValidationError
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.services.orcid import OrcidClient, OrcidError, format_orcid_id, is_valid_orcid_id
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action, log_warning
from hospitium.utils.validation import string_field
from hospitium.application.notifications.notify import notify


def _find_invitee(orcid_id, email):
    if orcid_id:
        user = User.query.filter_by(orcid_id=orcid_id).first()
        if user:
            return user
    if email:
        return User.query.filter_by(email=email).first()
    return None


def _orcid_email(orcid_id):
    try:
        emails = OrcidClient.from_app().get_researcher_emails(orcid_id)
    except OrcidError as e:
        # Invitation still goes out, addressed by ORCID iD only
        log_warning("ORCID email lookup failed", {"orcidId": orcid_id, "error": str(e)})
        return None
    return emails[0] if emails else None


def send_invitation(
    *,
    actor_id: str,
    data: Dict[str, Any],
) -> ManuscriptInvitation:
    """
    Invite a researcher to collaborate on a manuscript.

    The invitee is addressed by ORCID iD and/or email. A registered user
    matching either is linked and notified right away. Otherwise a public
    email is looked up on ORCID before any write begins.
    """
    manuscript_id = string_field(data, "manuscriptId")
    orcid_id = format_orcid_id((string_field(data, "orcidId") or "").strip()) or None
    email = (string_field(data, "email") or "").strip().lower() or None
    role = string_field(data, "role") or "CONTRIBUTOR"
    given_name = string_field(data, "givenName")
    family_name = string_field(data, "familyName")
    affiliation = string_field(data, "affiliation")
    message = string_field(data, "message")

    if not manuscript_id:
        raise ValidationError("manuscriptId is required")
    if not orcid_id and not email:
        raise ValidationError("Either orcidId or email is required")
    if orcid_id and not is_valid_orcid_id(orcid_id):
        raise ValidationError("Invalid ORCID iD format")
    if role not in COLLABORATOR_ROLES or role == "OWNER":
        raise ValidationError(f"Invalid role: {role}")

    manuscript = get_accessible_manuscript(
        user_id=actor_id,
        manuscript_id=manuscript_id,
        permission=Permission.INVITE,
    )

    invitee = _find_invitee(orcid_id, email)
    if not invitee and orcid_id and not email:
        email = _orcid_email(orcid_id)

    with transactional():
        identity = []
        if orcid_id:
            identity.append(ManuscriptInvitation.orcid_id == orcid_id)
        if email:
            identity.append(ManuscriptInvitation.email == email)

        duplicate = ManuscriptInvitation.query.filter(
            ManuscriptInvitation.manuscript_id == manuscript.id,
            ManuscriptInvitation.status == "PENDING",
            or_(*identity),
        ).first()
        if duplicate:
            raise Conflict("A pending invitation already exists for this researcher")

        if invitee:
            if invitee.id == manuscript.created_by or ManuscriptCollaborator.query.filter_by(
                manuscript_id=manuscript.id,
                user_id=invitee.id,
            ).first():
                raise Conflict("User is already a collaborator on this manuscript")
            email = email or invitee.email

        invitation = ManuscriptInvitation()
        invitation.manuscript_id = manuscript.id
        invitation.invited_by = actor_id
        invitation.invited_user_id = invitee.id if invitee else None
        invitation.orcid_id = orcid_id
        invitation.email = email
        invitation.given_name = given_name or (invitee.given_name if invitee else None)
        invitation.family_name = family_name or (invitee.family_name if invitee else None)
        invitation.affiliation = affiliation or (invitee.primary_institution if invitee else None)
        invitation.role = role
        invitation.message = message
        invitation.status = "PENDING"
        invitation.expires_at = utc_now() + timedelta(days=current_app.config["INVITATION_TTL_DAYS"])

        db.session.add(invitation)
        db.session.flush()

        if invitee:
            notify(
                user_id=invitee.id,
                type="COLLABORATION_INVITATION",
                title="New collaboration invitation",
                message=f'You have been invited to collaborate on "{manuscript.title}" as {role.lower()}',
                manuscript_id=manuscript.id,
                data={"invitationId": invitation.id, "role": role, "invitedBy": actor_id},
            )

        log_action(
            action="invitation.send",
            entity_type="manuscript",
            entity_id=manuscript.id,
            payload={"invitation_id": invitation.id, "role": role, "orcid_id": orcid_id},
        )

    return invitation
