from .common import iso
from .user import normalize_user_summary

def normalize_collaborator(collaborator):
    return {
        "id": collaborator.id,
        "manuscriptId": collaborator.manuscript_id,
        "role": collaborator.role,
        "canEdit": collaborator.can_edit,
        "canInvite": collaborator.can_invite,
        "canDelete": collaborator.can_delete,
        "joinedAt": iso(collaborator.joined_at),
        "user": normalize_user_summary(collaborator.user, include_orcid=True),
        "inviter": normalize_user_summary(collaborator.inviter),
    }

def normalize_invitation(invitation):
    return {
        "id": invitation.id,
        "manuscriptId": invitation.manuscript_id,
        "orcidId": invitation.orcid_id,
        "email": invitation.email,
        "givenName": invitation.given_name,
        "familyName": invitation.family_name,
        "affiliation": invitation.affiliation,
        "role": invitation.role,
        "message": invitation.message,
        "status": invitation.status,
        "expiresAt": iso(invitation.expires_at),
        "respondedAt": iso(invitation.responded_at),
        "createdAt": iso(invitation.created_at),
        "isExistingUser": invitation.invited_user_id is not None,
        "inviter": normalize_user_summary(invitation.inviter),
        "invitedUser": normalize_user_summary(invitation.invited_user, include_orcid=True),
    }
