from datetime import timedelta
from unittest import mock

import pytest

from hospitium.models.base import utc_now
from hospitium.models.collaborator import ManuscriptCollaborator
from hospitium.models.invitation import ManuscriptInvitation
from hospitium.models.notification import Notification
from hospitium.services.orcid import OrcidClient
from hospitium.utils.transaction import transactional


@pytest.fixture
def owner(make_user):
    return make_user()


@pytest.fixture
def manuscript(owner, make_manuscript):
    return make_manuscript(owner, title="Shared study")


def invite(client, auth, user, manuscript, **payload):
    return client.post(
        "/api/v1/invitations",
        json={"manuscriptId": manuscript.id, **payload},
        headers=auth(user),
    )


def test_invite_existing_user_by_email(client, auth, make_user, owner, manuscript):
    invitee = make_user(email="ines@example.org")

    response = invite(client, auth, owner, manuscript, email="INES@example.org", role="EDITOR")

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["status"] == "PENDING"
    assert data["isExistingUser"] is True
    assert data["invitedUser"]["id"] == invitee.id

    notification = Notification.query.filter_by(user_id=invitee.id).one()
    assert notification.type == "COLLABORATION_INVITATION"
    assert notification.data["invitationId"] == data["id"]


def test_invitation_expires_after_ttl(app, client, auth, owner, manuscript):
    invite(client, auth, owner, manuscript, email="someone@example.org")

    invitation = ManuscriptInvitation.query.one()
    remaining = invitation.expires_at.replace(tzinfo=None) - utc_now().replace(tzinfo=None)
    assert timedelta(days=app.config["INVITATION_TTL_DAYS"] - 1) < remaining <= timedelta(days=30)


def test_invite_requires_recipient(client, auth, owner, manuscript):
    response = invite(client, auth, owner, manuscript)

    assert response.status_code == 400


def test_duplicate_pending_invitation_conflicts(client, auth, owner, manuscript):
    invite(client, auth, owner, manuscript, email="dup@example.org")

    response = invite(client, auth, owner, manuscript, email="dup@example.org")

    assert response.status_code == 409


def test_existing_collaborator_conflicts(client, auth, make_user, owner, manuscript, add_collaborator):
    editor = make_user(email="editor@example.org")
    add_collaborator(manuscript, editor)

    response = invite(client, auth, owner, manuscript, email="editor@example.org")

    assert response.status_code == 409


def test_invite_needs_invite_permission(client, auth, make_user, manuscript, add_collaborator):
    editor = make_user()
    add_collaborator(manuscript, editor, role="EDITOR")

    response = invite(client, auth, editor, manuscript, email="x@example.org")

    assert response.status_code == 404


def test_invite_by_orcid_fills_public_email(client, auth, owner, manuscript):
    with mock.patch.object(
        OrcidClient, "get_researcher_emails", return_value=["orcid@example.org"]
    ) as emails:
        response = invite(client, auth, owner, manuscript, orcidId="https://orcid.org/0000-0002-1825-0097")

    assert response.status_code == 201
    emails.assert_called_once_with("0000-0002-1825-0097")
    data = response.get_json()["data"]
    assert data["orcidId"] == "0000-0002-1825-0097"
    assert data["email"] == "orcid@example.org"
    assert data["isExistingUser"] is False


def test_invite_by_orcid_matches_registered_user(client, auth, make_user, owner, manuscript):
    invitee = make_user(orcid_id="0000-0002-1825-0097")

    with mock.patch.object(OrcidClient, "get_researcher_emails") as emails:
        response = invite(client, auth, owner, manuscript, orcidId="0000-0002-1825-0097")

    emails.assert_not_called()
    assert response.get_json()["data"]["invitedUser"]["id"] == invitee.id


def test_orcid_email_is_resolved_before_writing(client, auth, owner, manuscript):
    calls = []

    def opening():
        calls.append("transaction")
        return transactional()

    def lookup(orcid_id):
        calls.append("lookup")
        return ["orcid@example.org"]

    with mock.patch(
        "hospitium.application.collaboration.send_invitation.transactional",
        side_effect=opening,
    ), mock.patch.object(OrcidClient, "get_researcher_emails", side_effect=lookup):
        response = invite(client, auth, owner, manuscript, orcidId="0000-0002-1825-0097")

    assert response.status_code == 201
    assert calls == ["lookup", "transaction"]


def test_invite_rejects_non_string_orcid_id(client, auth, owner, manuscript):
    with mock.patch.object(OrcidClient, "get_researcher_emails") as emails:
        response = invite(client, auth, owner, manuscript, orcidId={"path": "0000-0002-1825-0097"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "orcidId must be a string"
    emails.assert_not_called()
    assert ManuscriptInvitation.query.count() == 0


def test_accept_creates_collaborator_with_role_defaults(client, auth, make_user, owner, manuscript):
    invitee = make_user(email="new@example.org")
    invitation = invite(client, auth, owner, manuscript, email="new@example.org", role="ADMIN").get_json()["data"]

    response = client.post(
        f"/api/v1/invitations/{invitation['id']}/respond",
        json={"action": "accept"},
        headers=auth(invitee),
    )

    assert response.status_code == 200
    assert response.get_json()["data"]["status"] == "ACCEPTED"

    collaborator = ManuscriptCollaborator.query.filter_by(user_id=invitee.id).one()
    assert collaborator.role == "ADMIN"
    assert collaborator.can_edit and collaborator.can_invite and not collaborator.can_delete
    assert collaborator.invited_by == owner.id

    assert Notification.query.filter_by(user_id=owner.id).count() == 1


def test_decline_creates_no_collaborator(client, auth, make_user, owner, manuscript):
    invitee = make_user(email="no@example.org")
    invitation = invite(client, auth, owner, manuscript, email="no@example.org").get_json()["data"]

    response = client.post(
        f"/api/v1/invitations/{invitation['id']}/respond",
        json={"action": "decline"},
        headers=auth(invitee),
    )

    assert response.get_json()["data"]["status"] == "DECLINED"
    assert ManuscriptCollaborator.query.filter_by(user_id=invitee.id).count() == 0


def test_only_invitee_may_respond(client, auth, make_user, owner, manuscript):
    make_user(email="target@example.org")
    intruder = make_user()
    invitation = invite(client, auth, owner, manuscript, email="target@example.org").get_json()["data"]

    response = client.post(
        f"/api/v1/invitations/{invitation['id']}/respond",
        json={"action": "accept"},
        headers=auth(intruder),
    )

    assert response.status_code == 403


def test_expired_invitation_is_marked_and_refused(db, client, auth, make_user, owner, manuscript):
    invitee = make_user(email="late@example.org")
    invitation_id = invite(client, auth, owner, manuscript, email="late@example.org").get_json()["data"]["id"]
    invitation = ManuscriptInvitation.query.filter_by(id=invitation_id).one()
    invitation.expires_at = utc_now() - timedelta(days=1)
    db.session.commit()

    response = client.post(
        f"/api/v1/invitations/{invitation_id}/respond",
        json={"action": "accept"},
        headers=auth(invitee),
    )

    assert response.status_code == 409
    assert ManuscriptInvitation.query.filter_by(id=invitation_id).one().status == "EXPIRED"
    assert ManuscriptCollaborator.query.filter_by(user_id=invitee.id).count() == 0


def test_cancel_and_resend(client, auth, make_user, owner, manuscript):
    stranger = make_user()
    invitation = invite(client, auth, owner, manuscript, email="c@example.org").get_json()["data"]
    url = f"/api/v1/invitations/{invitation['id']}"

    assert client.delete(url, headers=auth(stranger)).status_code == 403
    assert client.post(f"{url}/resend", headers=auth(owner)).status_code == 200

    assert client.delete(url, headers=auth(owner)).status_code == 200
    assert ManuscriptInvitation.query.filter_by(id=invitation["id"]).one().status == "EXPIRED"

    again = client.post(f"{url}/resend", headers=auth(owner))
    assert again.status_code == 400


def test_list_collaborators_and_pending_invitations(client, auth, owner, manuscript):
    invite(client, auth, owner, manuscript, email="p@example.org")

    data = client.get(
        f"/api/v1/manuscripts/{manuscript.id}/collaborators",
        headers=auth(owner),
    ).get_json()["data"]

    assert [c["role"] for c in data["collaborators"]] == ["OWNER"]
    assert [i["email"] for i in data["pendingInvitations"]] == ["p@example.org"]


def test_update_collaborator_role(client, auth, make_user, owner, manuscript, add_collaborator):
    member = make_user()
    collaborator = add_collaborator(manuscript, member, role="VIEWER")

    response = client.patch(
        f"/api/v1/manuscripts/{manuscript.id}/collaborators/{collaborator.id}",
        json={"role": "EDITOR", "canDelete": True},
        headers=auth(owner),
    )

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["role"] == "EDITOR"
    assert data["canEdit"] is True
    assert data["canDelete"] is True
    assert Notification.query.filter_by(user_id=member.id, type="MANUSCRIPT_UPDATE").count() == 1


def test_owner_row_is_protected(client, auth, make_user, owner, manuscript, add_collaborator):
    admin = make_user()
    add_collaborator(manuscript, admin, role="ADMIN")
    owner_row = ManuscriptCollaborator.query.filter_by(user_id=owner.id).one()
    url = f"/api/v1/manuscripts/{manuscript.id}/collaborators/{owner_row.id}"

    assert client.patch(url, json={"role": "VIEWER"}, headers=auth(admin)).status_code == 403
    assert client.patch(url, json={"canEdit": False}, headers=auth(owner)).status_code == 403
    assert client.delete(url, headers=auth(admin)).status_code == 403


def test_editor_cannot_manage_collaborators(client, auth, make_user, manuscript, add_collaborator):
    editor, viewer = make_user(), make_user()
    add_collaborator(manuscript, editor, role="EDITOR")
    target = add_collaborator(manuscript, viewer, role="VIEWER")

    response = client.delete(
        f"/api/v1/manuscripts/{manuscript.id}/collaborators/{target.id}",
        headers=auth(editor),
    )

    assert response.status_code == 404


def test_remove_collaborator(client, auth, make_user, owner, manuscript, add_collaborator):
    member = make_user()
    collaborator = add_collaborator(manuscript, member)

    response = client.delete(
        f"/api/v1/manuscripts/{manuscript.id}/collaborators/{collaborator.id}",
        headers=auth(owner),
    )

    assert response.status_code == 200
    assert ManuscriptCollaborator.query.filter_by(user_id=member.id).count() == 0
    assert Notification.query.filter_by(user_id=member.id).count() == 1
