import pytest

from hospitium.domain.exceptions import NotFoundOrForbidden
from hospitium.domain.permissions import Permission, can_access, get_accessible_manuscript


def test_creator_holds_every_permission(make_user, make_manuscript):
    owner = make_user()
    manuscript = make_manuscript(owner)

    for permission in Permission:
        assert can_access(owner.id, manuscript.id, permission)


def test_unrelated_user_cannot_view(make_user, make_manuscript):
    owner, stranger = make_user(), make_user()
    manuscript = make_manuscript(owner)

    assert not can_access(stranger.id, manuscript.id, Permission.VIEW)


def test_collaborator_permissions_follow_flags(make_user, make_manuscript, add_collaborator):
    owner, reviewer, editor = make_user(), make_user(), make_user()
    manuscript = make_manuscript(owner)
    add_collaborator(manuscript, reviewer, role="REVIEWER")
    add_collaborator(manuscript, editor, role="EDITOR", can_delete=True)

    assert can_access(reviewer.id, manuscript.id, Permission.VIEW)
    assert not can_access(reviewer.id, manuscript.id, Permission.EDIT)
    assert not can_access(reviewer.id, manuscript.id, Permission.INVITE)

    assert can_access(editor.id, manuscript.id, Permission.EDIT)
    assert can_access(editor.id, manuscript.id, Permission.DELETE)
    assert not can_access(editor.id, manuscript.id, Permission.INVITE)


def test_manage_requires_owner_or_inviting_admin(make_user, make_manuscript, add_collaborator):
    owner, admin, muted_admin, editor = make_user(), make_user(), make_user(), make_user()
    manuscript = make_manuscript(owner)
    add_collaborator(manuscript, admin, role="ADMIN")
    add_collaborator(manuscript, muted_admin, role="ADMIN", can_invite=False)
    add_collaborator(manuscript, editor, role="EDITOR", can_invite=True)

    assert can_access(admin.id, manuscript.id, Permission.MANAGE)
    assert not can_access(muted_admin.id, manuscript.id, Permission.MANAGE)
    assert not can_access(editor.id, manuscript.id, Permission.MANAGE)


def test_missing_and_forbidden_are_indistinguishable(make_user, make_manuscript):
    owner, stranger = make_user(), make_user()
    manuscript = make_manuscript(owner)

    with pytest.raises(NotFoundOrForbidden) as forbidden:
        get_accessible_manuscript(user_id=stranger.id, manuscript_id=manuscript.id)
    with pytest.raises(NotFoundOrForbidden) as missing:
        get_accessible_manuscript(user_id=owner.id, manuscript_id="does-not-exist")

    assert forbidden.value.message == missing.value.message
    assert forbidden.value.status_code == missing.value.status_code == 404


def test_http_view_denied_to_stranger(client, auth, make_user, make_manuscript):
    owner, stranger = make_user(), make_user()
    manuscript = make_manuscript(owner)

    response = client.get(f"/api/v1/manuscripts/{manuscript.id}", headers=auth(stranger))

    assert response.status_code == 404
    assert response.get_json() == {
        "success": False,
        "error": "Manuscript not found or insufficient permissions",
    }
