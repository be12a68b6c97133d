import pytest

from hospitium.models.tracked_change import TrackedChange


def change_payload(**overrides):
    payload = {
        "changeId": "chg-1",
        "type": "insertion",
        "operation": "insert",
        "content": "world",
        "startOffset": 0,
        "endOffset": 0,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def owner(make_user):
    return make_user()


@pytest.fixture
def manuscript(owner, make_manuscript):
    return make_manuscript(owner)


def propose(client, auth, manuscript, user, **overrides):
    return client.post(
        f"/api/v1/manuscripts/{manuscript.id}/changes",
        json=change_payload(**overrides),
        headers=auth(user),
    )


def test_propose_accepts_zero_offsets(client, auth, owner, manuscript):
    response = propose(client, auth, manuscript, owner)

    assert response.status_code == 201
    body = response.get_json()
    assert body["success"] is True
    assert body["data"]["status"] == "PENDING"
    assert body["data"]["startOffset"] == 0
    assert body["data"]["author"]["id"] == owner.id


@pytest.mark.parametrize("field, value", [
    ("changeId", 7),
    ("type", {"kind": "insertion"}),
    ("operation", ["insert"]),
    ("nodeType", {"name": "paragraph"}),
    ("content", 42),
])
def test_propose_rejects_non_string_fields(client, auth, owner, manuscript, field, value):
    response = propose(client, auth, manuscript, owner, **{field: value})

    assert response.status_code == 400
    assert response.get_json()["error"] == f"{field} must be a string"
    assert TrackedChange.query.count() == 0


def test_propose_rejects_array_body(client, auth, owner, manuscript):
    response = client.post(
        f"/api/v1/manuscripts/{manuscript.id}/changes",
        json=[change_payload()],
        headers=auth(owner),
    )

    assert response.status_code == 400
    assert response.get_json() == {"success": False, "error": "Invalid request body"}


@pytest.mark.parametrize("field", ["changeId", "type", "operation", "startOffset", "endOffset"])
def test_propose_requires_fields(client, auth, owner, manuscript, field):
    payload = change_payload()
    del payload[field]

    response = client.post(
        f"/api/v1/manuscripts/{manuscript.id}/changes",
        json=payload,
        headers=auth(owner),
    )

    assert response.status_code == 400
    assert "Missing required fields" in response.get_json()["error"]


@pytest.mark.parametrize("offsets", [
    {"startOffset": -1},
    {"startOffset": "3"},
    {"startOffset": 5, "endOffset": 2},
])
def test_propose_rejects_bad_offsets(client, auth, owner, manuscript, offsets):
    response = propose(client, auth, manuscript, owner, **offsets)

    assert response.status_code == 400


def test_propose_needs_edit_permission(client, auth, make_user, manuscript, add_collaborator):
    viewer = make_user()
    add_collaborator(manuscript, viewer, role="VIEWER")

    response = propose(client, auth, manuscript, viewer)

    assert response.status_code == 404
    assert TrackedChange.query.count() == 0


def test_accept_sets_only_accepted_timestamp(client, auth, make_user, owner, manuscript, add_collaborator):
    editor = make_user()
    add_collaborator(manuscript, editor, role="EDITOR")
    propose(client, auth, manuscript, editor)

    response = client.put(
        f"/api/v1/manuscripts/{manuscript.id}/changes/chg-1",
        json={"status": "ACCEPTED"},
        headers=auth(owner),
    )

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["status"] == "ACCEPTED"
    assert data["acceptedAt"] is not None
    assert data["rejectedAt"] is None
    assert data["acceptedBy"]["id"] == owner.id


def test_reject_records_resolver_in_accepted_by(client, auth, owner, manuscript):
    propose(client, auth, manuscript, owner)

    response = client.put(
        f"/api/v1/manuscripts/{manuscript.id}/changes/chg-1",
        json={"status": "REJECTED"},
        headers=auth(owner),
    )

    data = response.get_json()["data"]
    assert data["status"] == "REJECTED"
    assert data["rejectedAt"] is not None
    assert data["acceptedAt"] is None
    assert data["acceptedBy"]["id"] == owner.id


@pytest.mark.parametrize("status", ["PENDING", "accepted", None, "MERGED", {"value": "ACCEPTED"}, ["REJECTED"]])
def test_resolve_rejects_unknown_status(client, auth, owner, manuscript, status):
    propose(client, auth, manuscript, owner)

    response = client.put(
        f"/api/v1/manuscripts/{manuscript.id}/changes/chg-1",
        json={"status": status},
        headers=auth(owner),
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "Status must be either ACCEPTED or REJECTED"


def test_change_resolves_only_once(client, auth, owner, manuscript):
    propose(client, auth, manuscript, owner)
    url = f"/api/v1/manuscripts/{manuscript.id}/changes/chg-1"
    client.put(url, json={"status": "ACCEPTED"}, headers=auth(owner))

    response = client.put(url, json={"status": "REJECTED"}, headers=auth(owner))

    assert response.status_code == 409
    assert TrackedChange.query.filter_by(change_id="chg-1").one().status == "ACCEPTED"


def test_resolve_unknown_change(client, auth, owner, manuscript):
    response = client.put(
        f"/api/v1/manuscripts/{manuscript.id}/changes/missing",
        json={"status": "ACCEPTED"},
        headers=auth(owner),
    )

    assert response.status_code == 404
    assert response.get_json()["error"] == "Tracked change not found"


def test_only_author_or_creator_may_delete(client, auth, make_user, owner, manuscript, add_collaborator):
    author, other_editor = make_user(), make_user()
    add_collaborator(manuscript, author, role="EDITOR")
    add_collaborator(manuscript, other_editor, role="EDITOR")
    propose(client, auth, manuscript, author)
    url = f"/api/v1/manuscripts/{manuscript.id}/changes/chg-1"

    denied = client.delete(url, headers=auth(other_editor))
    assert denied.status_code == 403
    assert denied.get_json()["error"] == "Insufficient permissions to delete this change"

    allowed = client.delete(url, headers=auth(owner))
    assert allowed.status_code == 200
    assert TrackedChange.query.count() == 0


def test_author_deletes_resolved_change(client, auth, make_user, owner, manuscript, add_collaborator):
    author = make_user()
    add_collaborator(manuscript, author, role="EDITOR")
    propose(client, auth, manuscript, author)
    url = f"/api/v1/manuscripts/{manuscript.id}/changes/chg-1"
    client.put(url, json={"status": "REJECTED"}, headers=auth(owner))

    response = client.delete(url, headers=auth(author))

    assert response.status_code == 200


def test_list_changes_newest_first(client, auth, owner, manuscript):
    for key in ("first", "second", "third"):
        propose(client, auth, manuscript, owner, changeId=key)

    response = client.get(f"/api/v1/manuscripts/{manuscript.id}/changes", headers=auth(owner))

    assert [c["changeId"] for c in response.get_json()["data"]] == ["third", "second", "first"]
