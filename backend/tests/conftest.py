"""
Shared fixtures: an app on in-memory SQLite, a test client, and factories
for users, manuscripts and collaborators.
"""
import itertools

import pytest
from flask_jwt_extended import create_access_token

from hospitium import create_app
from hospitium.extensions import db as _db
from hospitium.models.user import User
from hospitium.models.collaborator import ManuscriptCollaborator
from hospitium.application.manuscripts.create_manuscript import create_manuscript


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", ACTIVITY_LOG_PATH=str(tmp_path / "activity.log"))

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(role="researcher", **fields):
        n = next(counter)
        user = User()
        user.email = fields.get("email", f"researcher{n}@example.org")
        user.given_name = fields.get("given_name", "Ada")
        user.family_name = fields.get("family_name", f"Tester{n}")
        user.orcid_id = fields.get("orcid_id")
        user.primary_institution = fields.get("primary_institution")
        user.role = role
        user.is_active = fields.get("is_active", True)
        user.set_password(fields.get("password", "correct-horse"))

        _db.session.add(user)
        _db.session.commit()
        return user

    return _make


@pytest.fixture
def auth():
    def _headers(user):
        token = create_access_token(identity=user.id, additional_claims={"role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_manuscript(app):
    def _make(owner, **data):
        payload = {"title": "Draft paper", "content": "<p>Hello</p>", **data}
        return create_manuscript(actor_id=owner.id, data=payload)

    return _make


@pytest.fixture
def add_collaborator(app):
    def _add(manuscript, user, role="EDITOR", **flags):
        collaborator = ManuscriptCollaborator()
        collaborator.manuscript_id = manuscript.id
        collaborator.user_id = user.id
        collaborator.apply_role(role)
        for flag, value in flags.items():
            setattr(collaborator, flag, value)

        _db.session.add(collaborator)
        _db.session.commit()
        return collaborator

    return _add
