from flask import jsonify, g
from flask_jwt_extended import create_access_token, jwt_required
from hospitium.extensions import db
from hospitium.models.user import User
from hospitium.normalizers.user import normalize_user
from hospitium.errors import error_response
from hospitium.services.orcid import format_orcid_id, is_valid_orcid_id
from hospitium.utils.decorators import user_required
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_info, log_warning
from hospitium.utils.validation import json_body, string_field
from . import v1_bp


def _issue_token(user):
    return create_access_token(
        identity=user.id,
        additional_claims={"role": user.role},
    )


@v1_bp.route("/auth/register", methods=["POST"])
def register():
    data = json_body()

    email = (string_field(data, "email") or "").strip().lower()
    password = string_field(data, "password") or ""

    if not email or not password:
        return error_response("Email and password required", 400)
    if len(password) < 8:
        return error_response("Password must be at least 8 characters", 400)

    orcid_id = format_orcid_id((string_field(data, "orcidId") or "").strip()) or None
    if orcid_id and not is_valid_orcid_id(orcid_id):
        return error_response("Invalid ORCID iD format", 400)

    if User.query.filter_by(email=email).first():
        return error_response("Email already registered", 409)
    if orcid_id and User.query.filter_by(orcid_id=orcid_id).first():
        return error_response("ORCID iD already registered", 409)

    user = User()
    user.email = email
    user.given_name = string_field(data, "givenName")
    user.family_name = string_field(data, "familyName")
    user.orcid_id = orcid_id
    user.primary_institution = string_field(data, "primaryInstitution")
    user.role = "researcher"
    user.is_active = True
    user.set_password(password)

    with transactional():
        db.session.add(user)

    log_info("User registered", {"userId": user.id, "email": user.email})

    return jsonify({
        "success": True,
        "data": {
            "user": normalize_user(user),
            "accessToken": _issue_token(user),
        },
        "message": "Registration successful",
    }), 201


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = json_body()
    if not data:
        return error_response("Invalid request body", 400)

    email = (string_field(data, "email") or "").strip().lower()
    password = string_field(data, "password")

    if not email or not password:
        return error_response("Email and password required", 400)

    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(password):
        log_warning("Failed login attempt", {"email": email})
        return error_response("Invalid credentials", 401)

    if not user.is_active:
        return error_response("User account disabled", 403)

    log_info("User logged in", {"userId": user.id})

    return jsonify({
        "success": True,
        "data": {
            "user": normalize_user(user),
            "accessToken": _issue_token(user),
        },
    }), 200


@v1_bp.route("/auth/me", methods=["GET"])
@jwt_required()
@user_required
def me():
    return jsonify({
        "success": True,
        "data": normalize_user(g.current_user),
    }), 200
