# hospitium/api/v1/collaborators.py
from flask import g, jsonify
from flask_jwt_extended import jwt_required
from hospitium.models.collaborator import ManuscriptCollaborator
from hospitium.models.invitation import ManuscriptInvitation
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.application.collaboration.update_collaborator import update_collaborator
from hospitium.application.collaboration.remove_collaborator import remove_collaborator
from hospitium.normalizers.collaboration import normalize_collaborator, normalize_invitation
from hospitium.utils.decorators import user_required
from hospitium.utils.validation import json_body
from . import v1_bp


@v1_bp.route("/manuscripts/<manuscript_id>/collaborators", methods=["GET"])
@jwt_required()
@user_required
def list_collaborators(manuscript_id):
    manuscript = get_accessible_manuscript(
        user_id=g.current_user.id,
        manuscript_id=manuscript_id,
        permission=Permission.VIEW,
    )

    collaborators = (
        ManuscriptCollaborator.query
        .filter_by(manuscript_id=manuscript.id)
        .order_by(ManuscriptCollaborator.joined_at.asc())
        .all()
    )
    invitations = (
        ManuscriptInvitation.query
        .filter_by(manuscript_id=manuscript.id, status="PENDING")
        .order_by(ManuscriptInvitation.created_at.desc())
        .all()
    )

    return jsonify({
        "success": True,
        "data": {
            "collaborators": [normalize_collaborator(c) for c in collaborators],
            "pendingInvitations": [normalize_invitation(i) for i in invitations],
        },
    }), 200


@v1_bp.route("/manuscripts/<manuscript_id>/collaborators/<collaborator_id>", methods=["PATCH"])
@jwt_required()
@user_required
def update_collaborator_route(manuscript_id, collaborator_id):
    data = json_body()

    collaborator = update_collaborator(
        manuscript_id=manuscript_id,
        collaborator_id=collaborator_id,
        actor_id=g.current_user.id,
        data=data,
    )

    return jsonify({
        "success": True,
        "data": normalize_collaborator(collaborator),
        "message": "Collaborator updated successfully",
    }), 200


@v1_bp.route("/manuscripts/<manuscript_id>/collaborators/<collaborator_id>", methods=["DELETE"])
@jwt_required()
@user_required
def remove_collaborator_route(manuscript_id, collaborator_id):
    remove_collaborator(
        manuscript_id=manuscript_id,
        collaborator_id=collaborator_id,
        actor_id=g.current_user.id,
    )

    return jsonify({
        "success": True,
        "message": "Collaborator removed successfully",
    }), 200
