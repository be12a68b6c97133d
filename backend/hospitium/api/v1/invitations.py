# hospitium/api/v1/invitations.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from hospitium.models.invitation import ManuscriptInvitation
from hospitium.domain.exceptions import ValidationError
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.application.collaboration.send_invitation import send_invitation
from hospitium.application.collaboration.manage_invitation import cancel_invitation, resend_invitation
from hospitium.application.collaboration.respond_invitation import respond_invitation
from hospitium.normalizers.collaboration import normalize_invitation
from hospitium.utils.decorators import user_required
from hospitium.utils.validation import json_body
from . import v1_bp


@v1_bp.route("/invitations", methods=["GET"])
@jwt_required()
@user_required
def list_invitations():
    manuscript_id = request.args.get("manuscriptId")
    if not manuscript_id:
        raise ValidationError("manuscriptId is required")

    manuscript = get_accessible_manuscript(
        user_id=g.current_user.id,
        manuscript_id=manuscript_id,
        permission=Permission.VIEW,
    )

    invitations = (
        ManuscriptInvitation.query
        .filter_by(manuscript_id=manuscript.id)
        .order_by(ManuscriptInvitation.created_at.desc())
        .all()
    )

    return jsonify({
        "success": True,
        "data": [normalize_invitation(i) for i in invitations],
    }), 200


@v1_bp.route("/invitations", methods=["POST"])
@jwt_required()
@user_required
def create_invitation():
    data = json_body()

    invitation = send_invitation(actor_id=g.current_user.id, data=data)

    return jsonify({
        "success": True,
        "data": normalize_invitation(invitation),
        "message": "Invitation sent successfully",
    }), 201


@v1_bp.route("/invitations/<invitation_id>", methods=["DELETE"])
@jwt_required()
@user_required
def cancel_invitation_route(invitation_id):
    cancel_invitation(invitation_id=invitation_id, actor_id=g.current_user.id)

    return jsonify({
        "success": True,
        "message": "Invitation cancelled successfully",
    }), 200


@v1_bp.route("/invitations/<invitation_id>/resend", methods=["POST"])
@jwt_required()
@user_required
def resend_invitation_route(invitation_id):
    invitation = resend_invitation(invitation_id=invitation_id, actor_id=g.current_user.id)

    return jsonify({
        "success": True,
        "data": normalize_invitation(invitation),
        "message": "Invitation resent successfully",
    }), 200


@v1_bp.route("/invitations/<invitation_id>/respond", methods=["POST"])
@jwt_required()
@user_required
def respond_invitation_route(invitation_id):
    data = json_body()

    invitation = respond_invitation(
        invitation_id=invitation_id,
        actor_id=g.current_user.id,
        action=data.get("action"),
    )

    return jsonify({
        "success": True,
        "data": normalize_invitation(invitation),
        "message": f"Invitation {invitation.status.lower()}",
    }), 200
