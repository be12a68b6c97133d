# hospitium/api/v1/changes.py
from flask import g, jsonify
from flask_jwt_extended import jwt_required
from hospitium.models.tracked_change import TrackedChange
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.application.changes.propose_change import propose_change
from hospitium.application.changes.resolve_change import resolve_change
from hospitium.application.changes.remove_change import remove_change
from hospitium.normalizers.tracked_change import normalize_tracked_change
from hospitium.utils.decorators import user_required
from hospitium.utils.validation import json_body
from . import v1_bp


@v1_bp.route("/manuscripts/<manuscript_id>/changes", methods=["GET"])
@jwt_required()
@user_required
def list_changes(manuscript_id):
    manuscript = get_accessible_manuscript(
        user_id=g.current_user.id,
        manuscript_id=manuscript_id,
        permission=Permission.VIEW,
    )

    changes = (
        TrackedChange.query
        .filter_by(manuscript_id=manuscript.id)
        .order_by(TrackedChange.created_at.desc(), TrackedChange.id.desc())
        .all()
    )

    return jsonify({
        "success": True,
        "data": [normalize_tracked_change(c) for c in changes],
    }), 200


@v1_bp.route("/manuscripts/<manuscript_id>/changes", methods=["POST"])
@jwt_required()
@user_required
def create_change(manuscript_id):
    data = json_body()

    change = propose_change(
        manuscript_id=manuscript_id,
        actor_id=g.current_user.id,
        data=data,
    )

    return jsonify({
        "success": True,
        "data": normalize_tracked_change(change, include_resolution=False),
        "message": "Change tracked successfully",
    }), 201


@v1_bp.route("/manuscripts/<manuscript_id>/changes/<change_id>", methods=["PUT"])
@jwt_required()
@user_required
def update_change(manuscript_id, change_id):
    data = json_body()

    change = resolve_change(
        manuscript_id=manuscript_id,
        change_key=change_id,
        actor_id=g.current_user.id,
        status=data.get("status"),
    )

    return jsonify({
        "success": True,
        "data": normalize_tracked_change(change),
        "message": f"Change {change.status.lower()} successfully",
    }), 200


@v1_bp.route("/manuscripts/<manuscript_id>/changes/<change_id>", methods=["DELETE"])
@jwt_required()
@user_required
def delete_change(manuscript_id, change_id):
    remove_change(
        manuscript_id=manuscript_id,
        change_key=change_id,
        actor_id=g.current_user.id,
    )

    return jsonify({
        "success": True,
        "message": "Change deleted successfully",
    }), 200
