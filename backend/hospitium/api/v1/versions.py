# hospitium/api/v1/versions.py
from flask import g, jsonify
from flask_jwt_extended import jwt_required
from hospitium.models.manuscript_version import ManuscriptVersion
from hospitium.domain.exceptions import NotFound
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.application.versions.create_version import create_version
from hospitium.application.versions.restore_version import restore_version
from hospitium.normalizers.manuscript import normalize_manuscript
from hospitium.normalizers.version import normalize_version
from hospitium.utils.decorators import user_required
from hospitium.utils.validation import json_body
from . import v1_bp


@v1_bp.route("/manuscripts/<manuscript_id>/versions", methods=["GET"])
@jwt_required()
@user_required
def list_versions(manuscript_id):
    manuscript = get_accessible_manuscript(
        user_id=g.current_user.id,
        manuscript_id=manuscript_id,
        permission=Permission.VIEW,
    )

    versions = (
        ManuscriptVersion.query
        .filter_by(manuscript_id=manuscript.id)
        .order_by(ManuscriptVersion.version_number.desc())
        .all()
    )

    return jsonify({
        "success": True,
        "data": [normalize_version(v) for v in versions],
    }), 200


@v1_bp.route("/manuscripts/<manuscript_id>/versions", methods=["POST"])
@jwt_required()
@user_required
def create_version_route(manuscript_id):
    data = json_body()

    version = create_version(
        manuscript_id=manuscript_id,
        actor_id=g.current_user.id,
        data=data,
    )

    return jsonify({
        "success": True,
        "data": normalize_version(version),
        "message": f"Version {version.version_number} created successfully",
    }), 201


@v1_bp.route("/manuscripts/<manuscript_id>/versions/<version_id>", methods=["GET"])
@jwt_required()
@user_required
def get_version(manuscript_id, version_id):
    manuscript = get_accessible_manuscript(
        user_id=g.current_user.id,
        manuscript_id=manuscript_id,
        permission=Permission.VIEW,
    )

    version = ManuscriptVersion.query.filter_by(
        id=version_id,
        manuscript_id=manuscript.id,
    ).first()
    if not version:
        raise NotFound("Version not found")

    return jsonify({
        "success": True,
        "data": normalize_version(version, include_content=True),
    }), 200


@v1_bp.route("/manuscripts/<manuscript_id>/versions/<version_id>/restore", methods=["POST"])
@jwt_required()
@user_required
def restore_version_route(manuscript_id, version_id):
    result = restore_version(
        manuscript_id=manuscript_id,
        version_id=version_id,
        actor_id=g.current_user.id,
    )

    return jsonify({
        "success": True,
        "data": {
            "manuscript": normalize_manuscript(result["manuscript"]),
            "restoredFromVersion": result["restored_from_version"],
            "backupVersion": result["backup_version"],
        },
        "message": f"Manuscript restored to version {result['restored_from_version']}",
    }), 200
