# hospitium/api/v1/manuscripts.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from sqlalchemy import func, or_, select
from hospitium.extensions import db
from hospitium.models.manuscript import Manuscript
from hospitium.domain.permissions import Permission, accessible_manuscripts, get_accessible_manuscript
from hospitium.application.manuscripts.create_manuscript import create_manuscript
from hospitium.application.manuscripts.update_manuscript import update_manuscript
from hospitium.application.manuscripts.delete_manuscript import delete_manuscript
from hospitium.normalizers.manuscript import normalize_manuscript, normalize_manuscript_summary
from hospitium.normalizers.pagination import normalize_pagination
from hospitium.utils.decorators import user_required
from hospitium.utils.validation import json_body
from . import v1_bp


@v1_bp.route("/manuscripts", methods=["GET"])
@jwt_required()
@user_required
def list_manuscripts():
    limit = min(max(request.args.get("limit", 20, type=int), 1), 100)
    offset = max(request.args.get("offset", 0, type=int), 0)
    search = (request.args.get("search") or "").strip()
    manuscript_type = request.args.get("type")

    stmt = accessible_manuscripts(g.current_user.id)

    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(or_(
            func.lower(Manuscript.title).like(pattern),
            func.lower(Manuscript.description).like(pattern),
        ))
    if manuscript_type:
        stmt = stmt.where(Manuscript.type == manuscript_type)

    total = db.session.execute(
        select(func.count()).select_from(stmt.subquery())
    ).scalar_one()

    manuscripts = db.session.execute(
        stmt.order_by(Manuscript.updated_at.desc(), Manuscript.id.desc())
        .limit(limit)
        .offset(offset)
    ).scalars().all()

    return jsonify({
        "success": True,
        "data": normalize_pagination(
            manuscripts,
            normalize_manuscript_summary,
            limit=limit,
            offset=offset,
            total=total,
        ),
    }), 200


@v1_bp.route("/manuscripts", methods=["POST"])
@jwt_required()
@user_required
def create_manuscript_route():
    data = json_body()

    manuscript = create_manuscript(actor_id=g.current_user.id, data=data)

    return jsonify({
        "success": True,
        "data": normalize_manuscript(manuscript, include_collaborators=True),
        "message": "Manuscript created successfully",
    }), 201


@v1_bp.route("/manuscripts/<manuscript_id>", methods=["GET"])
@jwt_required()
@user_required
def get_manuscript(manuscript_id):
    manuscript = get_accessible_manuscript(
        user_id=g.current_user.id,
        manuscript_id=manuscript_id,
        permission=Permission.VIEW,
    )

    return jsonify({
        "success": True,
        "data": normalize_manuscript(manuscript, include_collaborators=True),
    }), 200


@v1_bp.route("/manuscripts/<manuscript_id>", methods=["PATCH"])
@jwt_required()
@user_required
def update_manuscript_route(manuscript_id):
    data = json_body()

    manuscript = update_manuscript(
        manuscript_id=manuscript_id,
        actor_id=g.current_user.id,
        data=data,
    )

    return jsonify({
        "success": True,
        "data": normalize_manuscript(manuscript),
        "message": "Manuscript saved successfully",
    }), 200


@v1_bp.route("/manuscripts/<manuscript_id>", methods=["DELETE"])
@jwt_required()
@user_required
def delete_manuscript_route(manuscript_id):
    delete_manuscript(manuscript_id=manuscript_id, actor_id=g.current_user.id)

    return jsonify({
        "success": True,
        "message": "Manuscript deleted successfully",
    }), 200
