# hospitium/api/v1/logs.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required
from hospitium.domain.exceptions import ValidationError
from hospitium.utils.activity import LOG_LEVELS, read_activity
from hospitium.utils.decorators import user_required, roles_required
from . import v1_bp


@v1_bp.route("/logs", methods=["GET"])
@jwt_required()
@user_required
@roles_required("admin")
def list_activity_logs():
    limit = min(max(request.args.get("limit", 100, type=int), 1), 1000)
    level = request.args.get("level")

    if level and level not in LOG_LEVELS:
        raise ValidationError(f"Invalid log level: {level}")

    entries = read_activity(limit=limit, level=level)

    return jsonify({
        "success": True,
        "data": {
            "logs": entries,
            "count": len(entries),
        },
    }), 200
