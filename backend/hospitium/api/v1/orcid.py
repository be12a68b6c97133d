# hospitium/api/v1/orcid.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required
from hospitium.domain.exceptions import NotFound, ValidationError
from hospitium.services.orcid import (
    OrcidClient,
    OrcidNotFound,
    extract_orcid_id,
    is_valid_orcid_id,
)
from hospitium.utils.decorators import user_required
from . import v1_bp

SEARCH_FIELDS = ("givenName", "familyName", "affiliation", "orcidId", "email")


@v1_bp.route("/orcid/search", methods=["GET"])
@jwt_required()
@user_required
def search_orcid():
    """
    Search ORCID researchers.

    Either free text (``q``) or any of the structured fields
    ``givenName``, ``familyName``, ``affiliation``, ``orcidId``, ``email``.
    """
    rows = request.args.get("rows", 20, type=int)
    start = request.args.get("start", 0, type=int)

    criteria = {key: request.args[key] for key in SEARCH_FIELDS if request.args.get(key)}
    query = criteria or (request.args.get("q") or "")

    if not query:
        raise ValidationError("Provide a search query or at least one search field")

    result = OrcidClient.from_app().search_researchers(query, rows=rows, start=start)

    return jsonify({
        "success": True,
        "data": result,
    }), 200


@v1_bp.route("/orcid/<path:orcid_id>", methods=["GET"])
@jwt_required()
@user_required
def get_orcid_researcher(orcid_id):
    orcid_id = extract_orcid_id(orcid_id)
    if not is_valid_orcid_id(orcid_id):
        raise ValidationError("Invalid ORCID iD format")

    try:
        details = OrcidClient.from_app().get_researcher_details(orcid_id)
    except OrcidNotFound as exc:
        raise NotFound("Researcher not found") from exc

    return jsonify({
        "success": True,
        "data": details,
    }), 200
