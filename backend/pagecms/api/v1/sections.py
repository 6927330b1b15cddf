# pagecms/api/v1/sections.py
from flask import current_app, request, jsonify
from flask_jwt_extended import jwt_required
from pagecms.utils.decorators import roles_required
from pagecms.utils.query import scope_args
from pagecms.application.sections.store import (
    get_section,
    list_sections,
    remove_section,
    reorder_sections,
    save_section,
)
from pagecms.domain.invariants.exceptions import ValidationError
from pagecms.normalizers.section import normalize_section
from . import v1_bp


# ------------------------
# Public (renderer)
# ------------------------

@v1_bp.route("/public/pages/<page_type>/sections", methods=["GET"])
def list_public_sections(page_type):
    sections = list_sections(page_type, scope_args(), active_only=True)
    return jsonify([normalize_section(s) for s in sections])


# ------------------------
# Sections
# ------------------------

@v1_bp.route("/pages/<page_type>/sections", methods=["GET"])
@jwt_required()
@roles_required("admin")
def list_page_sections(page_type):
    sections = list_sections(page_type, scope_args())
    return jsonify([normalize_section(s, admin=True) for s in sections])


@v1_bp.route("/pages/<page_type>/sections", methods=["POST"])
@jwt_required()
@roles_required("admin")
def create_section(page_type):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    # Scope comes from the URL; a client-sent id never turns a create into an update
    data = {key: value for key, value in data.items() if key != "id"}
    data["page_type"] = page_type
    data["entity_id"] = scope_args(data)

    section = save_section(data, max_sections=current_app.config["MAX_SECTIONS_PER_PAGE"])

    return jsonify(normalize_section(section, admin=True)), 201


@v1_bp.route("/sections/<section_id>", methods=["PUT"])
@jwt_required()
@roles_required("admin")
def update_section(section_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    expected_updated_at = request.headers.get("If-Unmodified-Since") or data.get("expected_updated_at")

    # Page scope is fixed at creation
    payload = {
        key: value for key, value in data.items()
        if key not in ("page_type", "entity_id", "expected_updated_at")
    }
    payload["id"] = section_id

    section = save_section(payload, expected_updated_at=expected_updated_at)

    return jsonify(normalize_section(section, admin=True)), 200


@v1_bp.route("/sections/<section_id>", methods=["GET"])
@jwt_required()
@roles_required("admin")
def get_page_section(section_id):
    return jsonify(normalize_section(get_section(section_id), admin=True))


@v1_bp.route("/sections/<section_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def delete_section(section_id):
    removed = remove_section(section_id)

    return jsonify({
        "message": "Section deleted" if removed else "Section already deleted",
        "deleted": removed,
    }), 200


@v1_bp.route("/pages/<page_type>/sections/reorder", methods=["POST"])
@jwt_required()
@roles_required("admin")
def reorder_page_sections(page_type):
    data = request.get_json(silent=True)  # [{id: "...", display_order: 0}, ...]

    # Accept {"sections": [...]} as well as a bare list
    if isinstance(data, dict):
        data = data.get("sections")

    if not isinstance(data, list):
        raise ValidationError("Reorder payload must be a list of {id, display_order}")

    sections = reorder_sections(data, page_type=page_type, entity_id=scope_args())

    return jsonify({
        "message": "Sections reordered",
        "sections": [normalize_section(s, admin=True) for s in sections],
    }), 200
