# pagecms/api/v1/import_export.py
from flask import Response, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from pagecms.utils.decorators import roles_required
from pagecms.utils.query import query_flag, scope_args
from pagecms.utils.upload import read_json_upload
from pagecms.application.sections.registry import list_types
from pagecms.application.sections.store import list_sections
from pagecms.application.sections.validation import validate_import_document
from pagecms.application.sections.import_export import (
    dump_document,
    export_filename,
    export_sections,
    import_sections,
    log_export,
    parse_import_document,
)
from pagecms.domain.invariants.exceptions import ParseError
from . import v1_bp


def _load_document():
    """Import document from a multipart `file` upload or the raw JSON body."""
    if "file" in request.files:
        return parse_import_document(read_json_upload(request.files["file"]))

    document = request.get_json(silent=True)
    if document is None:
        raise ParseError("Expected a JSON body or a .json file upload")
    return document


# ------------------------
# Export
# ------------------------

@v1_bp.route("/pages/<page_type>/sections/export", methods=["GET"])
@jwt_required()
@roles_required("admin")
def export_page_sections(page_type):
    entity_id = scope_args()
    sections = list_sections(page_type, entity_id)

    document = export_sections(sections, page_type=page_type, entity_id=entity_id)
    log_export(page_type=page_type, entity_id=entity_id, count=len(sections))

    filename = export_filename(page_type, entity_id)
    return Response(
        dump_document(document),
        mimetype="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ------------------------
# Import
# ------------------------

@v1_bp.route("/pages/<page_type>/sections/validate", methods=["POST"])
@jwt_required()
@roles_required("admin")
def validate_page_sections(page_type):
    document = _load_document()

    result = validate_import_document(
        document,
        page_type=page_type,
        section_types=list_types(page_type, include_inactive=True),
        validate_schemas=query_flag("validate_schemas", default=True),
    )

    sections = document.get("sections") if isinstance(document, dict) else None
    return jsonify({
        **result,
        "section_count": len(sections) if isinstance(sections, list) else 0,
    }), 200


@v1_bp.route("/pages/<page_type>/sections/import", methods=["POST"])
@jwt_required()
@roles_required("admin")
def import_page_sections(page_type):
    document = _load_document()
    config = current_app.config

    result = import_sections(
        document,
        page_type=page_type,
        entity_id=scope_args(),
        on_conflict=request.args.get("on_conflict", config["DEFAULT_ON_CONFLICT"]),
        reorder_strategy=request.args.get("reorder_strategy", config["DEFAULT_REORDER_STRATEGY"]),
        validate_schemas=query_flag("validate_schemas", default=True),
        max_sections=config["MAX_SECTIONS_PER_PAGE"],
    )

    # A rejected document wrote nothing; partial failures still report 200
    rejected = not result["success"] and result["total"] == 0
    return jsonify(result), 422 if rejected else 200
