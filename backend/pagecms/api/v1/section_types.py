# pagecms/api/v1/section_types.py
from flask import request, jsonify
from pagecms.application.sections.registry import list_types, require_type
from pagecms.normalizers.section_type import normalize_section_type
from pagecms.domain.invariants.exceptions import ValidationError
from pagecms.utils.query import query_flag
from . import v1_bp


@v1_bp.route("/section-types", methods=["GET"])
def get_section_types():
    page_type = request.args.get("page_type")
    if not page_type:
        raise ValidationError("page_type query parameter is required")

    include_inactive = query_flag("include_inactive")

    return jsonify([
        normalize_section_type(section_type)
        for section_type in list_types(page_type, include_inactive=include_inactive)
    ])


@v1_bp.route("/section-types/<slug>", methods=["GET"])
def get_section_type(slug):
    return jsonify(normalize_section_type(require_type(slug), include_example=True))
