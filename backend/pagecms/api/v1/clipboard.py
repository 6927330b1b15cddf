# pagecms/api/v1/clipboard.py
from flask import current_app, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required
from pagecms.utils.decorators import roles_required
from pagecms.utils.query import scope_args
from pagecms.application.sections.clipboard import ClipboardStorage, SectionClipboard
from pagecms.application.sections.store import get_section
from pagecms.normalizers.clipboard import normalize_clipboard
from pagecms.normalizers.section import normalize_section
from . import v1_bp


def _clipboard():
    return SectionClipboard(ClipboardStorage(get_jwt_identity()))


@v1_bp.route("/sections/<section_id>/copy", methods=["POST"])
@jwt_required()
@roles_required("admin")
def copy_section(section_id):
    entry = _clipboard().copy(get_section(section_id))
    return jsonify(normalize_clipboard(entry)), 200


@v1_bp.route("/clipboard", methods=["GET"])
@jwt_required()
@roles_required("admin")
def peek_clipboard():
    return jsonify(normalize_clipboard(_clipboard().peek()))


@v1_bp.route("/clipboard", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def clear_clipboard():
    _clipboard().clear()
    return jsonify({"message": "Clipboard cleared"}), 200


@v1_bp.route("/pages/<page_type>/clipboard/paste", methods=["POST"])
@jwt_required()
@roles_required("admin")
def paste_section(page_type):
    section = _clipboard().paste(
        page_type=page_type,
        entity_id=scope_args(),
        max_sections=current_app.config["MAX_SECTIONS_PER_PAGE"],
    )
    return jsonify(normalize_section(section, admin=True)), 201
