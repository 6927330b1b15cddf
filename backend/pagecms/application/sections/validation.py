# pagecms/application/sections/validation.py
from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, TypedDict

from pagecms.domain.editors import get_editor
from pagecms.domain.invariants.content import check_content
from pagecms.domain.invariants.section import is_display_order, section_field_problems

EXPORT_ENTITY_TYPE = "page_section"


class Issue(TypedDict, total=False):
    path: str
    message: str
    code: str
    sectionIndex: int


class ValidationResult(TypedDict):
    """
    Outcome of validating an import document.

    `valid` is False iff `errors` is non-empty; warnings never block.
    """
    valid: bool
    errors: List[Issue]
    warnings: List[Issue]


def _issue(path: str, message: str, code: str, section_index: Optional[int] = None) -> Issue:
    issue: Issue = {"path": path, "message": message, "code": code}
    if section_index is not None:
        issue["sectionIndex"] = section_index
    return issue


def _catalog(section_types: Iterable[Any]) -> Dict[str, Tuple[Any, bool]]:
    """slug -> (schema, is_active) for models or plain mappings."""
    catalog: Dict[str, Tuple[Any, bool]] = {}
    for section_type in section_types:
        if isinstance(section_type, Mapping):
            slug = section_type.get("slug")
            schema = section_type.get("schema")
            is_active = section_type.get("is_active", True)
        else:
            slug = section_type.slug
            schema = section_type.schema
            is_active = section_type.is_active
        if slug:
            catalog[slug] = (schema, is_active is not False)
    return catalog


def _result(errors: List[Issue], warnings: List[Issue]) -> ValidationResult:
    return {"valid": not errors, "errors": errors, "warnings": warnings}


def validate_import_document(
    document: Any,
    *,
    page_type: str,
    section_types: Iterable[Any],
    validate_schemas: bool = True,
) -> ValidationResult:
    """
    Validates an import document against the section types of `page_type`.

    `section_types` must include inactive types: content that references
    them stays importable and only draws a warning.

    Checks, in order:
    - structure: an object with a `sections` array (fails fast otherwise)
    - per section: known section_type, scalar field types and, unless
      `validate_schemas` is False, content against the type's schema
    - across sections: repeated display_order values (warning)

    Pure function: safe to run on file selection before any import.
    """
    errors: List[Issue] = []
    warnings: List[Issue] = []

    # -------------------------------
    # Structure (fail fast)
    # -------------------------------
    if not isinstance(document, dict) or not isinstance(document.get("sections"), list):
        errors.append(_issue("/", "Missing or invalid sections array", "ParseError"))
        return _result(errors, warnings)

    entity_type = document.get("entity_type")
    if entity_type is not None and entity_type != EXPORT_ENTITY_TYPE:
        errors.append(_issue(
            "/entity_type",
            f"Invalid entity type \"{entity_type}\". Expected {EXPORT_ENTITY_TYPE}.",
            "ParseError",
        ))
        return _result(errors, warnings)

    # -------------------------------
    # Document-level notices
    # -------------------------------
    source_page_type = document.get("source_page_type", document.get("page_type"))
    if source_page_type and source_page_type != page_type:
        warnings.append(_issue(
            "/source_page_type",
            f"Page type mismatch. File contains \"{source_page_type}\", importing to "
            f"\"{page_type}\". Sections will be imported to the current page.",
            "PageTypeMismatch",
        ))

    sections = document["sections"]
    if not sections:
        warnings.append(_issue("/sections", "Import file contains no sections", "EmptyDocument"))

    catalog = _catalog(section_types)
    orders: Dict[int, List[int]] = defaultdict(list)

    # -------------------------------
    # Per-section checks
    # -------------------------------
    for index, section in enumerate(sections):
        path = f"/sections/{index}"

        if not isinstance(section, dict):
            errors.append(_issue(path, "Section must be an object", "InvalidSection", index))
            continue

        slug = section.get("section_type")
        if not slug or not isinstance(slug, str):
            errors.append(_issue(
                f"{path}/section_type", "Missing or invalid section_type", "UnknownSectionType", index,
            ))
            continue

        if slug not in catalog:
            errors.append(_issue(
                f"{path}/section_type",
                f"Section type \"{slug}\" does not exist for page type \"{page_type}\"",
                "UnknownSectionType",
                index,
            ))
            continue

        schema, is_active = catalog[slug]
        if not is_active:
            warnings.append(_issue(
                f"{path}/section_type",
                f"Section type \"{slug}\" is not active",
                "InactiveSectionType",
                index,
            ))

        for problem in section_field_problems(section, base_path=path):
            errors.append(_issue(problem["path"], problem["message"], problem["code"], index))

        display_order = section.get("display_order")
        if is_display_order(display_order):
            orders[int(display_order)].append(index)

        if not validate_schemas:
            continue

        content = section.get("content")
        content_errors, content_warnings = check_content(content, schema, base_path=f"{path}/content")
        errors.extend(_issue(i["path"], i["message"], i["code"], index) for i in content_errors)
        warnings.extend(_issue(i["path"], i["message"], i["code"], index) for i in content_warnings)

        if content is None or isinstance(content, dict):
            for problem_path, message in get_editor(slug).check(content or {}):
                errors.append(_issue(f"{path}/content{problem_path}", message, "SchemaViolation", index))

    # -------------------------------
    # Cross-section checks
    # -------------------------------
    for display_order, indexes in sorted(orders.items()):
        if len(indexes) < 2:
            continue
        for index in indexes[1:]:
            warnings.append(_issue(
                f"/sections/{index}/display_order",
                f"display_order {display_order} is also used by section {indexes[0] + 1}",
                "DuplicateDisplayOrder",
                index,
            ))

    return _result(errors, warnings)
