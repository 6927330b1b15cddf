# pagecms/application/sections/import_export.py
from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, TypedDict

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from pagecms.domain.invariants.exceptions import ParseError, SectionError, ValidationError
from pagecms.application.sections.registry import list_types
from pagecms.application.sections.store import (
    DEFAULT_MAX_SECTIONS,
    list_sections,
    reorder_sections,
    save_section,
)
from pagecms.application.sections.validation import (
    EXPORT_ENTITY_TYPE,
    validate_import_document,
)
from pagecms.domain.invariants.section import coerce_display_order
from pagecms.utils.audit import log_action
from pagecms.utils.order import compact_order, next_display_order
from pagecms.utils.transaction import transactional

EXPORT_VERSION = "1.0"

CONFLICT_POLICIES = ("skip", "overwrite", "merge")
REORDER_STRATEGIES = ("preserve", "append", "renumber")

# Store-assigned fields never leave the page they belong to
PORTABLE_FIELDS = ("section_type", "title", "subtitle", "content", "display_order", "is_active")


class ImportFailure(TypedDict):
    sectionIndex: int
    error: str


class ImportResult(TypedDict):
    """
    Counts always satisfy imported + skipped + overwritten + failed == total.
    """
    success: bool
    total: int
    imported: int
    skipped: int
    overwritten: int
    failed: int
    errors: List[ImportFailure]
    warnings: List[Dict[str, Any]]


# ------------------------
# Export
# ------------------------

def _portable(section: Any) -> Dict[str, Any]:
    if isinstance(section, Mapping):
        data = {field: section.get(field) for field in PORTABLE_FIELDS}
    else:
        data = {field: getattr(section, field) for field in PORTABLE_FIELDS}

    data["content"] = data["content"] if isinstance(data["content"], dict) else {}
    data["is_active"] = data["is_active"] is not False
    return data


def export_sections(
    sections: Iterable[Any],
    *,
    page_type: str,
    entity_id: Optional[str] = None,
    exported_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Serialize sections into a portable import document.

    Ids, timestamps and the page scope are stripped so the document can be
    imported into any page or environment.
    """
    exported_at = exported_at or datetime.now(timezone.utc)

    return {
        "version": EXPORT_VERSION,
        "entity_type": EXPORT_ENTITY_TYPE,
        "exported_at": exported_at.isoformat(),
        "source_page_type": page_type,
        "source_entity_id": entity_id,
        "sections": [_portable(section) for section in sections],
    }


def dump_document(document: Dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def export_filename(page_type: str, entity_id: Optional[str] = None, today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    page_slug = "-".join(page_type.split()).lower()
    entity_suffix = f"-{entity_id[:8]}" if entity_id else ""
    return f"page-sections-{page_slug}{entity_suffix}-{today.isoformat()}.json"


def log_export(*, page_type: str, entity_id: Optional[str], count: int) -> None:
    with transactional():
        log_action(
            action="section.export",
            entity_type="page",
            entity_id=page_type,
            payload={"entity_id": entity_id, "exported_count": count},
        )


# ------------------------
# Parsing
# ------------------------

def parse_import_document(raw: str | bytes) -> Dict[str, Any]:
    """
    Decode an import file.

    Raises ParseError when the text is not JSON or lacks a `sections`
    array; nothing else is checked here.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError("Import file is not UTF-8 text") from exc

    try:
        document = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Failed to parse JSON: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("sections"), list):
        raise ParseError("Invalid import file format. Expected an object with a sections array.")

    return document


# ------------------------
# Import
# ------------------------

def merge_content(existing: Any, incoming: Any) -> Dict[str, Any]:
    """Shallow merge: incoming keys win, keys only in existing are kept."""
    merged = dict(existing) if isinstance(existing, dict) else {}
    if isinstance(incoming, dict):
        merged.update(incoming)
    return merged


def _rejected(validation) -> ImportResult:
    return {
        "success": False,
        "total": 0,
        "imported": 0,
        "skipped": 0,
        "overwritten": 0,
        "failed": 0,
        "errors": [
            {"sectionIndex": error.get("sectionIndex", -1), "error": error["message"]}
            for error in validation["errors"]
        ],
        "warnings": list(validation["warnings"]),
    }


def check_import_options(on_conflict: str, reorder_strategy: str) -> None:
    problems = []
    if on_conflict not in CONFLICT_POLICIES:
        problems.append({
            "path": "/on_conflict",
            "message": f"on_conflict must be one of {', '.join(CONFLICT_POLICIES)}",
            "code": "InvalidOption",
        })
    if reorder_strategy not in REORDER_STRATEGIES:
        problems.append({
            "path": "/reorder_strategy",
            "message": f"reorder_strategy must be one of {', '.join(REORDER_STRATEGIES)}",
            "code": "InvalidOption",
        })
    if problems:
        raise ValidationError(problems[0]["message"], errors=problems)


def import_sections(
    document: Any,
    *,
    page_type: str,
    entity_id: Optional[str] = None,
    on_conflict: str = "skip",
    reorder_strategy: str = "append",
    validate_schemas: bool = True,
    max_sections: Optional[int] = DEFAULT_MAX_SECTIONS,
) -> ImportResult:
    """
    Apply an import document to one page scope.

    Responsibilities:
    - re-validate the whole document; an invalid one is rejected before any write
    - resolve (section_type, title) conflicts with the chosen policy
    - persist each section independently; a failed section is counted and
      the rest still apply
    - re-sequence display_order with the chosen strategy
    - audit logging
    """
    check_import_options(on_conflict, reorder_strategy)

    validation = validate_import_document(
        document,
        page_type=page_type,
        section_types=list_types(page_type, include_inactive=True),
        validate_schemas=validate_schemas,
    )
    if not validation["valid"]:
        current_app.logger.warning(
            f"Rejected section import for {page_type}/{entity_id}: "
            f"{len(validation['errors'])} validation errors"
        )
        return _rejected(validation)

    existing = list_sections(page_type, entity_id)

    # Conflict key: exact (section_type, title) match against the pre-import state
    conflicts = {}
    for section in existing:
        conflicts.setdefault((section.section_type, section.title), section)

    next_order = next_display_order(existing)
    incoming_sections = document["sections"]

    imported = skipped = overwritten = failed = 0
    errors: List[ImportFailure] = []
    created = []

    for index, incoming in enumerate(incoming_sections):
        match = conflicts.get((incoming["section_type"], incoming.get("title")))

        try:
            if match is not None and on_conflict == "skip":
                skipped += 1
                continue

            if match is not None:
                payload: Dict[str, Any] = {"id": match.id}
                if on_conflict == "overwrite":
                    payload["content"] = incoming.get("content") or {}
                    payload["subtitle"] = incoming.get("subtitle")
                    payload["is_active"] = incoming.get("is_active") is not False
                else:
                    payload["content"] = merge_content(match.content, incoming.get("content"))
                    if incoming.get("subtitle") is not None:
                        payload["subtitle"] = incoming["subtitle"]
                    if incoming.get("is_active") is not None:
                        payload["is_active"] = incoming["is_active"]

                save_section(payload, validate_content=False)
                overwritten += 1
                continue

            display_order = next_order
            if reorder_strategy == "preserve" and incoming.get("display_order") is not None:
                display_order = coerce_display_order(incoming["display_order"])

            section = save_section(
                {
                    "page_type": page_type,
                    "entity_id": entity_id,
                    "section_type": incoming["section_type"],
                    "title": incoming.get("title"),
                    "subtitle": incoming.get("subtitle"),
                    "content": incoming.get("content") or {},
                    "display_order": display_order,
                    "is_active": incoming.get("is_active") is not False,
                },
                max_sections=max_sections,
                validate_content=False,
            )
            next_order = max(next_order, display_order + 1)
            created.append(section)
            imported += 1

        except (SectionError, SQLAlchemyError) as exc:
            failed += 1
            errors.append({"sectionIndex": index, "error": str(exc)})
            current_app.logger.warning(f"Failed to import section {index + 1} into {page_type}: {exc}")

    if reorder_strategy == "renumber":
        # Existing sections first in their current order, then new ones in document order
        reorder_sections(compact_order(existing + created))

    with transactional():
        log_action(
            action="section.import",
            entity_type="page",
            entity_id=page_type,
            payload={
                "entity_id": entity_id,
                "on_conflict": on_conflict,
                "reorder_strategy": reorder_strategy,
                "total": len(incoming_sections),
                "imported": imported,
                "skipped": skipped,
                "overwritten": overwritten,
                "failed": failed,
            },
        )

    current_app.logger.info(
        f"Imported sections into {page_type}/{entity_id}: {imported} imported, "
        f"{overwritten} overwritten, {skipped} skipped, {failed} failed"
    )

    return {
        "success": failed == 0,
        "total": len(incoming_sections),
        "imported": imported,
        "skipped": skipped,
        "overwritten": overwritten,
        "failed": failed,
        "errors": errors,
        "warnings": list(validation["warnings"]),
    }
