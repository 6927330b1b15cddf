from typing import Any, Dict, List, Optional
from flask import current_app
from pagecms.extensions import db
from pagecms.models.page_section import PageSection
from pagecms.domain.editors import get_editor
from pagecms.domain.invariants.content import check_content
from pagecms.domain.invariants.exceptions import (
    CapacityError,
    NotFoundError,
    ValidationError,
)
from pagecms.domain.invariants.section import (
    assert_section_fields,
    assert_unique_orders,
    coerce_display_order,
)
from pagecms.application.sections.registry import get_type
from pagecms.utils.audit import log_action
from pagecms.utils.optimistic_lock import enforce_optimistic_lock
from pagecms.utils.transaction import transactional


DEFAULT_MAX_SECTIONS = 10

MUTABLE_FIELDS = ("section_type", "title", "subtitle", "content", "display_order", "is_active")


def scope_query(page_type: str, entity_id: Optional[str] = None):
    query = PageSection.query.filter(PageSection.page_type == page_type)
    if entity_id:
        return query.filter(PageSection.entity_id == entity_id)
    return query.filter(PageSection.entity_id.is_(None))


def list_sections(
    page_type: str,
    entity_id: Optional[str] = None,
    *,
    active_only: bool = False,
) -> List[PageSection]:
    """Sections of one page scope by display_order, ties broken by created_at."""
    query = scope_query(page_type, entity_id)
    if active_only:
        query = query.filter(PageSection.is_active.is_(True))

    return query.order_by(
        PageSection.display_order.asc(),
        PageSection.created_at.asc(),
    ).all()


def count_sections(page_type: str, entity_id: Optional[str] = None) -> int:
    return scope_query(page_type, entity_id).count()


def get_section(section_id: str) -> PageSection:
    section = db.session.get(PageSection, section_id) if section_id else None
    if not section:
        raise NotFoundError(f"Section '{section_id}' not found")
    return section


def _unknown_type(message: str) -> ValidationError:
    return ValidationError(
        message,
        errors=[{"path": "/section_type", "message": message, "code": "UnknownSectionType"}],
    )


def _resolve_type(slug: Any, page_type: Optional[str] = None):
    """
    Registry entry for `slug`. With `page_type` given the type must also be
    allowed on that page; inactive types still resolve.
    """
    if not slug or not isinstance(slug, str):
        raise _unknown_type("Section type is required")

    section_type = get_type(slug)
    if not section_type:
        raise _unknown_type(f"Section type \"{slug}\" does not exist")

    if page_type is not None and not section_type.allows_page(page_type):
        raise _unknown_type(f"Section type \"{slug}\" is not allowed on page type \"{page_type}\"")
    return section_type


def _prepare_content(section_type, content: Any, *, validate: bool) -> Dict[str, Any]:
    editor = get_editor(section_type.slug)
    normalized = editor.normalize(content)

    if not validate:
        return normalized

    if content is not None and not isinstance(content, dict):
        raise ValidationError(
            "Content must be an object",
            errors=[{"path": "/content", "message": "Content must be an object", "code": "SchemaViolation"}],
        )

    errors, _ = check_content(normalized, section_type.schema)
    errors.extend(
        {"path": f"/content{path}", "message": message, "code": "SchemaViolation"}
        for path, message in editor.check(normalized)
    )
    if errors:
        raise ValidationError(
            f"Content does not match the {section_type.slug} schema",
            errors=errors,
        )
    return normalized


def save_section(
    data: Dict[str, Any],
    *,
    max_sections: Optional[int] = DEFAULT_MAX_SECTIONS,
    validate_content: bool = True,
    expected_updated_at=None,
) -> PageSection:
    """
    Insert (empty or missing id) or update (id present) one section.

    Inserts append at the current scope count unless display_order is given
    and fail with CapacityError when the scope is at `max_sections`.
    Updates touch only the provided fields.
    """
    assert_section_fields(data)

    if data.get("id"):
        return _update_section(
            data,
            validate_content=validate_content,
            expected_updated_at=expected_updated_at,
        )
    return _insert_section(data, max_sections=max_sections, validate_content=validate_content)


def _insert_section(
    data: Dict[str, Any],
    *,
    max_sections: Optional[int],
    validate_content: bool,
) -> PageSection:
    page_type = data.get("page_type")
    if not page_type:
        raise ValidationError("page_type is required to create a section")

    entity_id = data.get("entity_id") or None
    section_type = _resolve_type(data.get("section_type"), page_type)

    with transactional():
        count = count_sections(page_type, entity_id)
        if max_sections is not None and count >= max_sections:
            raise CapacityError(
                f"Maximum {max_sections} sections allowed.",
                errors=[{
                    "path": "/",
                    "message": f"Page {page_type} already has {count} of {max_sections} sections",
                    "code": "CapacityError",
                }],
            )

        section = PageSection()
        section.page_type = page_type
        section.entity_id = entity_id
        section.section_type = section_type.slug
        section.title = data.get("title")
        section.subtitle = data.get("subtitle")
        section.content = _prepare_content(section_type, data.get("content"), validate=validate_content)
        display_order = data.get("display_order")
        section.display_order = count if display_order is None else coerce_display_order(display_order)
        section.is_active = data.get("is_active", True) is not False

        db.session.add(section)
        db.session.flush()  # ensures section.id exists

        log_action(
            action="section.create",
            entity_type="section",
            entity_id=section.id,
            payload={
                "page_type": page_type,
                "entity_id": entity_id,
                "section_type": section.section_type,
                "display_order": section.display_order,
            },
        )

    current_app.logger.debug(f"Created section {section.id} on {page_type}/{entity_id}")
    return section


def _update_section(
    data: Dict[str, Any],
    *,
    validate_content: bool,
    expected_updated_at,
) -> PageSection:
    section = get_section(data["id"])
    enforce_optimistic_lock(section, expected_updated_at)

    slug = data.get("section_type", section.section_type)
    # Only a type change is checked against the page
    section_type = _resolve_type(slug, section.page_type if slug != section.section_type else None)
    changed_fields = []

    with transactional():
        if "content" in data or section_type.slug != section.section_type:
            content = data["content"] if "content" in data else section.content
            prepared = _prepare_content(section_type, content, validate=validate_content)
            if prepared != section.content:
                section.content = prepared
                changed_fields.append("content")

        for field in MUTABLE_FIELDS:
            if field == "content" or field not in data:
                continue
            value = section_type.slug if field == "section_type" else data[field]
            if field == "display_order":
                if value is None:
                    continue
                value = coerce_display_order(value)
            if getattr(section, field) != value:
                setattr(section, field, value)
                changed_fields.append(field)

        if changed_fields:
            log_action(
                action="section.update",
                entity_type="section",
                entity_id=section.id,
                payload={"fields": changed_fields},
            )

    return section


def remove_section(section_id: str) -> bool:
    """
    Hard delete. Deleting an id that is already gone succeeds without effect;
    the return value tells whether a row was removed.
    """
    section = db.session.get(PageSection, section_id) if section_id else None
    if not section:
        current_app.logger.info(f"Section {section_id} already absent, nothing to delete")
        return False

    with transactional():
        log_action(
            action="section.delete",
            entity_type="section",
            entity_id=section.id,
            payload={
                "page_type": section.page_type,
                "entity_id": section.entity_id,
                "section_type": section.section_type,
            },
        )
        db.session.delete(section)

    return True


def reorder_sections(
    pairs: List[Dict[str, Any]],
    *,
    page_type: Optional[str] = None,
    entity_id: Optional[str] = None,
) -> List[PageSection]:
    """
    Atomic bulk rewrite of display_order from [{id, display_order}, ...].

    Nothing is written unless every id exists and every display_order in
    the batch is distinct. With `page_type` given, ids outside that page
    scope count as missing.
    """
    if not isinstance(pairs, list):
        raise ValidationError("Reorder payload must be a list of {id, display_order}")
    if not pairs:
        return []

    assert_unique_orders(pairs)

    ids = [pair["id"] for pair in pairs]
    query = scope_query(page_type, entity_id) if page_type else PageSection.query
    sections = query.filter(PageSection.id.in_(ids)).all()
    section_map = {section.id: section for section in sections}

    missing = [section_id for section_id in ids if section_id not in section_map]
    if missing:
        raise NotFoundError(
            f"Unknown section ids: {', '.join(missing)}",
            errors=[{"path": "/", "message": f"Section '{section_id}' not found", "code": "NotFoundError"}
                    for section_id in missing],
        )

    with transactional():
        for pair in pairs:
            section_map[pair["id"]].display_order = coerce_display_order(pair["display_order"])

        first = section_map[ids[0]]
        log_action(
            action="section.reorder",
            entity_type="page",
            entity_id=first.page_type,
            payload={"entity_id": first.entity_id, "count": len(pairs)},
        )

    return [section_map[section_id] for section_id in ids]
