from typing import Any, Dict, Iterable, List, Optional
from flask import current_app
from pagecms.extensions import db
from pagecms.models.section_type import SectionType
from pagecms.domain.invariants.exceptions import NotFoundError, ValidationError
from pagecms.utils.transaction import transactional


UPSERT_FIELDS = ("name", "description", "icon", "schema", "is_active", "allowed_pages")


def list_types(page_type: str, *, include_inactive: bool = False) -> List[SectionType]:
    """
    Section types usable on `page_type`, ordered by name.

    Selection UIs want active types only; validation must see inactive ones
    too so that content referencing them stays importable.
    """
    query = SectionType.query
    if not include_inactive:
        query = query.filter_by(is_active=True)

    # allowed_pages is a JSON list; filtered here to stay portable across backends
    return [
        section_type
        for section_type in query.order_by(SectionType.name.asc()).all()
        if section_type.allows_page(page_type)
    ]


def get_type(slug: str) -> Optional[SectionType]:
    return SectionType.query.filter_by(slug=slug).first()


def require_type(slug: str) -> SectionType:
    section_type = get_type(slug)
    if not section_type:
        raise NotFoundError(f"Section type '{slug}' not found")
    return section_type


def upsert_type(data: Dict[str, Any]) -> SectionType:
    slug = data.get("slug")
    if not slug or not data.get("name"):
        raise ValidationError("Section type slug and name are required")

    with transactional():
        section_type = get_type(slug)
        if not section_type:
            section_type = SectionType()
            section_type.slug = slug
            db.session.add(section_type)

        for field in UPSERT_FIELDS:
            if field in data:
                setattr(section_type, field, data[field])

        if section_type.schema is None:
            section_type.schema = {}
        if section_type.allowed_pages is None:
            section_type.allowed_pages = []

    return section_type


def seed_default_types(catalog: Iterable[Dict[str, Any]]) -> int:
    count = 0
    for entry in catalog:
        upsert_type(entry)
        count += 1

    current_app.logger.info(f"Seeded {count} section types")
    return count
