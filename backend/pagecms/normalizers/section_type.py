from pagecms.domain.invariants.content import example_content


def normalize_section_type(section_type, include_schema=True, include_example=False):
    base = {
        "id": section_type.id,
        "slug": section_type.slug,
        "name": section_type.name,
        "description": section_type.description,
        "icon": section_type.icon,
        "is_active": section_type.is_active,
        "allowed_pages": section_type.allowed_pages or [],
    }

    if include_schema:
        base["schema"] = section_type.schema or {}

    if include_example:
        base["example"] = example_content(section_type.schema)

    return base
