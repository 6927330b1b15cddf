def normalize_section(section, admin=False):
    base = {
        "id": section.id,
        "page_type": section.page_type,
        "entity_id": section.entity_id,
        "section_type": section.section_type,
        "title": section.title,
        "subtitle": section.subtitle,
        "content": section.content or {},
        "display_order": section.display_order,
    }

    if admin:
        base["is_active"] = section.is_active
        base["created_at"] = section.created_at.isoformat() if section.created_at else None
        base["updated_at"] = section.updated_at.isoformat() if section.updated_at else None

    return base
