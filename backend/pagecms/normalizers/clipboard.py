def normalize_clipboard(entry):
    """Clipboard slot as returned to the admin UI; an empty slot is `{"has_section": false}`."""
    if not entry:
        return {"has_section": False, "section": None}

    return {
        "has_section": True,
        "section": {
            "section_type": entry.get("section_type"),
            "title": entry.get("title"),
            "subtitle": entry.get("subtitle"),
            "content": entry.get("content") or {},
            "is_active": entry.get("is_active") is not False,
        },
        "source_page_type": entry.get("source_page_type"),
        "source_entity_id": entry.get("source_entity_id"),
    }
