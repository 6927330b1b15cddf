import copy
from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Mapping, Optional
from flask import current_app
from pagecms.extensions import db
from pagecms.models.clipboard_slot import ClipboardSlot
from pagecms.models.page_section import PageSection
from pagecms.domain.invariants.exceptions import NotFoundError
from pagecms.application.sections.store import DEFAULT_MAX_SECTIONS, save_section
from pagecms.utils.transaction import transactional

COPIED_FIELDS = ("section_type", "title", "subtitle", "content", "display_order", "is_active")


class ClipboardStorage(MutableMapping):
    """
    Clipboard storage for one admin in `clipboard_slots` rows, keyed by
    JWT identity. Entry size is bounded by the JSON column, not a cookie.
    """

    def __init__(self, owner_id: str):
        self.owner_id = owner_id

    def _query(self):
        return ClipboardSlot.query.filter_by(owner_id=self.owner_id)

    def __getitem__(self, key: str) -> Any:
        row = self._query().filter_by(slot=key).first()
        if row is None:
            raise KeyError(key)
        return row.payload

    def __setitem__(self, key: str, value: Any) -> None:
        with transactional():
            row = self._query().filter_by(slot=key).first()
            if row is None:
                row = ClipboardSlot()
                row.owner_id = self.owner_id
                row.slot = key
                db.session.add(row)
            row.payload = value

    def __delitem__(self, key: str) -> None:
        with transactional():
            deleted = self._query().filter_by(slot=key).delete()
        if not deleted:
            raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter([row.slot for row in self._query().all()])

    def __len__(self) -> int:
        return self._query().count()


class SectionClipboard:
    """
    Single-slot section clipboard for one admin.

    The slot lives in the `storage` mapping handed in by the caller
    (ClipboardStorage over HTTP, a plain dict elsewhere). Each copy
    overwrites the previous entry.
    """

    SLOT_KEY = "section_clipboard"

    def __init__(self, storage: MutableMapping[str, Any]):
        self._storage = storage

    def copy(self, section: Any) -> Dict[str, Any]:
        if isinstance(section, Mapping):
            entry = {field: section.get(field) for field in COPIED_FIELDS}
            entry["source_page_type"] = section.get("page_type")
            entry["source_entity_id"] = section.get("entity_id")
        else:
            entry = {field: getattr(section, field) for field in COPIED_FIELDS}
            entry["source_page_type"] = section.page_type
            entry["source_entity_id"] = section.entity_id

        self._storage[self.SLOT_KEY] = copy.deepcopy(entry)
        return copy.deepcopy(entry)

    def peek(self) -> Optional[Dict[str, Any]]:
        entry = self._storage.get(self.SLOT_KEY)
        return copy.deepcopy(entry) if entry else None

    def paste(
        self,
        *,
        page_type: str,
        entity_id: Optional[str] = None,
        max_sections: Optional[int] = DEFAULT_MAX_SECTIONS,
    ) -> PageSection:
        """
        Create the copied section at the end of the target page.

        The slot is cleared only once the new section is saved; a failed
        paste (e.g. the page is full) leaves it in place for another try.
        """
        entry = self.peek()
        if not entry:
            raise NotFoundError("Clipboard is empty")

        title = entry.get("title")
        section = save_section(
            {
                "page_type": page_type,
                "entity_id": entity_id,
                "section_type": entry["section_type"],
                "title": f"{title} (copy)" if title else title,
                "subtitle": entry.get("subtitle"),
                "content": entry.get("content") or {},
                "is_active": entry.get("is_active") is not False,
            },
            max_sections=max_sections,
        )

        self.clear()
        current_app.logger.info(
            f"Pasted {entry['section_type']} section from {entry.get('source_page_type')} "
            f"into {page_type}/{entity_id}"
        )
        return section

    def clear(self) -> None:
        self._storage.pop(self.SLOT_KEY, None)
