import json
from datetime import date, datetime, timezone

import pytest

from pagecms.domain.invariants.exceptions import ParseError, ValidationError
from pagecms.models.audit_log import AuditLog
from pagecms.application.sections.store import list_sections, save_section
from pagecms.application.sections.import_export import (
    dump_document,
    export_filename,
    export_sections,
    import_sections,
    merge_content,
    parse_import_document,
)

HERO = {"section_type": "hero", "title": "Welcome", "content": {"headline": "Build faster"}}
FAQ = {"section_type": "faq", "title": "Questions", "content": {"items": [{"question": "Why?", "answer": "Because"}]}}
CTA = {"section_type": "cta", "title": "Join Now", "content": {"cta_text": "Go"}}

COUNT_KEYS = ("success", "total", "imported", "skipped", "overwritten", "failed")


def counts(result):
    return {key: result[key] for key in COUNT_KEYS}


def document(*sections, **extra):
    return {"version": "1.0", "entity_type": "page_section", "sections": list(sections), **extra}


def comparable(sections):
    return [
        (s.section_type, s.title, s.subtitle, s.content, s.display_order, s.is_active)
        for s in sections
    ]


# ------------------------
# Export
# ------------------------

def test_export_strips_store_fields(make_section):
    make_section("hero", title="Welcome", content={"headline": "Hi"})
    exported_at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    doc = export_sections(list_sections("home"), page_type="home", exported_at=exported_at)

    assert doc["version"] == "1.0"
    assert doc["entity_type"] == "page_section"
    assert doc["exported_at"] == "2024-05-01T12:00:00+00:00"
    assert doc["source_page_type"] == "home"
    assert doc["source_entity_id"] is None
    assert doc["sections"] == [{
        "section_type": "hero",
        "title": "Welcome",
        "subtitle": None,
        "content": {"headline": "Hi"},
        "display_order": 0,
        "is_active": True,
    }]


def test_export_filename():
    assert export_filename("home", today=date(2024, 5, 1)) == "page-sections-home-2024-05-01.json"
    assert (
        export_filename("project", "0f8a9c12-aaaa", today=date(2024, 5, 1))
        == "page-sections-project-0f8a9c12-2024-05-01.json"
    )


def test_dump_and_parse_document():
    doc = document(dict(HERO))
    assert parse_import_document(dump_document(doc).encode("utf-8")) == doc


@pytest.mark.parametrize("raw", ["not json", "[]", '{"sections": {}}', b"\xff\xfe\x00"])
def test_parse_rejects_bad_files(raw):
    with pytest.raises(ParseError):
        parse_import_document(raw)


# ------------------------
# Import
# ------------------------

def test_round_trip_into_empty_page(make_section):
    make_section("hero", title="Welcome", content={"headline": "Hi"})
    make_section("faq", title="FAQ", subtitle="Ask", content={"items": [{"question": "Q", "answer": "A"}]})
    make_section("cta", title="Join", content={"cta_text": "Go"}, is_active=False)
    source = list_sections("home")

    doc = json.loads(dump_document(export_sections(source, page_type="home")))
    result = import_sections(doc, page_type="about", on_conflict="overwrite", reorder_strategy="preserve")

    assert counts(result) == {
        "success": True, "total": 3, "imported": 3, "skipped": 0, "overwritten": 0, "failed": 0,
    }
    assert comparable(list_sections("about")) == comparable(source)
    assert [w["code"] for w in result["warnings"]] == ["PageTypeMismatch"]


def test_skip_is_idempotent(app):
    doc = document(dict(HERO), dict(FAQ))

    first = import_sections(doc, page_type="home", on_conflict="skip")
    second = import_sections(doc, page_type="home", on_conflict="skip")

    assert (first["imported"], first["skipped"]) == (2, 0)
    assert (second["imported"], second["skipped"]) == (0, 2)
    assert second["total"] == 2
    assert len(list_sections("home")) == 2


def test_three_section_append_scenario(app):
    doc = document(dict(HERO), dict(FAQ), dict(FAQ))

    result = import_sections(doc, page_type="home", on_conflict="skip", reorder_strategy="append")

    assert counts(result) == {
        "success": True, "total": 3, "imported": 3, "skipped": 0, "overwritten": 0, "failed": 0,
    }
    assert [s.display_order for s in list_sections("home")] == [0, 1, 2]


def test_append_goes_after_existing_max(make_section):
    make_section(title="existing", display_order=4)

    import_sections(document(dict(HERO)), page_type="home")

    assert [(s.title, s.display_order) for s in list_sections("home")] == [("existing", 4), ("Welcome", 5)]


def test_overwrite_keeps_identity_and_order(make_section):
    existing = make_section("cta", title="Join Now", subtitle="old", content={"cta_text": "Go", "cta_link": "/x"},
                            display_order=3)

    incoming = {"section_type": "cta", "title": "Join Now", "subtitle": None, "display_order": 0,
                "content": {"cta_text": "Go Now"}}
    result = import_sections(document(incoming), page_type="home", on_conflict="overwrite",
                             reorder_strategy="preserve")

    sections = list_sections("home")
    assert counts(result)["overwritten"] == 1
    assert [s.id for s in sections] == [existing.id]
    assert sections[0].display_order == 3
    assert sections[0].content == {"cta_text": "Go Now"}
    assert sections[0].subtitle is None


def test_merge_scenario(make_section):
    existing = make_section("cta", title="Join Now", content={"cta_text": "Go"}, display_order=2)

    incoming = {"section_type": "cta", "title": "Join Now", "content": {"cta_text": "Go Now", "extra": "x"}}
    result = import_sections(document(incoming), page_type="home", on_conflict="merge")

    section = list_sections("home")[0]
    assert result["overwritten"] == 1
    assert section.id == existing.id
    assert section.content == {"cta_text": "Go Now", "extra": "x"}
    assert section.display_order == 2


def test_merge_is_key_wise():
    assert merge_content({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}
    assert merge_content(None, {"c": 4}) == {"c": 4}
    assert merge_content({"a": 1}, None) == {"a": 1}


def test_conflicts_match_on_type_and_title(make_section):
    make_section("faq", title="Questions")

    result = import_sections(
        document(dict(FAQ, title="Other questions"), dict(CTA, title="Questions")),
        page_type="home",
    )

    assert result["imported"] == 2
    assert result["skipped"] == 0


def test_untitled_sections_conflict_with_each_other(make_section):
    make_section("divider")

    result = import_sections(document({"section_type": "divider"}), page_type="home")

    assert result["skipped"] == 1


def test_renumber_is_dense(make_section):
    make_section(title="a", display_order=3)
    make_section(title="b", display_order=7)

    result = import_sections(
        document(dict(HERO, display_order=0), dict(CTA, display_order=0)),
        page_type="home",
        reorder_strategy="renumber",
    )

    sections = list_sections("home")
    assert result["imported"] == 2
    assert [s.display_order for s in sections] == [0, 1, 2, 3]
    assert [s.title for s in sections] == ["a", "b", "Welcome", "Join Now"]


def test_preserve_keeps_document_orders(app):
    import_sections(
        document(dict(HERO, display_order=5), dict(FAQ, display_order=2)),
        page_type="home",
        reorder_strategy="preserve",
    )

    assert [(s.section_type, s.display_order) for s in list_sections("home")] == [("faq", 2), ("hero", 5)]


def test_preserve_coerces_whole_number_orders(app):
    result = import_sections(document(dict(FAQ, display_order=1.0)), page_type="home", reorder_strategy="preserve")

    assert result["success"] is True
    assert [s.display_order for s in list_sections("home")] == [1]
    assert isinstance(list_sections("home")[0].display_order, int)


def test_invalid_document_is_rejected_before_writing(app):
    doc = document(dict(HERO), {"section_type": "does-not-exist"}, dict(CTA))

    result = import_sections(doc, page_type="home")

    assert counts(result) == {
        "success": False, "total": 0, "imported": 0, "skipped": 0, "overwritten": 0, "failed": 0,
    }
    assert result["errors"][0]["sectionIndex"] == 1
    assert list_sections("home") == []


def test_capacity_failures_are_counted_per_section(make_section):
    for index in range(9):
        make_section(title=f"FAQ {index}")

    result = import_sections(document(dict(HERO), dict(CTA)), page_type="home")

    assert counts(result) == {
        "success": False, "total": 2, "imported": 1, "skipped": 0, "overwritten": 0, "failed": 1,
    }
    assert result["errors"][0]["sectionIndex"] == 1
    assert len(list_sections("home")) == 10


def test_counts_always_add_up(make_section):
    make_section("faq", title="Questions")
    for index in range(8):
        make_section("divider", title=f"d{index}")

    result = import_sections(
        document(dict(FAQ), dict(HERO), dict(CTA)),
        page_type="home",
        on_conflict="overwrite",
    )

    assert result["imported"] + result["skipped"] + result["overwritten"] + result["failed"] == result["total"]
    assert (result["overwritten"], result["imported"], result["failed"]) == (1, 1, 1)


def test_schema_validation_can_be_skipped(app):
    doc = document({"section_type": "hero", "title": "No headline", "content": {}})

    rejected = import_sections(doc, page_type="home")
    accepted = import_sections(doc, page_type="home", validate_schemas=False)

    assert rejected["success"] is False
    assert accepted["imported"] == 1


def test_invalid_options(app):
    with pytest.raises(ValidationError):
        import_sections(document(), page_type="home", on_conflict="replace")

    with pytest.raises(ValidationError):
        import_sections(document(), page_type="home", reorder_strategy="shuffle")


def test_import_is_audited(app):
    import_sections(document(dict(HERO)), page_type="home", entity_id=None)

    log = AuditLog.query.filter_by(action="section.import").one()
    assert log.entity_id == "home"
    assert log.to_dict()["payload"]["imported"] == 1


def test_imports_land_in_entity_scope(app):
    save_section({"page_type": "project", "entity_id": "p-1", "section_type": "faq", "title": "Questions"})

    result = import_sections(document(dict(FAQ)), page_type="project", entity_id="p-2")

    assert result["imported"] == 1
    assert len(list_sections("project", "p-2")) == 1
