import pytest

from pagecms.extensions import db
from pagecms.models.audit_log import AuditLog
from pagecms.models.page_section import PageSection
from pagecms.application.sections.registry import upsert_type
from pagecms.domain.invariants.exceptions import (
    CapacityError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from pagecms.application.sections.store import (
    count_sections,
    get_section,
    list_sections,
    remove_section,
    reorder_sections,
    save_section,
)


def orders(page_type="home", entity_id=None):
    return [s.display_order for s in list_sections(page_type, entity_id)]


def test_insert_appends_at_scope_count(make_section):
    first = make_section(title="One")
    second = make_section(title="Two")

    assert (first.display_order, second.display_order) == (0, 1)
    assert [s.id for s in list_sections("home")] == [first.id, second.id]


def test_scopes_are_independent(make_section):
    make_section(title="Home")
    project = make_section(page_type="project", entity_id="proj-1", title="Project")
    make_section(page_type="project", entity_id="proj-2", title="Other project")

    assert [s.id for s in list_sections("project", "proj-1")] == [project.id]
    assert count_sections("project") == 0
    assert project.display_order == 0


def test_ceiling_rejects_insert_without_persisting(make_section):
    for index in range(10):
        make_section(title=f"FAQ {index}")

    with pytest.raises(CapacityError) as excinfo:
        make_section(title="One too many")

    assert isinstance(excinfo.value, ValidationError)
    assert count_sections("home") == 10


def test_custom_ceiling(app):
    save_section({"page_type": "home", "section_type": "faq"}, max_sections=1)

    with pytest.raises(CapacityError):
        save_section({"page_type": "home", "section_type": "faq"}, max_sections=1)


def test_unknown_section_type_is_rejected(app):
    with pytest.raises(ValidationError) as excinfo:
        save_section({"page_type": "home", "section_type": "carousel"})

    assert excinfo.value.errors[0]["code"] == "UnknownSectionType"
    assert PageSection.query.count() == 0


def test_type_must_be_allowed_on_the_page(app):
    # contact-info belongs to the contact page only
    with pytest.raises(ValidationError) as excinfo:
        save_section({"page_type": "home", "section_type": "contact-info"})

    assert excinfo.value.errors[0]["code"] == "UnknownSectionType"
    assert PageSection.query.count() == 0


def test_type_change_is_checked_against_the_page(make_section):
    section = make_section(title="Questions")

    with pytest.raises(ValidationError) as excinfo:
        save_section({"id": section.id, "section_type": "contact-info"})

    assert excinfo.value.errors[0]["code"] == "UnknownSectionType"
    assert get_section(section.id).section_type == "faq"


def test_inactive_type_allowed_on_page_still_saves(app):
    upsert_type({"slug": "faq", "name": "FAQ", "is_active": False})

    section = save_section({"page_type": "home", "section_type": "faq"})

    assert section.section_type == "faq"


def test_content_is_validated_on_save(app):
    with pytest.raises(ValidationError) as excinfo:
        save_section({"page_type": "home", "section_type": "hero", "content": {"cta_text": "Go"}})

    assert excinfo.value.errors[0]["path"] == "/content/headline"


def test_form_names_are_derived_on_save(app):
    section = save_section({
        "page_type": "contact",
        "section_type": "form",
        "content": {"fields": [{"field_type": "text", "label": "Full Name!"}]},
    })

    assert get_section(section.id).content["fields"][0]["name"] == "full_name"


def test_invalid_scalar_fields_are_rejected(app):
    with pytest.raises(ValidationError):
        save_section({"page_type": "home", "section_type": "faq", "display_order": -2})

    with pytest.raises(ValidationError):
        save_section({"page_type": "home", "section_type": "faq", "title": ["x"]})


def test_whole_number_display_order_is_coerced(app):
    section = save_section({"page_type": "home", "section_type": "faq", "display_order": 3.0})
    assert section.display_order == 3
    assert isinstance(section.display_order, int)

    with pytest.raises(ValidationError):
        save_section({"page_type": "home", "section_type": "faq", "display_order": 1.5})


def test_update_touches_only_given_fields(make_section):
    section = make_section("cta", title="Join", subtitle="Now", content={"cta_text": "Go"})

    save_section({"id": section.id, "title": "Join us"})

    updated = get_section(section.id)
    assert updated.title == "Join us"
    assert updated.subtitle == "Now"
    assert updated.content == {"cta_text": "Go"}
    assert updated.display_order == 0


def test_update_unknown_id(app):
    with pytest.raises(NotFoundError):
        save_section({"id": "missing", "title": "x"})


def test_stale_update_conflicts(make_section):
    section = make_section(title="Original")
    seen_at = section.updated_at.isoformat()

    save_section({"id": section.id, "title": "Edited elsewhere"})

    with pytest.raises(ConflictError):
        save_section({"id": section.id, "title": "Mine"}, expected_updated_at=seen_at)

    assert get_section(section.id).title == "Edited elsewhere"


def test_fresh_update_passes_lock(make_section):
    section = make_section(title="Original")

    save_section({"id": section.id, "title": "Mine"}, expected_updated_at=section.updated_at.isoformat())

    assert get_section(section.id).title == "Mine"


def test_remove_is_idempotent(make_section):
    section = make_section()

    assert remove_section(section.id) is True
    assert remove_section(section.id) is False
    assert count_sections("home") == 0


def test_reorder_rewrites_orders(make_section):
    a, b, c = (make_section(title=t) for t in "abc")

    reorder_sections([
        {"id": a.id, "display_order": 2},
        {"id": b.id, "display_order": 0},
        {"id": c.id, "display_order": 1},
    ])

    assert [s.title for s in list_sections("home")] == ["b", "c", "a"]


def test_reorder_accepts_whole_number_floats(make_section):
    a, b = make_section(title="a"), make_section(title="b")

    reorder_sections([{"id": a.id, "display_order": 2.0}, {"id": b.id, "display_order": 0}])

    assert [s.title for s in list_sections("home")] == ["b", "a"]
    assert orders() == [0, 2]


def test_reorder_rejects_duplicate_orders_without_writing(make_section):
    a, b = make_section(title="a"), make_section(title="b")

    with pytest.raises(ValidationError):
        reorder_sections([{"id": a.id, "display_order": 1}, {"id": b.id, "display_order": 1}])

    assert orders() == [0, 1]


def test_reorder_rejects_unknown_ids_without_writing(make_section):
    a = make_section(title="a")
    make_section(title="b")

    with pytest.raises(NotFoundError):
        reorder_sections([{"id": a.id, "display_order": 5}, {"id": "ghost", "display_order": 0}])

    assert orders() == [0, 1]


def test_reorder_scoped_to_page(make_section):
    other = make_section(page_type="about", title="about")

    with pytest.raises(NotFoundError):
        reorder_sections([{"id": other.id, "display_order": 3}], page_type="home")


def test_mutations_are_audited(app, make_section):
    section = make_section(title="a")
    save_section({"id": section.id, "title": "b"})
    remove_section(section.id)

    actions = [log.action for log in AuditLog.query.order_by(AuditLog.created_at).all()]
    assert actions[-3:] == ["section.create", "section.update", "section.delete"]


def test_audit_rows_are_immutable(make_section):
    make_section()
    log = AuditLog.query.first()
    log.action = "tampered"

    with pytest.raises(RuntimeError):
        db.session.commit()
    db.session.rollback()
