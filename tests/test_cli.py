import json

from pagecms.models.section_type import SectionType
from pagecms.application.sections.store import list_sections, save_section


def test_seed_types_is_repeatable(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["sections", "seed-types"])
    second = runner.invoke(args=["sections", "seed-types"])

    assert first.exit_code == 0
    assert "Seeded" in second.output
    assert SectionType.query.filter_by(slug="hero").count() == 1


def test_export_then_import(app, tmp_path):
    save_section({"page_type": "home", "section_type": "cta", "title": "Join", "content": {"cta_text": "Go"}})
    target = tmp_path / "home.json"
    runner = app.test_cli_runner()

    exported = runner.invoke(args=["sections", "export", "home", "--output", str(target)])
    assert exported.exit_code == 0, exported.output
    assert json.loads(target.read_text())["sections"][0]["title"] == "Join"

    imported = runner.invoke(args=[
        "sections", "import", "about", str(target), "--on-conflict", "skip", "--reorder-strategy", "renumber",
    ])
    assert imported.exit_code == 0, imported.output
    assert [s.title for s in list_sections("about")] == ["Join"]


def test_import_rejects_bad_file(app, tmp_path):
    target = tmp_path / "broken.json"
    target.write_text("{nope")

    result = app.test_cli_runner().invoke(args=["sections", "import", "home", str(target)])

    assert result.exit_code == 1
    assert "ParseError" in result.output
