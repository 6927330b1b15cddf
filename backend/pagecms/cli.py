# pagecms/cli.py
import json

import click
from flask import current_app
from flask.cli import AppGroup

from pagecms.catalog import DEFAULT_SECTION_TYPES
from pagecms.domain.invariants.exceptions import SectionError
from pagecms.application.sections.registry import seed_default_types
from pagecms.application.sections.store import list_sections
from pagecms.application.sections.import_export import (
    CONFLICT_POLICIES,
    REORDER_STRATEGIES,
    dump_document,
    export_filename,
    export_sections,
    import_sections,
    log_export,
    parse_import_document,
)

sections_cli = AppGroup("sections", help="Manage section types and page sections.")


@sections_cli.command("seed-types")
def seed_types():
    """Create or update the default section-type catalog."""
    count = seed_default_types(DEFAULT_SECTION_TYPES)
    click.echo(f"Seeded {count} section types")


@sections_cli.command("export")
@click.argument("page_type")
@click.option("--entity-id", default=None, help="Scope to one entity of the page type.")
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Target file; defaults to the dated export filename.")
def export_command(page_type, entity_id, output):
    """Write the sections of PAGE_TYPE to a JSON document."""
    sections = list_sections(page_type, entity_id)
    document = export_sections(sections, page_type=page_type, entity_id=entity_id)
    log_export(page_type=page_type, entity_id=entity_id, count=len(sections))

    output = output or export_filename(page_type, entity_id)
    with open(output, "w", encoding="utf-8") as fh:
        fh.write(dump_document(document))

    click.echo(f"Exported {len(sections)} sections to {output}")


@sections_cli.command("import")
@click.argument("page_type")
@click.argument("file", type=click.File("rb"))
@click.option("--entity-id", default=None)
@click.option("--on-conflict", type=click.Choice(CONFLICT_POLICIES), default=None,
              help="Defaults to DEFAULT_ON_CONFLICT.")
@click.option("--reorder-strategy", type=click.Choice(REORDER_STRATEGIES), default=None,
              help="Defaults to DEFAULT_REORDER_STRATEGY.")
@click.option("--no-validate-schemas", is_flag=True, help="Skip content schema checks.")
def import_command(page_type, file, entity_id, on_conflict, reorder_strategy, no_validate_schemas):
    """Import a section document from FILE into PAGE_TYPE."""
    config = current_app.config

    try:
        document = parse_import_document(file.read())
        result = import_sections(
            document,
            page_type=page_type,
            entity_id=entity_id,
            on_conflict=on_conflict or config["DEFAULT_ON_CONFLICT"],
            reorder_strategy=reorder_strategy or config["DEFAULT_REORDER_STRATEGY"],
            validate_schemas=not no_validate_schemas,
            max_sections=config["MAX_SECTIONS_PER_PAGE"],
        )
    except SectionError as exc:
        raise click.ClickException(f"{exc.kind}: {exc.message}") from exc

    click.echo(json.dumps(result, indent=2))
    if not result["success"]:
        raise SystemExit(1)
