"""ClinAudit CLI - Command-line interface for the clinical audit tracker."""

import json
import sys
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click
import structlog

from clinaudit.__version__ import __version__
from clinaudit.app.controller import AuditController
from clinaudit.app.state import (
    compute_stats,
    sort_for_display,
    year_cards,
)
from clinaudit.models.audit import AuditRecord
from clinaudit.models.period import month_to_label

# Configure structlog for CLI
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)


@contextmanager
def open_controller(
    year: Optional[str] = None,
) -> Generator[AuditController, None, None]:
    """Build a controller on the configured store and load the collection."""
    from clinaudit.store import create_store

    store = create_store()
    try:
        controller = AuditController(store)
        controller.set_filter(year)
        controller.refresh()
        yield controller
    finally:
        close = getattr(store, "close", None)
        if close is not None:
            close()


def fail(error: Exception) -> None:
    """Report an error and exit with status 1."""
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def echo_audit(audit: AuditRecord) -> None:
    """Print one audit with its history."""
    start = month_to_label(audit.start_period) or "-"
    click.echo(
        f"{click.style(audit.year or '----', bold=True)} | "
        f"{audit.name} | start {start} | {audit.id}"
    )
    if audit.reaudits:
        labels = ", ".join(month_to_label(r.period) for r in audit.reaudits)
        click.echo(f"    Re-audits: {labels}")
    for i, note in enumerate(audit.notes):
        click.echo(
            f"    [{i}] {note.author} ({month_to_label(note.period)}): {note.text}"
        )


@click.group()
@click.version_option(version=__version__, prog_name="clinaudit")
@click.option("--debug/--no-debug", default=False, help="Enable debug output")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """ClinAudit - Clinical audit and re-audit tracker."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug

    if debug:
        import logging

        logging.basicConfig(level=logging.DEBUG)


@cli.command("list")
@click.option("--year", "-y", help="Only show audits for this year")
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def list_audits(year: Optional[str], json_output: bool) -> None:
    """List audits, newest year first.

    Example:
        clinaudit list --year 2024
    """
    try:
        with open_controller(year) as controller:
            items = controller.filtered()
            filter_year = controller.state.filter_year

        if json_output:
            click.echo(json.dumps([item.to_dict() for item in items], indent=2))
            return

        title = f"Audits - {filter_year}" if filter_year else "All Audits"
        click.echo(f"\n📋 {title} ({len(items)})")
        click.echo(f"{'=' * 60}")
        for audit in sort_for_display(items):
            echo_audit(audit)

    except Exception as e:
        fail(e)


@cli.command()
@click.option("--year", "-y", help="Only count audits for this year")
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def stats(year: Optional[str], json_output: bool) -> None:
    """Show audit, re-audit and note totals, with a card per year."""
    try:
        with open_controller(year) as controller:
            totals = compute_stats(controller.filtered())
            cards = year_cards(controller.state.items)
            filter_year = controller.state.filter_year

        if json_output:
            click.echo(json.dumps({"totals": totals, "years": cards}, indent=2))
            return

        heading = f"Audits - {filter_year}" if filter_year else "All Years"
        click.echo(f"\n📊 {heading}")
        click.echo(f"{'=' * 40}")
        click.echo(f"Total Audits: {totals['total_audits']}")
        click.echo(f"Total Re-Audits: {totals['total_reaudits']}")
        click.echo(f"Total Notes: {totals['total_notes']}")
        click.echo("\nBy Year:")
        for card in cards:
            click.echo(
                f"  {card['year']}: {card['audits']} audits "
                f"(Re-audits: {card['reaudits']} • Notes: {card['notes']})"
            )

    except Exception as e:
        fail(e)


@cli.command()
@click.argument("name")
@click.option("--year", "-y", help="Audit year (defaults to the current year)")
@click.option("--start", "-s", default="", help="Start month (YYYY-MM)")
@click.option("--reaudit", "-r", default="", help="First re-audit month (YYYY-MM)")
def add(name: str, year: Optional[str], start: str, reaudit: str) -> None:
    """Add a clinical audit.

    Example:
        clinaudit add "Hand hygiene compliance" --year 2024 --start 2024-03
    """
    from clinaudit.app.state import preferred_year

    try:
        with open_controller() as controller:
            year = year or preferred_year(controller.state.items)
            audit = controller.add_audit(name, year, start, reaudit)

        click.echo(click.style("✓ Audit added", fg="green", bold=True))
        click.echo(f"ID: {audit.id}")

    except Exception as e:
        fail(e)


@cli.command()
@click.argument("audit_id")
@click.argument("month")
def reaudit(audit_id: str, month: str) -> None:
    """Append a re-audit month (YYYY-MM) to an audit."""
    try:
        with open_controller() as controller:
            controller.add_reaudit(audit_id, month)

        click.echo(click.style("✓ Re-audit added", fg="green", bold=True))

    except Exception as e:
        fail(e)


@cli.command()
@click.argument("audit_id")
@click.option("--year", "-y", help="New year (YYYY)")
@click.option("--name", "-n", help="New audit name")
@click.option("--start", "-s", help="New start month (YYYY-MM), empty to clear")
def edit(
    audit_id: str,
    year: Optional[str],
    name: Optional[str],
    start: Optional[str],
) -> None:
    """Edit an audit's year, name or start month."""
    try:
        with open_controller() as controller:
            audit = controller.edit_audit(
                audit_id, year=year, name=name, start_period=start
            )

        click.echo(click.style("✓ Audit updated", fg="green", bold=True))
        echo_audit(audit)

    except Exception as e:
        fail(e)


@cli.command()
@click.argument("audit_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def delete(audit_id: str, yes: bool) -> None:
    """Delete an audit."""
    if not yes and not click.confirm("Delete this audit?"):
        return

    try:
        with open_controller() as controller:
            controller.delete_audit(audit_id)

        click.echo(click.style("✓ Audit deleted", fg="green", bold=True))

    except Exception as e:
        fail(e)


@cli.group()
def note() -> None:
    """Audit note commands."""
    pass


@note.command("add")
@click.argument("audit_id")
@click.argument("text")
@click.option("--author", "-a", required=True, help="Your name")
@click.option("--month", "-m", help="Note month (YYYY-MM), defaults to now")
def note_add(audit_id: str, text: str, author: str, month: Optional[str]) -> None:
    """Add a note to an audit.

    Example:
        clinaudit note add 1718000000000_9f1c2ab3 "Baseline done" -a "Dr. A"
    """
    try:
        with open_controller() as controller:
            controller.add_note(audit_id, author, text, month)

        click.echo(click.style("✓ Note added", fg="green", bold=True))

    except Exception as e:
        fail(e)


@note.command("edit")
@click.argument("audit_id")
@click.argument("index", type=int)
@click.option("--text", "-t", help="New note text")
@click.option("--author", "-a", help="New author")
@click.option("--month", "-m", help="New note month (YYYY-MM)")
def note_edit(
    audit_id: str,
    index: int,
    text: Optional[str],
    author: Optional[str],
    month: Optional[str],
) -> None:
    """Edit the note at INDEX on an audit."""
    try:
        with open_controller() as controller:
            controller.edit_note(
                audit_id, index, author=author, text=text, period=month
            )

        click.echo(click.style("✓ Note updated", fg="green", bold=True))

    except Exception as e:
        fail(e)


@note.command("delete")
@click.argument("audit_id")
@click.argument("index", type=int)
def note_delete(audit_id: str, index: int) -> None:
    """Delete the note at INDEX on an audit."""
    try:
        with open_controller() as controller:
            controller.delete_note(audit_id, index)

        click.echo(click.style("✓ Note deleted", fg="green", bold=True))

    except Exception as e:
        fail(e)


@cli.command()
@click.option("--year", "-y", help="Only export audits for this year")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["json", "csv"]),
    default="json",
    help="Export format",
)
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output file")
@click.option("--stdout", "to_stdout", is_flag=True, help="Write to standard output")
def export(
    year: Optional[str],
    fmt: str,
    output: Optional[Path],
    to_stdout: bool,
) -> None:
    """Export the (filtered) audit list as JSON or CSV.

    Example:
        clinaudit export --year 2024 --format csv
    """
    from clinaudit.export import export_filename, render

    try:
        with open_controller(year) as controller:
            text = render(controller.filtered(), fmt)
            filter_year = controller.state.filter_year

        if to_stdout:
            click.echo(text, nl=False)
            return

        path = output or Path(export_filename(filter_year, fmt))
        path.write_text(text, encoding="utf-8")
        click.echo(f"✓ Exported to {path}")

    except Exception as e:
        fail(e)


@cli.command()
@click.option("--host", "-h", help="Host to bind to")
@click.option("--port", "-p", type=int, help="Port to bind to")
@click.option("--reload/--no-reload", default=False, help="Enable auto-reload")
def serve(host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Serve the list/replace_all endpoint.

    Example:
        clinaudit serve --port 8000
    """
    import uvicorn

    from clinaudit.config import get_settings

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    click.echo(f"🚀 Starting ClinAudit endpoint on {host}:{port}")
    click.echo(f"   Store URL: http://{host}:{port}/exec")

    uvicorn.run(
        "clinaudit.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command()
def config() -> None:
    """Show current configuration."""
    from clinaudit.config import get_settings

    settings = get_settings()

    click.echo("\n⚙️ ClinAudit Configuration")
    click.echo(f"{'=' * 40}")
    click.echo(f"Version: {__version__}")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Debug: {settings.debug}")
    click.echo("\nStore:")
    click.echo(f"  Backend: {settings.store.backend}")
    click.echo(f"  Endpoint: {settings.store.endpoint or '(not set)'}")
    click.echo(f"  Local file: {settings.store.local_path}")
    click.echo(f"  Storage key: {settings.store.storage_key}")
    click.echo(f"\nDatabase: {settings.database.url[:50]}")


def main() -> None:
    """Entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
