"""
Main application entry point for the email builder.

Provides CLI interface for rendering, sharing and managing email documents.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from email_builder.core.config import configuration_summary, get_settings, validate_required_settings
from email_builder.core.exceptions import ConfigurationError, DocumentValidationError, EmailBuilderError
from email_builder.core.logging import set_correlation_id, setup_logging
from email_builder.editor.configuration import SAMPLES, encode_configuration_hash, get_configuration, load_sample

console = Console()


def _load_document(path: str) -> dict:
    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise click.BadParameter("Document must be a JSON object", param_hint="DOCUMENT")
    return document


def _write_output(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Saved to: {output}[/green]")
    else:
        click.echo(text)


def _print_validation_errors(error: DocumentValidationError) -> None:
    table = Table(title="Validation Errors")
    table.add_column("Path", style="cyan")
    table.add_column("Message", style="white")
    for err in error.errors:
        table.add_row(err.get("path", ""), err.get("message", ""))
    console.print(table)


def _fail(label: str, error: Exception, ctx: click.Context) -> None:
    console.print(f"[red]{label}:[/red] {error}")
    if ctx.obj and ctx.obj.get("debug"):
        import traceback

        console.print(traceback.format_exc())
    sys.exit(1)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--correlation-id", help="Set correlation ID for request tracing")
@click.pass_context
def main(ctx, debug: bool, correlation_id: Optional[str]):
    """Block-based email builder.

    Renders email documents to static HTML, produces share links and
    manages templates stored behind the templates API.
    """
    ctx.ensure_object(dict)

    setup_logging(debug=debug, rich_output=True)

    if correlation_id:
        set_correlation_id(correlation_id)

    ctx.obj["debug"] = debug
    ctx.obj["correlation_id"] = correlation_id


@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option("--root", "root_block_id", default="root", help="Block id to start rendering from")
@click.option("--editor", is_flag=True, help="Render the editor canvas instead of the email")
@click.option("--selected", "selected_block_id", help="Selected block id (editor canvas only)")
@click.option(
    "--screen-size",
    type=click.Choice(["desktop", "mobile"]),
    default="desktop",
    help="Canvas width (editor canvas only)",
)
@click.option("--output", help="Output file path (optional)")
@click.pass_context
def render(
    ctx,
    document: str,
    root_block_id: str,
    editor: bool,
    selected_block_id: Optional[str],
    screen_size: str,
    output: Optional[str],
):
    """Render a document JSON file to HTML."""
    from email_builder.renderers.editor import render_editor_markup
    from email_builder.renderers.reader import render_to_static_markup

    try:
        data = _load_document(document)
        if editor:
            html = render_editor_markup(
                data,
                selected_block_id=selected_block_id,
                screen_size=screen_size,
                root_block_id=root_block_id,
            )
        else:
            html = render_to_static_markup(data, root_block_id=root_block_id)
        _write_output(html, output)
        sys.exit(0)

    except DocumentValidationError as e:
        console.print(f"[red]Invalid Document:[/red] {e}")
        _print_validation_errors(e)
        sys.exit(1)
    except (EmailBuilderError, ValueError) as e:
        _fail("Render Error", e, ctx)


@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx, document: str):
    """Check a document against the block schemas."""
    from email_builder.document.core import validate_document
    from email_builder.renderers.reader import ReaderDocumentSchema

    try:
        blocks = validate_document(ReaderDocumentSchema, _load_document(document))
        console.print(f"[green]✅ Document is valid[/green] ({len(blocks)} blocks)")
        sys.exit(0)

    except DocumentValidationError as e:
        console.print(f"[red]❌ {e}[/red]")
        _print_validation_errors(e)
        sys.exit(1)
    except ValueError as e:
        _fail("Validation Error", e, ctx)


@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option("--base-url", default="", help="Editor URL to prefix the hash with")
@click.pass_context
def share(ctx, document: str, base_url: str):
    """Print a shareable #code/ link for a document."""
    try:
        click.echo(base_url + encode_configuration_hash(_load_document(document)))
    except ValueError as e:
        _fail("Share Error", e, ctx)


@main.command()
@click.argument("name", type=click.Choice(sorted(SAMPLES)))
@click.option("--output", help="Output file path (optional)")
def sample(name: str, output: Optional[str]):
    """Dump a bundled sample document as JSON."""
    _write_output(json.dumps(load_sample(name), indent=2), output)


@main.command()
@click.argument("hash_value", metavar="HASH")
@click.option("--output", help="Output file path (optional)")
def resolve(hash_value: str, output: Optional[str]):
    """Resolve an editor URL hash (#sample/, #code/) to its document."""
    _write_output(json.dumps(get_configuration(hash_value), indent=2), output)


@main.command()
@click.option("--host", help="Bind address (default: HOST)")
@click.option("--port", type=int, help="Port (default: PORT)")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int]):
    """Run the templates API server."""
    from email_builder.api.server import run

    try:
        run(host=host, port=port)
    except ConfigurationError as e:
        console.print("[red]Configuration Error:[/red]")
        for item in e.details.get("missing", []):
            console.print(f"  • Missing: {item}")
        sys.exit(1)


@main.command("db-check")
@click.pass_context
def db_check(ctx):
    """Check database connectivity and the templates table."""
    from email_builder.api.db import create_engine_for_url, init_db
    from email_builder.api.store import TemplateStore

    settings = get_settings()
    try:
        console.print("[blue]Checking database...[/blue]")
        engine = create_engine_for_url(settings.database.url, settings.database.echo)
        init_db(engine)
        store = TemplateStore(engine)
        store.ping()

        table = Table(title="Database Check")
        table.add_column("Check", style="cyan")
        table.add_column("Result", style="white")
        table.add_row("Connection", "[green]✅ Connected[/green]")
        table.add_row("Active templates", str(store.count()))
        table.add_row("All templates", str(store.count(include_inactive=True)))
        console.print(table)
        engine.dispose()
        sys.exit(0)

    except Exception as e:
        _fail("Database Error", e, ctx)


@main.command()
def config():
    """Display current configuration."""
    console.print("[blue]Email Builder Configuration[/blue]")

    missing = validate_required_settings("server") + validate_required_settings("client")
    if missing:
        console.print("[red]⚠️  Configuration Issues:[/red]")
        for item in missing:
            console.print(f"  • Missing: {item}")
    else:
        console.print("[green]✅ Configuration Valid[/green]")

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    for key, value in configuration_summary().items():
        table.add_row(key, value)
    console.print(table)

    sys.exit(0 if not missing else 1)


@main.group()
def templates():
    """Manage templates stored behind the templates API."""
    pass


@templates.command("list")
@click.option("--api-url", help="Templates API URL (default: EMAIL_BUILDER_API_URL)")
@click.pass_context
def list_templates(ctx, api_url: Optional[str]):
    """List active templates."""
    from email_builder.client import TemplatesClient

    try:
        with TemplatesClient(api_url=api_url) as client:
            items = client.fetch_templates()

        if not items:
            console.print("[yellow]No templates found[/yellow]")
            sys.exit(0)

        table = Table(title=f"Templates ({len(items)})")
        table.add_column("Slug", style="cyan")
        table.add_column("Name", style="white")
        table.add_column("Updated", style="dim")
        for item in items:
            table.add_row(item["slug"], item["name"], item.get("updated_at", ""))
        console.print(table)
        sys.exit(0)

    except EmailBuilderError as e:
        _fail("API Error", e, ctx)


@templates.command("export")
@click.argument("slug")
@click.option("--api-url", help="Templates API URL (default: EMAIL_BUILDER_API_URL)")
@click.option("--html", "as_html", is_flag=True, help="Export rendered HTML instead of the JSON document")
@click.option("--output", help="Output file path (optional)")
@click.pass_context
def export_template(ctx, slug: str, api_url: Optional[str], as_html: bool, output: Optional[str]):
    """Export a stored template's document."""
    from email_builder.client import TemplatesClient
    from email_builder.renderers.reader import render_to_static_markup

    try:
        with TemplatesClient(api_url=api_url) as client:
            document = client.fetch_template(slug)["configuration"]

        if as_html:
            _write_output(render_to_static_markup(document), output)
        else:
            _write_output(json.dumps(document, indent=2), output)
        sys.exit(0)

    except EmailBuilderError as e:
        _fail("Export Error", e, ctx)


if __name__ == "__main__":
    main()
