"""
Terminal rendering of the catalog with rich.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .base import CatalogSection, ImageRecord
from .memory import Catalog

PROMPT_PREVIEW = 80


def _preview(text: str, limit: int = PROMPT_PREVIEW) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def render_section(section: CatalogSection, console: Console, show_raw: bool = False) -> None:
    """Render one section: a diagnostic line or a table of its records."""
    if section.content.kind == "text":
        console.print(f"[bold]{escape(section.title)}[/] [dim]#{section.anchor}[/]")
        console.print(Text(f"  {section.content.text}", style="red"))
        return

    table = Table(title=f"{escape(section.title)} [dim]#{section.anchor}[/]", title_justify="left")
    table.add_column("Anchor", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Model")
    table.add_column("Seed")
    table.add_column("Sampler")
    table.add_column("Steps")
    table.add_column("Scale")
    table.add_column("Prompt", style="green")
    if show_raw:
        table.add_column("Raw metadata")

    for record in section.records:
        tags = record.tags
        row = [
            record.anchor,
            record.filename,
            tags.model,
            tags.seed,
            tags.sampler,
            tags.steps,
            tags.scale,
            _preview(tags.prompt),
        ]
        if show_raw:
            row.append(record.raw_metadata_text)
        table.add_row(*(Text(value) for value in row))

    console.print(table)
    if not section.records:
        console.print("  [yellow]No images found[/]")


def render_catalog(catalog: Catalog, console: Console, show_raw: bool = False) -> None:
    """Render every section in registration order."""
    for section in catalog.sections:
        render_section(section, console, show_raw=show_raw)
        console.print()


def render_record_detail(record: ImageRecord, console: Console) -> None:
    """Render the detail view of one record."""
    tags = record.tags
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Archive", Text(record.archive_name))
    table.add_row("File", Text(record.filename))
    table.add_row("Anchor", record.anchor)
    table.add_row("Size", f"{record.display_resource.size} bytes ({record.display_resource.media_type})")
    table.add_row("Model", Text(tags.model))
    table.add_row("Prompt", Text(tags.prompt))
    table.add_row("Negative prompt", Text(tags.negative_prompt))
    table.add_row(
        "Parameters",
        Text(f"Seed: {tags.seed}, Sampler: {tags.sampler}, Steps: {tags.steps}, Scale: {tags.scale}"),
    )

    console.print(Panel(table, title=escape(record.filename), title_align="left"))
    if record.raw_metadata_text:
        console.print(Panel(Text(record.raw_metadata_text), title="Metadata", title_align="left"))
