"""Export command implementation."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from lumina.core.export import ENCODERS, ExportWriter, get_encoder
from lumina.session import AuthorSession


def execute_export(
    session: AuthorSession,
    formats: list[str],
    output_dir: Path,
    console: Console,
) -> list[Path]:
    """Write the book in each requested format. Returns the written paths."""
    selected = list(ENCODERS) if not formats or "all" in formats else formats

    try:
        encoders = [get_encoder(name) for name in selected]
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        return []

    writer = ExportWriter(output_dir)
    written: list[Path] = []

    table = Table(title="Export", show_header=True, header_style="bold cyan")
    table.add_column("Format", style="cyan")
    table.add_column("File", style="white")
    table.add_column("Size", justify="right", style="dim")

    for encoder in encoders:
        try:
            path = writer.export(session.book, encoder)
        except OSError as e:
            table.add_row(encoder.format_name, f"[red]✗ {e}[/]", "—")
            continue
        written.append(path)
        table.add_row(encoder.format_name, str(path), f"{path.stat().st_size:,} B")

    console.print(table)
    return written
