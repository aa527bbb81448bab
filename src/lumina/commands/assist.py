"""Writing-assistant command implementations."""

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from lumina.core.collaborators import CollaboratorError
from lumina.core.gemini import GeminiAssistant
from lumina.session import AuthorSession


def _spinner(console: Console) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )


def _report_failure(e: CollaboratorError, console: Console) -> None:
    console.print(f"[red]Assistant error:[/] {e.message}")
    console.print("[dim]Your manuscript was not changed.[/]")


def execute_outline(
    session: AuthorSession,
    assistant: GeminiAssistant,
    idea: str,
    console: Console,
) -> bool:
    """Replace the book with a generated outline. Returns True on success."""
    try:
        with _spinner(console) as progress:
            progress.add_task("Drafting outline...", total=None)
            book = session.apply_outline(assistant, idea)
    except CollaboratorError as e:
        _report_failure(e, console)
        return False

    table = Table(title=book.metadata.title, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Chapter", style="white")
    table.add_column("Id", style="dim")
    for number, chapter in enumerate(book.chapters, 1):
        table.add_row(str(number), chapter.title, chapter.id)

    console.print(Panel(book.metadata.description, title="Plot", border_style="blue"))
    console.print(table)
    console.print("[yellow]Previous chapters and revisions were replaced.[/]")
    return True


def execute_refine(
    session: AuthorSession,
    assistant: GeminiAssistant,
    instruction: str,
    console: Console,
) -> bool:
    """Rewrite the active chapter following ``instruction``."""
    chapter = session.active_chapter
    try:
        with _spinner(console) as progress:
            progress.add_task(f"Refining '{chapter.title}'...", total=None)
            outcome = session.refine(assistant, instruction)
    except CollaboratorError as e:
        _report_failure(e, console)
        return False

    if not outcome:
        console.print(f"[red]Nothing refined: {outcome.reason}[/]")
        return False

    revision = session.active_chapter.revisions[0]
    console.print(f"[green]✓[/] Refined '{chapter.title}'")
    console.print(f"[dim]Previous text kept as revision {revision.id} ({revision.label})[/]")
    return True


def execute_suggest_layout(
    session: AuthorSession,
    assistant: GeminiAssistant,
    console: Console,
) -> bool:
    try:
        with _spinner(console) as progress:
            progress.add_task("Asking for a layout...", total=None)
            session.suggest_layout(assistant)
    except CollaboratorError as e:
        _report_failure(e, console)
        return False

    layout = session.book.metadata.layout_preference
    console.print(
        Panel(
            f"[dim]Paper:[/] {layout.paper_size}\n"
            f"[dim]Font:[/] {layout.font_family.value} x{layout.font_scale:.2f}\n"
            f"[dim]Line height:[/] {layout.line_height}\n"
            f"[dim]Margins:[/] {layout.margins}   [dim]Columns:[/] {layout.columns}",
            title=f"Layout: {layout.style_name}",
            border_style="green",
        )
    )
    return True


def execute_suggest_cover(
    session: AuthorSession,
    assistant: GeminiAssistant,
    console: Console,
) -> bool:
    try:
        with _spinner(console) as progress:
            progress.add_task("Asking for a cover style...", total=None)
            session.suggest_cover_style(assistant)
    except CollaboratorError as e:
        _report_failure(e, console)
        return False

    style = session.book.metadata.cover_style
    console.print(
        f"[green]✓[/] Cover style: {style.typography.value} type, "
        f"{style.filter.value} filter, overlay {style.overlay_opacity:.2f}"
    )
    return True


def execute_muse(
    session: AuthorSession,
    assistant: GeminiAssistant,
    console: Console,
) -> None:
    """Print a short editorial hint for the active chapter."""
    chapter = session.active_chapter
    if len(chapter.content) <= assistant.MUSE_MIN_CHARS:
        console.print("[dim]Write a little more before asking the muse.[/]")
        return

    try:
        with _spinner(console) as progress:
            progress.add_task("Reading your chapter...", total=None)
            hint = assistant.muse(chapter.content, session.book.metadata.genre)
    except CollaboratorError as e:
        console.print(f"[red]Assistant error:[/] {e.message}")
        return

    console.print(Panel(hint, title="Muse", border_style="magenta"))
