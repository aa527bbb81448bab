"""Main CLI application."""

import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from lumina.commands.status import (
    execute_history,
    execute_status,
    resolve_chapter,
    select_chapter,
)
from lumina.config import StudioConfig
from lumina.models.manuscript import BookMetadata, Chapter, CoverFilter, FontFamily, Typography
from lumina.session import MANUAL_SAVE_LABEL, AuthorSession

app = typer.Typer(
    name="lumina",
    help="Write, checkpoint and preview a book manuscript.",
    add_completion=False,
)

console = Console()

chapters_app = typer.Typer(help="Chapter management commands")
app.add_typer(chapters_app, name="chapters")

meta_app = typer.Typer(help="Book metadata commands")
app.add_typer(meta_app, name="meta")

suggest_app = typer.Typer(help="Ask the assistant for layout and cover styles")
app.add_typer(suggest_app, name="suggest")

# Nested settings edited through their own commands
NESTED_METADATA = {"layout_preference", "cover_style"}


def _open(ctx: typer.Context) -> AuthorSession:
    config: StudioConfig = ctx.obj
    return AuthorSession.open(config)


def _edit_target(session: AuthorSession, ref: str) -> Chapter:
    """Resolve ``ref`` for a command that changes the chapter.

    Unlike display commands there is no fallback: an unknown chapter ends the
    command with nothing changed and nothing written.
    """
    chapter = resolve_chapter(session, ref)
    if chapter is None:
        console.print(f"[yellow]No chapter '{ref}', nothing changed[/]")
        raise typer.Exit(0)
    return session.select_chapter(chapter.id)


def _assistant(ctx: typer.Context):
    from lumina.core.gemini import GeminiAssistant

    config: StudioConfig = ctx.obj
    return GeminiAssistant(
        model=config.model,
        refine_model=config.refine_model,
        timeout=config.timeout_seconds,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    data_dir: Annotated[
        Path,
        typer.Option(
            "--dir",
            "-d",
            help="Directory holding the saved session (default: ./.lumina)",
        ),
    ] = Path(".lumina"),
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Write, checkpoint and preview a book manuscript.

    Run without arguments to open the interactive studio.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    ctx.obj = StudioConfig(data_dir=data_dir)

    if ctx.invoked_subcommand is None:
        _run_studio(ctx)


def _run_studio(ctx: typer.Context) -> None:
    from lumina.tui.app import StudioApp

    StudioApp(session=_open(ctx), assistant=_assistant(ctx)).run()


@app.command()
def studio(ctx: typer.Context) -> None:
    """Open the interactive studio (editor, history and page preview)."""
    _run_studio(ctx)


@app.command()
def status(ctx: typer.Context) -> None:
    """Show book information, layout and chapters."""
    execute_status(_open(ctx), console)


@app.command()
def history(
    ctx: typer.Context,
    chapter: Annotated[
        Optional[str],
        typer.Argument(help="Chapter number or id (default: first chapter)"),
    ] = None,
) -> None:
    """List a chapter's revisions, most recent first."""
    execute_history(_open(ctx), chapter, console)


@app.command()
def write(
    ctx: typer.Context,
    chapter: Annotated[str, typer.Argument(help="Chapter number or id")],
    source: Annotated[
        Optional[Path],
        typer.Argument(
            help="Text file with the new content (default: read stdin)",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """Replace a chapter's text."""
    session = _open(ctx)
    target = _edit_target(session, chapter)
    content = source.read_text(encoding="utf-8") if source else sys.stdin.read()

    if not session.edit(content):
        console.print(f"[yellow]'{target.title}' was not updated, nothing changed[/]")
        return
    session.commit()
    console.print(f"[green]✓[/] Updated '{target.title}' ({len(content.split()):,} words)")


@app.command()
def checkpoint(
    ctx: typer.Context,
    chapter: Annotated[str, typer.Argument(help="Chapter number or id")],
    label: Annotated[
        str,
        typer.Option("--label", "-l", help="Why this checkpoint was taken"),
    ] = MANUAL_SAVE_LABEL,
) -> None:
    """Save the chapter's current text as a revision."""
    session = _open(ctx)
    target = _edit_target(session, chapter)
    revision = session.checkpoint(label)
    if revision is None:
        console.print("[yellow]No checkpoint taken, nothing changed[/]")
        return
    session.commit()
    console.print(f"[green]✓[/] Revision [cyan]{revision.id}[/] of '{target.title}' ({label})")
    if len(target.revisions) == session.ledger.capacity:
        console.print(f"[dim]Keeping the {session.ledger.capacity} most recent revisions[/]")


@app.command()
def restore(
    ctx: typer.Context,
    chapter: Annotated[str, typer.Argument(help="Chapter number or id")],
    revision_id: Annotated[str, typer.Argument(help="Revision id (see 'lumina history')")],
) -> None:
    """Put a revision's text back into its chapter.

    The text being replaced is not kept; take a checkpoint first if you may
    want it back.
    """
    session = _open(ctx)
    target = _edit_target(session, chapter)
    outcome = session.restore(revision_id)
    if not outcome:
        console.print(f"[yellow]No revision {revision_id} in '{target.title}', nothing changed[/]")
        return

    session.commit()
    console.print(f"[green]✓[/] Restored revision [cyan]{revision_id}[/] into '{target.title}'")


@chapters_app.command("add")
def chapters_add(ctx: typer.Context) -> None:
    """Append an empty chapter."""
    session = _open(ctx)
    chapter = session.add_chapter()
    session.commit()
    console.print(f"[green]✓[/] Added '{chapter.title}' [dim]({chapter.id})[/]")


@chapters_app.command("rename")
def chapters_rename(
    ctx: typer.Context,
    chapter: Annotated[str, typer.Argument(help="Chapter number or id")],
    title: Annotated[str, typer.Argument(help="New title")],
) -> None:
    """Change a chapter's title."""
    session = _open(ctx)
    _edit_target(session, chapter)
    if not session.rename(title):
        console.print("[yellow]Nothing renamed[/]")
        return
    session.commit()
    console.print(f"[green]✓[/] Renamed to '{title}'")


@meta_app.command("set")
def meta_set(
    ctx: typer.Context,
    pairs: Annotated[
        list[str],
        typer.Argument(help="key=value pairs, e.g. title='My Book' tags=draft,noir"),
    ],
) -> None:
    """Update book metadata fields."""
    updates: dict[str, object] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip().replace("-", "_")
        if not sep or key not in BookMetadata.model_fields or key in NESTED_METADATA:
            console.print(f"[red]Invalid field: {pair}[/]")
            console.print("[dim]Use 'lumina layout' and 'lumina cover' for styles.[/]")
            raise typer.Exit(1)
        if key == "tags":
            updates[key] = [t.strip() for t in value.split(",") if t.strip()]
        else:
            updates[key] = value

    session = _open(ctx)
    try:
        session.store.update_metadata(updates)
    except ValidationError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    session.commit()
    console.print(f"[green]✓[/] Updated {', '.join(updates)}")


@app.command()
def layout(
    ctx: typer.Context,
    font_scale: Annotated[
        Optional[float], typer.Option("--font-scale", min=0.8, max=1.5)
    ] = None,
    margins: Annotated[
        Optional[str], typer.Option("--margins", help="Percentage, e.g. 12%")
    ] = None,
    columns: Annotated[Optional[int], typer.Option("--columns", min=1, max=2)] = None,
    line_height: Annotated[
        Optional[float], typer.Option("--line-height", min=0.1)
    ] = None,
    font_family: Annotated[Optional[FontFamily], typer.Option("--font-family")] = None,
    style_name: Annotated[Optional[str], typer.Option("--style-name")] = None,
    paper_size: Annotated[Optional[str], typer.Option("--paper-size")] = None,
) -> None:
    """Change page layout preferences (only presentation; pages stay the same)."""
    changes = {
        key: value
        for key, value in {
            "font_scale": font_scale,
            "margins": margins,
            "columns": columns,
            "line_height": line_height,
            "font_family": font_family,
            "style_name": style_name,
            "paper_size": paper_size,
        }.items()
        if value is not None
    }
    if not changes:
        console.print("[dim]Nothing to change[/]")
        return

    session = _open(ctx)
    try:
        session.store.update_layout(changes)
    except ValidationError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    session.commit()
    console.print(f"[green]✓[/] Layout updated: {', '.join(changes)}")


@app.command()
def cover(
    ctx: typer.Context,
    typography: Annotated[Optional[Typography], typer.Option("--typography")] = None,
    cover_filter: Annotated[Optional[CoverFilter], typer.Option("--filter")] = None,
    opacity: Annotated[
        Optional[float], typer.Option("--opacity", min=0.0, max=0.8)
    ] = None,
) -> None:
    """Change cover style settings."""
    changes = {
        key: value
        for key, value in {
            "typography": typography,
            "filter": cover_filter,
            "overlay_opacity": opacity,
        }.items()
        if value is not None
    }
    if not changes:
        console.print("[dim]Nothing to change[/]")
        return

    session = _open(ctx)
    session.store.update_cover_style(changes)
    session.commit()
    console.print(f"[green]✓[/] Cover style updated: {', '.join(changes)}")


@app.command()
def preview(
    ctx: typer.Context,
    sheet: Annotated[
        int, typer.Option("--sheet", "-s", min=1, help="Spread number (two pages each)")
    ] = 1,
    zoom: Annotated[float, typer.Option("--zoom", "-z", min=0.5, max=2.0)] = 1.0,
) -> None:
    """Render one spread of the paginated book."""
    from lumina.commands.preview import execute_preview

    execute_preview(_open(ctx), sheet, console, zoom=zoom)


@app.command()
def outline(
    ctx: typer.Context,
    idea: Annotated[str, typer.Argument(help="What the book is about")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Don't ask before replacing chapters")
    ] = False,
) -> None:
    """Generate a chapter outline, replacing all chapters and revisions."""
    from lumina.commands.assist import execute_outline

    if not yes and not typer.confirm(
        "This replaces every chapter and its revisions. Continue?", default=False
    ):
        raise typer.Exit(0)

    session = _open(ctx)
    if not execute_outline(session, _assistant(ctx), idea, console):
        raise typer.Exit(1)
    session.commit()


@app.command()
def refine(
    ctx: typer.Context,
    chapter: Annotated[str, typer.Argument(help="Chapter number or id")],
    instruction: Annotated[str, typer.Argument(help="How to rewrite the chapter")],
) -> None:
    """Rewrite a chapter with the assistant, keeping the original as a revision."""
    from lumina.commands.assist import execute_refine

    session = _open(ctx)
    _edit_target(session, chapter)
    if not execute_refine(session, _assistant(ctx), instruction, console):
        raise typer.Exit(1)
    session.commit()


@app.command()
def muse(
    ctx: typer.Context,
    chapter: Annotated[str, typer.Argument(help="Chapter number or id")],
) -> None:
    """Get a short editorial hint for a chapter."""
    from lumina.commands.assist import execute_muse

    session = _open(ctx)
    select_chapter(session, chapter, console)
    execute_muse(session, _assistant(ctx), console)


@suggest_app.command("layout")
def suggest_layout(ctx: typer.Context) -> None:
    """Apply a layout suggested for the book's genre and description."""
    from lumina.commands.assist import execute_suggest_layout

    session = _open(ctx)
    if not execute_suggest_layout(session, _assistant(ctx), console):
        raise typer.Exit(1)
    session.commit()


@suggest_app.command("cover")
def suggest_cover(ctx: typer.Context) -> None:
    """Apply a cover style suggested for the book."""
    from lumina.commands.assist import execute_suggest_cover

    session = _open(ctx)
    if not execute_suggest_cover(session, _assistant(ctx), console):
        raise typer.Exit(1)
    session.commit()


@app.command()
def export(
    ctx: typer.Context,
    formats: Annotated[
        Optional[list[str]],
        typer.Option(
            "--format",
            "-f",
            help="json, markdown, sla, epub-descriptor or all (repeatable)",
        ),
    ] = None,
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Where to write the files"),
    ] = Path("export"),
) -> None:
    """Export the book."""
    from lumina.commands.export import execute_export

    written = execute_export(_open(ctx), formats or [], output_dir, console)
    if not written:
        raise typer.Exit(1)


@app.command()
def login(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name", "-n", prompt=True)],
    email: Annotated[str, typer.Option("--email", "-e", prompt=True)],
    plan: Annotated[str, typer.Option("--plan", help="free, pro or studio")] = "pro",
) -> None:
    """Create a local author profile and credit it on the book."""
    from lumina.models.session import UserProfile

    if plan not in ("free", "pro", "studio"):
        console.print(f"[red]Invalid plan: {plan}. Use free, pro, or studio.[/]")
        raise typer.Exit(1)

    session = _open(ctx)
    user = UserProfile.local(name=name, email=email, plan=plan)  # type: ignore[arg-type]
    session.sign_in(user)
    session.commit()

    console.print(f"[green]✓[/] Signed in as {user.name} ({user.plan.upper()})")
    if user.trial_ends_at:
        console.print(f"[dim]Trial ends {user.trial_ends_at:%Y-%m-%d}[/]")


@app.command()
def logout(ctx: typer.Context) -> None:
    """Forget the local author profile."""
    session = _open(ctx)
    had_user = session.user is not None
    session.sign_out()
    if had_user:
        console.print("[green]Signed out[/]")
    else:
        console.print("[dim]Nobody is signed in[/]")


if __name__ == "__main__":
    app()
