"""Status and history command implementations."""

from dataclasses import dataclass

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lumina.core.content_processor import ContentProcessor
from lumina.models.manuscript import Chapter
from lumina.session import AuthorSession


@dataclass
class ChapterStatus:
    """Summary of a single chapter."""

    number: int
    chapter_id: str
    title: str
    word_count: int
    paragraph_count: int
    revision_count: int
    is_active: bool


def resolve_chapter(session: AuthorSession, ref: str) -> Chapter | None:
    """Find the chapter named by ``ref``, a 1-based number or a chapter id."""
    chapters = session.book.chapters
    if ref.isdigit() and 1 <= int(ref) <= len(chapters):
        return chapters[int(ref) - 1]
    return session.store.find_chapter(ref)


def select_chapter(session: AuthorSession, ref: str | None, console: Console) -> Chapter:
    """Make the chapter named by ``ref`` active for display.

    Unknown references fall back to the first chapter. Commands that change
    a chapter use ``resolve_chapter`` instead.
    """
    if ref is None:
        return session.active_chapter

    found = resolve_chapter(session, ref)
    chapter = session.select_chapter(found.id if found else ref)
    if found is None:
        console.print(f"[dim]No chapter '{ref}', using '{chapter.title}'[/]")
    return chapter


def get_chapter_statuses(session: AuthorSession) -> list[ChapterStatus]:
    processor = ContentProcessor()
    active_id = session.active_chapter.id
    result = []
    for number, chapter in enumerate(session.book.chapters, 1):
        stats = processor.get_stats(chapter.content)
        result.append(
            ChapterStatus(
                number=number,
                chapter_id=chapter.id,
                title=chapter.title,
                word_count=stats["word_count"],
                paragraph_count=stats["paragraph_count"],
                revision_count=len(chapter.revisions),
                is_active=chapter.id == active_id,
            )
        )
    return result


def display_status(session: AuthorSession, console: Console) -> None:
    """Display book information, chapters and preview size."""
    book = session.book
    meta = book.metadata
    layout = meta.layout_preference
    pages = session.pages()
    statuses = get_chapter_statuses(session)

    saved_str = book.last_saved.strftime("%Y-%m-%d %H:%M") if book.last_saved else "Never"
    user_str = (
        f"{session.user.name} <{session.user.email}> ({session.user.plan.upper()})"
        if session.user
        else "[dim]Not signed in[/]"
    )
    tags_str = ", ".join(meta.tags) if meta.tags else "—"

    console.print()
    console.print(
        Panel(
            f"[bold]{meta.title}[/]\n\n"
            f"[dim]Author:[/] {meta.author or 'Unknown'}\n"
            f"[dim]Genre:[/] {meta.genre or '—'}   [dim]Language:[/] {meta.language or '—'}\n"
            f"[dim]Tags:[/] {tags_str}\n"
            f"[dim]Last saved:[/] {saved_str}\n"
            f"[dim]User:[/] {user_str}",
            title="Book Information",
            border_style="green",
        )
    )

    console.print()
    console.print(
        Panel(
            f"[dim]Style:[/] {layout.style_name} ({layout.paper_size})\n"
            f"[dim]Font:[/] {layout.font_family.value} x{layout.font_scale:.2f}, "
            f"line height {layout.line_height}\n"
            f"[dim]Margins:[/] {layout.margins}   [dim]Columns:[/] {layout.columns}\n"
            f"[dim]Preview:[/] {pages.page_count} page(s), {pages.sheet_count} spread(s)",
            title="Layout",
            border_style="cyan",
        )
    )

    console.print()
    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white", max_width=40)
    table.add_column("Id", style="dim")
    table.add_column("Words", justify="right", style="dim")
    table.add_column("Paragraphs", justify="right", style="dim")
    table.add_column("Revisions", justify="right", style="yellow")

    for status in statuses:
        display_title = status.title[:37] + "..." if len(status.title) > 40 else status.title
        if status.is_active:
            display_title = f"[bold]{display_title}[/] [green]●[/]"
        table.add_row(
            str(status.number),
            display_title,
            status.chapter_id,
            f"{status.word_count:,}" if status.word_count else "—",
            str(status.paragraph_count) if status.paragraph_count else "—",
            str(status.revision_count) if status.revision_count else "—",
        )

    table.add_section()
    table.add_row(
        "",
        "[bold]Total[/]",
        "",
        f"[bold]{sum(s.word_count for s in statuses):,}[/]",
        "",
        f"[bold]{sum(s.revision_count for s in statuses)}[/]",
    )
    console.print(table)
    console.print()


def display_history(chapter: Chapter, console: Console) -> None:
    """Display a chapter's revisions, most recent first."""
    if not chapter.revisions:
        console.print(f"[dim]No revisions yet for '{chapter.title}'[/]")
        return

    table = Table(
        title=f"Revisions of {chapter.title}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Saved", style="dim", no_wrap=True)
    table.add_column("Label", style="white", max_width=40)
    table.add_column("Words", justify="right", style="dim")
    table.add_column("Preview", style="dim", max_width=40)

    for revision in chapter.revisions:
        preview = revision.content.strip().replace("\n", " ")
        preview = preview[:37] + "..." if len(preview) > 40 else preview
        table.add_row(
            revision.id,
            revision.timestamp,
            revision.label,
            str(len(revision.content.split())),
            preview or "—",
        )

    console.print(table)


def execute_status(session: AuthorSession, console: Console) -> None:
    """Execute the status command."""
    display_status(session, console)


def execute_history(session: AuthorSession, chapter_ref: str | None, console: Console) -> None:
    """Execute the history command."""
    chapter = select_chapter(session, chapter_ref, console)
    display_history(chapter, console)
