"""Preview command: render one spread of the paginated book."""

from rich.columns import Columns
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from lumina.core.content_processor import ContentProcessor
from lumina.core.pagination import PageView, SpreadCursor, present_page
from lumina.session import AuthorSession

# Terminal width of one page at zoom 1.0
PAGE_COLUMNS = 48


def split_columns(text: str, count: int) -> list[str]:
    """Split page text into ``count`` roughly equal runs of paragraphs."""
    if count <= 1:
        return [text]
    paragraphs = text.split("\n\n")
    per_column = -(-len(paragraphs) // count)
    return [
        "\n\n".join(paragraphs[i : i + per_column])
        for i in range(0, len(paragraphs), per_column)
    ]


def render_page(view: PageView, processor: ContentProcessor, zoom: float = 1.0) -> Panel:
    """Build a rich panel for one page of the spread."""
    body = processor.process(view.markup, "markdown")
    parts = split_columns(body, view.columns)
    if len(parts) == 1:
        content = Markdown(parts[0] or " ")
    else:
        content = Columns([Markdown(p) for p in parts], equal=True, expand=True)

    return Panel(
        content,
        title=f"[dim]{view.running_title}[/]",
        subtitle=f"[dim]Page {view.number}[/]",
        width=int(PAGE_COLUMNS * zoom),
        border_style="white",
        padding=(1, 2),
    )


def execute_preview(
    session: AuthorSession,
    sheet: int,
    console: Console,
    zoom: float = 1.0,
) -> None:
    """Execute the preview command.

    ``sheet`` is the 1-based spread number; out-of-range values are clamped.
    """
    pages = session.pages()
    layout = session.book.metadata.layout_preference
    cursor = SpreadCursor(pages.page_count, pages.pages_per_spread)
    for _ in range(max(sheet, 1) - 1):
        if not cursor.next():
            break

    processor = ContentProcessor()
    panels = [
        render_page(
            present_page(pages, index, layout, session.book.metadata.title, zoom),
            processor,
            zoom,
        )
        for index in cursor.visible()
    ]

    console.print()
    console.print(Columns(panels))
    console.print(
        Text.assemble(
            ("Spread ", "dim"),
            (f"{cursor.sheet} / {cursor.sheet_count}", "bold"),
            (f"   Style: {layout.style_name}", "dim"),
        )
    )
    console.print()
