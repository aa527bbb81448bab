"""Approximate pagination of the manuscript for the page preview.

The whole book is flattened into one markup stream and cut into chunks of a
fixed character budget. This is a preview approximation: a chunk boundary may
fall inside a word or a tag. Layout preferences only change how a chunk is
presented, never where the boundaries fall.
"""

from dataclasses import dataclass
from html import escape
from math import ceil

from lumina.models.manuscript import Book, Chapter, FontFamily, LayoutPreference

PAGE_CHARS = 1400
PAGES_PER_SPREAD = 2
PLACEHOLDER = "No content yet..."

# Base page geometry at zoom 1.0, in px
PAGE_WIDTH = 480
PAGE_HEIGHT = 680
BASE_FONT_SIZE = 13
BASELINE_RATIO = 1.6

FONT_STACKS = {
    FontFamily.SERIF: '"Lora", serif',
    FontFamily.SANS: '"Inter", sans-serif',
}


def render_chapter(chapter: Chapter) -> str:
    """Render one chapter as a heading followed by its paragraphs."""
    body = escape(chapter.content, quote=False).replace("\n", "</p><p>")
    return f"<h1>{escape(chapter.title, quote=False)}</h1><p>{body}</p>"


def render_stream(chapters: list[Chapter]) -> str:
    """Concatenate chapters in document order."""
    return "".join(render_chapter(c) for c in chapters)


def chunk_stream(stream: str, budget: int = PAGE_CHARS) -> list[str]:
    """Greedy, order-preserving split into pieces of at most ``budget`` chars."""
    if budget < 1:
        raise ValueError("page budget must be positive")
    if not stream:
        return [PLACEHOLDER]
    return [stream[i : i + budget] for i in range(0, len(stream), budget)]


@dataclass(frozen=True)
class PageSet:
    """Result of one pagination pass."""

    pages: tuple[str, ...]
    pages_per_spread: int = PAGES_PER_SPREAD

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def sheet_count(self) -> int:
        return ceil(len(self.pages) / self.pages_per_spread)

    @property
    def is_placeholder(self) -> bool:
        return self.pages == (PLACEHOLDER,)


class PaginationEngine:
    """Cache-backed pagination of a book's chapters.

    Pages are recomputed lazily, only when the chapter titles, contents or
    order differ from the previous call.
    """

    def __init__(self, page_chars: int = PAGE_CHARS, pages_per_spread: int = PAGES_PER_SPREAD):
        self.page_chars = page_chars
        self.pages_per_spread = pages_per_spread
        self._key: tuple[tuple[str, str], ...] | None = None
        self._pages: PageSet | None = None
        self.recompute_count = 0

    def paginate_chapters(self, chapters: list[Chapter]) -> PageSet:
        key = tuple((c.title, c.content) for c in chapters)
        if self._pages is not None and key == self._key:
            return self._pages

        chunks = chunk_stream(render_stream(chapters), self.page_chars)
        self._key = key
        self._pages = PageSet(pages=tuple(chunks), pages_per_spread=self.pages_per_spread)
        self.recompute_count += 1
        return self._pages

    def paginate(self, book: Book) -> PageSet:
        return self.paginate_chapters(book.chapters)


class SpreadCursor:
    """Current position in the preview, moving one spread at a time."""

    def __init__(self, page_count: int, pages_per_spread: int = PAGES_PER_SPREAD):
        self.pages_per_spread = pages_per_spread
        self.page_count = max(page_count, 1)
        self.page = 0

    @property
    def sheet(self) -> int:
        """1-based spread number."""
        return self.page // self.pages_per_spread + 1

    @property
    def sheet_count(self) -> int:
        return ceil(self.page_count / self.pages_per_spread)

    @property
    def at_first(self) -> bool:
        return self.page == 0

    @property
    def at_last(self) -> bool:
        return self.page >= self.page_count - self.pages_per_spread

    def visible(self) -> list[int]:
        """Page indices shown on the current spread."""
        end = min(self.page + self.pages_per_spread, self.page_count)
        return list(range(self.page, end))

    def next(self) -> bool:
        """Advance one spread. Returns False when already on the last one."""
        if self.at_last:
            return False
        self.page = min(self.page_count - 1, self.page + self.pages_per_spread)
        return True

    def previous(self) -> bool:
        """Go back one spread. Returns False when already on the first one."""
        if self.at_first:
            return False
        self.page = max(0, self.page - self.pages_per_spread)
        return True

    def resize(self, page_count: int) -> None:
        """Follow a repagination, keeping the cursor on an existing spread."""
        self.page_count = max(page_count, 1)
        if self.page > self.page_count - 1:
            last = self.page_count - 1
            self.page = last - last % self.pages_per_spread


@dataclass(frozen=True)
class PageView:
    """Presentation parameters for one page of the preview."""

    number: int
    markup: str
    width: float
    height: float
    font_size: float
    line_height: float
    padding: str
    columns: int
    font_stack: str
    baseline: float
    running_title: str


def present_page(
    pages: PageSet,
    index: int,
    layout: LayoutPreference,
    title: str = "",
    zoom: float = 1.0,
) -> PageView:
    """Apply layout preferences to an already computed page."""
    scale = zoom * layout.font_scale
    return PageView(
        number=index + 1,
        markup=pages.pages[index],
        width=PAGE_WIDTH * zoom,
        height=PAGE_HEIGHT * zoom,
        font_size=BASE_FONT_SIZE * scale,
        line_height=layout.line_height,
        padding=layout.margins,
        columns=layout.columns,
        font_stack=FONT_STACKS[layout.font_family],
        baseline=BASELINE_RATIO * BASE_FONT_SIZE * scale,
        running_title=title,
    )
