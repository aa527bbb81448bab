"""Turn preview page markup into terminal-friendly text."""

from typing import Literal

from bs4 import BeautifulSoup
from markdownify import markdownify as md


class ContentProcessor:
    """Convert page chunks for display outside a browser."""

    def process(
        self,
        markup: str,
        output_format: Literal["markdown", "text"] = "markdown",
    ) -> str:
        """Convert a page chunk to the requested format.

        Chunks may start or end inside a tag; the parser keeps whatever text
        it can recover.
        """
        soup = BeautifulSoup(markup, "lxml")
        if output_format == "text":
            return self._to_plain_text(soup)
        return self._to_markdown(soup)

    def _to_markdown(self, soup: BeautifulSoup) -> str:
        body = soup.body or soup
        markdown = md(str(body), heading_style="ATX", bullets="-")
        lines = [line.rstrip() for line in markdown.split("\n")]
        # Collapse runs of blank lines
        cleaned = []
        prev_blank = False
        for line in lines:
            is_blank = not line.strip()
            if is_blank and prev_blank:
                continue
            cleaned.append(line)
            prev_blank = is_blank

        return "\n".join(cleaned).strip()

    def _to_plain_text(self, soup: BeautifulSoup) -> str:
        body = soup.body or soup
        return body.get_text("\n\n", strip=True)

    def get_stats(self, content: str) -> dict[str, int]:
        """Word, character and paragraph counts of chapter text."""
        words = content.split()
        paragraphs = [p for p in content.split("\n") if p.strip()]
        return {
            "word_count": len(words),
            "character_count": len(content),
            "paragraph_count": len(paragraphs),
        }
