"""Tests for page markup conversion."""

from lumina.core.content_processor import ContentProcessor


class TestContentProcessor:
    """Markup to terminal text."""

    def setup_method(self):
        self.processor = ContentProcessor()

    def test_markdown_heading_and_paragraphs(self):
        result = self.processor.process("<h1>Title</h1><p>One</p><p>Two</p>")

        assert result.startswith("# Title")
        assert "One" in result
        assert "Two" in result
        assert "\n\n\n" not in result

    def test_plain_text(self):
        result = self.processor.process("<h1>Title</h1><p>Body</p>", "text")
        assert result == "Title\n\nBody"

    def test_chunk_cut_inside_tag(self):
        result = self.processor.process("<p>The end of a sentence</p><h1>Nex", "text")
        assert "The end of a sentence" in result

    def test_escaped_entities_decoded(self):
        result = self.processor.process("<p>Tom &amp; Jerry</p>", "text")
        assert result == "Tom & Jerry"

    def test_stats(self):
        stats = self.processor.get_stats("One two three.\n\nFour five.\n")

        assert stats["word_count"] == 5
        assert stats["paragraph_count"] == 2
        assert stats["character_count"] == len("One two three.\n\nFour five.\n")

    def test_stats_empty(self):
        assert self.processor.get_stats("") == {
            "word_count": 0,
            "character_count": 0,
            "paragraph_count": 0,
        }
