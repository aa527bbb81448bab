"""Export encoders and the writer that puts their output on disk."""

import re
from pathlib import Path
from xml.sax.saxutils import quoteattr

from lumina.core.collaborators import ExportEncoder
from lumina.models.assist import ExportArtifact
from lumina.models.manuscript import Book


def slugify(text: str) -> str:
    """Convert text to lowercase slug with hyphens."""
    slug = text.lower()
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-") or "book"


class JsonEncoder:
    """The full manuscript as JSON, revisions included."""

    format_name = "json"

    def encode(self, book: Book) -> ExportArtifact:
        return ExportArtifact(
            name=f"{slugify(book.metadata.title)}.json",
            media_type="application/json",
            data=book.model_dump_json(indent=2).encode("utf-8"),
        )


class MarkdownEncoder:
    """Reading copy: title block followed by one section per chapter."""

    format_name = "markdown"

    def encode(self, book: Book) -> ExportArtifact:
        meta = book.metadata
        lines = [f"# {meta.title}", ""]
        if meta.author:
            lines += [f"*{meta.author}*", ""]
        if meta.description:
            lines += [f"> {meta.description}", ""]

        for chapter in book.chapters:
            lines += [f"## {chapter.title}", ""]
            if chapter.content.strip():
                lines += [chapter.content.rstrip(), ""]

        notice = " ".join(
            part
            for part in (
                f"© {meta.copyright_year} {meta.copyright_holder}".strip(),
                meta.license,
                meta.legal_notice,
            )
            if part and part != "©"
        )
        if notice:
            lines += ["---", "", notice, ""]

        return ExportArtifact(
            name=f"{slugify(meta.title)}.md",
            media_type="text/markdown",
            data="\n".join(lines).encode("utf-8"),
        )


class LayoutFileEncoder:
    """Layout-program document stub carrying title and author only."""

    format_name = "sla"

    def encode(self, book: Book) -> ExportArtifact:
        meta = book.metadata
        text = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<SCRIBUSUTF8NEW Version="1.5.0">\n'
            f"<DOCUMENT Title={quoteattr(meta.title)} Author={quoteattr(meta.author)}>\n"
            "<!-- Lumina Studio export -->\n"
            "</DOCUMENT>\n"
            "</SCRIBUSUTF8NEW>"
        )
        return ExportArtifact(
            name=f"{slugify(meta.title)}.sla",
            media_type="application/xml",
            data=text.encode("utf-8"),
        )


class EpubDescriptorEncoder:
    """Plain-text package descriptor for an e-book build."""

    format_name = "epub-descriptor"

    def encode(self, book: Book) -> ExportArtifact:
        meta = book.metadata
        text = "\n".join(
            [
                "Mimetype: application/epub+zip",
                f"Title: {meta.title}",
                f"Creator: {meta.author}",
                f"Identifier: {meta.isbn}",
                f"Publisher: {meta.publisher}",
                f"Language: {meta.language}",
                "",
                f"[Chapters: {len(book.chapters)}]",
            ]
        )
        return ExportArtifact(
            name=f"{slugify(meta.title)}.epub.txt",
            media_type="text/plain",
            data=text.encode("utf-8"),
        )


ENCODERS: dict[str, type] = {
    cls.format_name: cls
    for cls in (JsonEncoder, MarkdownEncoder, LayoutFileEncoder, EpubDescriptorEncoder)
}


def get_encoder(format_name: str) -> ExportEncoder:
    """Look up an encoder by format name.

    Raises:
        ValueError: If the format is not supported
    """
    try:
        return ENCODERS[format_name]()
    except KeyError:
        supported = ", ".join(ENCODERS)
        raise ValueError(f"Unsupported format: {format_name}. Supported formats: {supported}")


class ExportWriter:
    """Write encoder output to an output directory."""

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export(self, book: Book, encoder: ExportEncoder) -> Path:
        """Encode a deep copy of the book and write the artifact."""
        artifact = encoder.encode(book.model_copy(deep=True))
        filepath = self.output_dir / artifact.name
        filepath.write_bytes(artifact.data)
        return filepath
