"""Content loading for Inkwell.

This module discovers content files, parses them and creates Document
objects. Bodies are passed through unchanged; rendering them is left to
an external site generator.

Key classes:
- Document: Dataclass representing one post or static page.
- FileContentLoader: Implementation of ContentLoader for a content directory.
- DefaultDocumentBuilder: Implementation of DocumentBuilder.
- ContentProcessor: Facade that loads every Document in a content directory.

Design principles:
- Single Responsibility: Discovery, parsing and field validation live apart.
- Open/Closed: New extractors can be added without modifying existing code.
- Dependency Inversion: High-level modules depend on abstractions (protocols).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from .errors import DocumentError
from .extractors import CompositeMetadataExtractor, default_metadata_extractor
from .utils import is_draft, is_internal_path, is_markdown, slugify

logger = logging.getLogger(__name__)

POST = "post"
PAGE = "page"


@dataclass
class Document:
    """Represents one unit of published content.

    Attributes:
        title: Human-readable title, never empty.
        body: Markdown body, exactly as written after the metadata block.
        slug: Identifier, unique within a collection.
        kind: "post" or "page".
        path: Path to the source file.
        date: Publication date, or None for undated content.
        author: Author name, if known.
        tags: Tags in the order they were written, without duplicates.
        icon: Icon name for navigation, if any.
        order: Ordering hint for static pages, if any.
        draft: Whether the file is a draft (underscore prefix).
        summary: First prose paragraph of the body.
        media: Image references found in the body.
        extra: Metadata keys Inkwell does not interpret.
    """

    title: str
    body: str
    slug: str
    kind: str
    path: Path
    date: date | None = None
    author: str | None = None
    tags: list[str] = field(default_factory=list)
    icon: str | None = None
    order: int | None = None
    draft: bool = False
    summary: str = ""
    media: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_post(self) -> bool:
        return self.kind == POST

    @property
    def is_page(self) -> bool:
        return self.kind == PAGE

    def metadata(self) -> dict[str, Any]:
        """Return the metadata block this document would be written with.

        Recognized keys come first, in their canonical order, and only when
        set; unrecognized keys follow unchanged.
        """
        data: dict[str, Any] = {"title": self.title}
        if self.author is not None:
            data["author"] = self.author
        if self.date is not None:
            data["date"] = self.date
        if self.tags:
            data["tags"] = list(self.tags)
        if self.icon is not None:
            data["icon"] = self.icon
        if self.order is not None:
            data["order"] = self.order
        data.update(self.extra)
        return data


class FileContentLoader:
    """Discovers content files in a content directory.

    Posts live under ``posts_dir`` and static pages under ``pages_dir``,
    both relative to the content directory. Directories starting with
    ``_`` are internal and skipped; files starting with ``_`` are drafts.

    Attributes:
        content_dir: Root of the content tree.
        posts_dir: Directory holding posts.
        pages_dir: Directory holding static pages.
    """

    def __init__(self, content_dir: Path, posts_dir: str = "posts", pages_dir: str = "pages"):
        self.content_dir = content_dir
        self.posts_dir = content_dir / posts_dir
        self.pages_dir = content_dir / pages_dir

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List all content files, posts first, each group in path order.

        Args:
            include_drafts: Whether to include draft files.

        Returns:
            List of paths to Markdown content files.
        """
        files: list[Path] = []
        for root in (self.posts_dir, self.pages_dir):
            if not root.is_dir():
                logger.debug("No content directory at %s", root)
                continue
            for path in sorted(root.rglob("*")):
                if path.is_dir() or not is_markdown(path):
                    continue
                if is_internal_path(path.relative_to(root)):
                    continue
                if is_draft(path) and not include_drafts:
                    logger.debug("Skipping draft %s", path)
                    continue
                files.append(path)
        logger.debug("Discovered %d content files under %s", len(files), self.content_dir)
        return files

    def kind_of(self, path: Path) -> str:
        try:
            path.relative_to(self.posts_dir)
        except ValueError:
            return PAGE
        return POST


class DefaultDocumentBuilder:
    """Builds Document objects from source files.

    Attributes:
        metadata_extractor: Composite metadata extractor.
    """

    def __init__(self, metadata_extractor: CompositeMetadataExtractor | None = None):
        self.metadata_extractor = metadata_extractor or default_metadata_extractor

    def build(self, path: Path, kind: str, draft: bool = False) -> Document:
        """Build a Document from a source file.

        Args:
            path: Path to the source file.
            kind: "post" or "page".
            draft: Whether this is a draft.

        Returns:
            Document object.

        Raises:
            DocumentError: If the file cannot be read, its metadata is
                malformed, or its body is blank.
        """
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentError(path, "file is not valid UTF-8 text", exc) from exc
        except OSError as exc:
            raise DocumentError(path, f"cannot read file: {exc.strerror or exc}", exc) from exc

        metadata = self.metadata_extractor.extract(raw, path)
        body = metadata["body"]
        if not body.strip():
            raise DocumentError(path, "document body is empty")

        slug = slugify(path.stem.lstrip("_")) or slugify(metadata["title"])
        if not slug:
            raise DocumentError(path, "cannot derive an identifier from the filename or title")

        return Document(
            title=metadata["title"],
            body=body,
            slug=slug,
            kind=kind,
            path=path,
            date=metadata.get("date"),
            author=metadata.get("author"),
            tags=metadata.get("tags", []),
            icon=metadata.get("icon"),
            order=metadata.get("order"),
            draft=draft,
            summary=metadata.get("summary", ""),
            media=metadata.get("media", []),
            extra=metadata.get("extra", {}),
        )


class ContentProcessor:
    """Facade for loading every Document in a content directory.

    Attributes:
        content_dir: Root of the content tree.
    """

    def __init__(
        self,
        content_dir: Path,
        content_loader: FileContentLoader | None = None,
        document_builder: DefaultDocumentBuilder | None = None,
    ):
        self.content_dir = content_dir
        self._content_loader = content_loader or FileContentLoader(content_dir)
        self._document_builder = document_builder or DefaultDocumentBuilder()

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        return self._content_loader.iter_files(include_drafts)

    def build(self, path: Path) -> Document:
        """Build the Document for one discovered file."""
        kind = self._content_loader.kind_of(path)
        return self._document_builder.build(path, kind, draft=is_draft(path))

    def load(self, include_drafts: bool = False) -> list[Document]:
        """Load all content files and create Document objects.

        Args:
            include_drafts: Whether to include drafts.

        Returns:
            List of Documents in discovery order.

        Raises:
            DocumentError: On the first malformed file.
        """
        return [self.build(path) for path in self.iter_files(include_drafts)]
