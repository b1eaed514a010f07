"""Collections of Documents.

Key classes:
- ContentCollection: The read-only content collection of a project.
  Enumerates Documents newest first and looks them up by identifier.
- DocumentCollection: Lightweight sequence helper for filtering Documents.
- TagCollection: Mapping of tag name to the Documents carrying it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date
from pathlib import Path
from typing import Any

from .config import DEFAULT_CONFIG
from .content import ContentProcessor, DefaultDocumentBuilder, Document, FileContentLoader
from .errors import DocumentNotFoundError, DuplicateIdentifierError
from .extractors import CompositeMetadataExtractor
from .utils import build_tags_index, slugify

logger = logging.getLogger(__name__)


def sort_by_date(documents: Iterable[Document]) -> list[Document]:
    """Sort Documents newest first.

    Undated Documents come after every dated one; Documents sharing a
    date are ordered by slug.
    """
    by_slug = sorted(documents, key=lambda d: d.slug)
    return sorted(by_slug, key=lambda d: d.date or date.min, reverse=True)


def sort_by_order(documents: Iterable[Document]) -> list[Document]:
    """Sort static pages by their ordering hint, unordered pages last."""
    return sorted(
        documents,
        key=lambda d: (d.order is None, d.order or 0, d.title.lower(), d.slug),
    )


class DocumentCollection(Sequence[Document]):
    """Lightweight helper for working with lists of Documents."""

    def __init__(self, documents: Iterable[Document]):
        self._documents = list(documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, item):
        return self._documents[item]

    def posts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.is_post)

    def pages(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.is_page)

    def with_tag(self, tag: str) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if tag in d.tags)

    def drafts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.draft)

    def published(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if not d.draft)

    def sorted(self, reverse: bool = True) -> DocumentCollection:
        """Sort Documents by date.

        Args:
            reverse: If True (default), newest first with undated Documents
                last. If False, the exact opposite order.

        Returns:
            A new DocumentCollection.
        """
        ordered = sort_by_date(self._documents)
        if not reverse:
            ordered.reverse()
        return DocumentCollection(ordered)

    def latest(self, count: int = 5) -> DocumentCollection:
        return DocumentCollection(self.sorted()[:count])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DocumentCollection({len(self._documents)} documents)"


class TagCollection(Mapping[str, DocumentCollection]):
    """Mapping of tag name to DocumentCollection with convenience helpers."""

    def __init__(self, mapping: dict[str, Iterable[Document]]):
        self._mapping = {k: DocumentCollection(v) for k, v in mapping.items()}

    def __getitem__(self, key: str) -> DocumentCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def counts(self) -> dict[str, int]:
        return {tag: len(docs) for tag, docs in self._mapping.items()}

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagCollection({len(self._mapping)} tags)"


class ContentCollection:
    """The read-only collection of a project's Documents.

    Files are parsed on first use and cached until reload(). Iterating
    the collection yields Documents most recent first; every iteration
    starts over from the beginning of the same sequence.

    Attributes:
        content_dir: Root of the content tree.
        config: Settings used to locate and parse files.
        include_drafts: Whether drafts are part of the collection.
    """

    def __init__(
        self,
        content_dir: Path,
        config: dict[str, Any] | None = None,
        include_drafts: bool = False,
        processor: ContentProcessor | None = None,
    ):
        self.content_dir = content_dir
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self.include_drafts = include_drafts
        self._processor = processor or self._default_processor()
        self._documents: list[Document] | None = None
        self._index: dict[str, Document] = {}

    def _default_processor(self) -> ContentProcessor:
        loader = FileContentLoader(
            self.content_dir,
            posts_dir=str(self.config["posts_dir"]),
            pages_dir=str(self.config["pages_dir"]),
        )
        extractor = CompositeMetadataExtractor(default_author=self.config.get("author"))
        return ContentProcessor(
            self.content_dir,
            content_loader=loader,
            document_builder=DefaultDocumentBuilder(extractor),
        )

    @property
    def processor(self) -> ContentProcessor:
        return self._processor

    def _load(self) -> list[Document]:
        if self._documents is None:
            documents = self._processor.load(include_drafts=self.include_drafts)
            index: dict[str, Document] = {}
            for document in documents:
                existing = index.get(document.slug)
                if existing is not None:
                    raise DuplicateIdentifierError(document.path, document.slug, existing.path)
                index[document.slug] = document
            self._documents = sort_by_date(documents)
            self._index = index
            logger.debug("Cached %d documents from %s", len(documents), self.content_dir)
        return self._documents

    def reload(self) -> None:
        """Forget cached Documents so the next access re-reads the files."""
        self._documents = None
        self._index = {}

    def documents(self) -> Iterator[Document]:
        """Enumerate all Documents, most recent first.

        Returns:
            A fresh iterator. Files are only read when it is first advanced.

        Raises:
            DocumentError: When advanced, if any file is malformed.
        """
        yield from self._load()

    def __iter__(self) -> Iterator[Document]:
        return self.documents()

    def __len__(self) -> int:
        return len(self._load())

    def get(self, identifier: str) -> Document:
        """Look up a Document by identifier.

        The identifier is the Document's slug. A filename such as
        ``2022-05-01-caching.md`` or a path-like ``/caching/`` resolves
        to the same Document.

        Args:
            identifier: Slug or filename of the Document.

        Returns:
            The matching Document.

        Raises:
            DocumentNotFoundError: If no Document matches.
        """
        self._load()
        key = identifier.strip().strip("/")
        if key.lower().endswith(".md"):
            key = key[:-3]
        for candidate in (key, slugify(key.lstrip("_"))):
            if candidate in self._index:
                return self._index[candidate]
        raise DocumentNotFoundError(identifier)

    def __getitem__(self, identifier: str) -> Document:
        return self.get(identifier)

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, str):
            return False
        try:
            self.get(identifier)
        except DocumentNotFoundError:
            return False
        return True

    def posts(self) -> DocumentCollection:
        """All posts, most recent first."""
        return DocumentCollection(d for d in self._load() if d.is_post)

    def pages(self) -> DocumentCollection:
        """All static pages in navigation order."""
        return DocumentCollection(sort_by_order(d for d in self._load() if d.is_page))

    def with_tag(self, tag: str) -> DocumentCollection:
        return DocumentCollection(self._load()).with_tag(tag)

    def tags(self) -> TagCollection:
        """Index of tag name to Documents, Documents most recent first."""
        return TagCollection(build_tags_index(self._load()))

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"ContentCollection({self.content_dir})"
