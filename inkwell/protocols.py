"""Protocol definitions for Inkwell.

This module defines the interfaces (protocols) used throughout Inkwell,
following the Dependency Inversion Principle (DIP) of SOLID.

These protocols enable:
- Loose coupling between file discovery, parsing and the collection
- Easy testing through fake implementations
- Plugging in an external site generator through the Renderer protocol
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .collections import ContentCollection
    from .content import Document


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for extracting one part of a document's metadata.

    Implementations validate and normalize a single field.
    This follows ISP - clients only depend on extractors they need.
    """

    @abstractmethod
    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        """Extract metadata from a parsed metadata block and body.

        Args:
            frontmatter: Parsed metadata block.
            body: Document body.
            path: Path to the source file.

        Returns:
            Dictionary of extracted fields.

        Raises:
            MetadataError: If the field is malformed.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files.

    This separates file discovery from parsing (SRP).
    """

    @abstractmethod
    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List all content files.

        Args:
            include_drafts: Whether to include draft files.

        Returns:
            List of paths to content files.
        """
        ...

    @abstractmethod
    def kind_of(self, path: Path) -> str:
        """Return the document kind ('post' or 'page') of a discovered file."""
        ...


@runtime_checkable
class DocumentBuilder(Protocol):
    """Protocol for building Document objects.

    This separates document construction from file discovery (SRP).
    """

    @abstractmethod
    def build(self, path: Path, kind: str, draft: bool = False) -> Document:
        """Build a Document from a source file.

        Args:
            path: Path to the source file.
            kind: 'post' or 'page'.
            draft: Whether this is a draft.

        Returns:
            Document object.

        Raises:
            DocumentError: If the file cannot be read or is malformed.
        """
        ...


@runtime_checkable
class Renderer(Protocol):
    """Protocol for the site generator that consumes the collection.

    Inkwell hands Documents over unchanged; turning them into pages,
    navigation and indexes is the renderer's job.
    """

    @abstractmethod
    def render(self, collection: ContentCollection) -> None:
        """Render the whole collection.

        Args:
            collection: The content collection to render.
        """
        ...
