"""JSON manifest for external renderers.

The manifest is the hand-off between Inkwell and whatever site generator
turns the collection into pages. It carries every Document in
enumeration order (bodies unchanged), the tag index, and the navigation
order of static pages.

Classes:
    ManifestRenderer: Renderer implementation that writes the manifest.

Functions:
    document_to_dict: Convert a Document to JSON-compatible data.
    build_manifest: Build the manifest for a whole collection.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from . import __version__
from .collections import ContentCollection
from .content import Document

logger = logging.getLogger(__name__)

MANIFEST_VERSION = 1


def document_to_dict(document: Document, root: Path | None = None) -> dict[str, Any]:
    """Convert a Document to JSON-compatible data.

    Args:
        document: Document to convert.
        root: If given, the source path is written relative to it.

    Returns:
        Dictionary with ISO-formatted dates and the body unchanged.
    """
    path = document.path
    if root is not None:
        try:
            path = path.relative_to(root)
        except ValueError:
            pass
    return {
        "slug": document.slug,
        "kind": document.kind,
        "title": document.title,
        "author": document.author,
        "date": document.date.isoformat() if document.date else None,
        "tags": list(document.tags),
        "icon": document.icon,
        "order": document.order,
        "draft": document.draft,
        "summary": document.summary,
        "media": list(document.media),
        "extra": document.extra,
        "path": path.as_posix(),
        "body": document.body,
    }


def build_manifest(collection: ContentCollection) -> dict[str, Any]:
    """Build the manifest for a collection.

    Args:
        collection: Collection to describe.

    Returns:
        Dictionary ready for json.dumps.

    Raises:
        DocumentError: If any content file is malformed.
    """
    root = collection.content_dir
    documents = [document_to_dict(d, root) for d in collection]
    tags = {tag: [d.slug for d in docs] for tag, docs in collection.tags().items()}
    navigation = [
        {"slug": page.slug, "title": page.title, "icon": page.icon, "order": page.order}
        for page in collection.pages()
    ]
    return {
        "version": MANIFEST_VERSION,
        "generator": f"inkwell {__version__}",
        "site": {
            "title": collection.config.get("title"),
            "author": collection.config.get("author"),
        },
        "documents": documents,
        "tags": tags,
        "navigation": navigation,
    }


class ManifestRenderer:
    """Writes the collection as a JSON manifest file.

    Attributes:
        output_path: Destination of the manifest.
    """

    def __init__(self, output_path: Path, indent: int | None = 2):
        self.output_path = output_path
        self.indent = indent

    def render(self, collection: ContentCollection) -> None:
        """Write the manifest for a collection.

        Args:
            collection: The content collection to render.
        """
        manifest = build_manifest(collection)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(
            json.dumps(manifest, indent=self.indent, ensure_ascii=False, default=str) + "\n",
            encoding="utf-8",
        )
        logger.debug(
            "Wrote %d documents to %s", len(manifest["documents"]), self.output_path
        )
