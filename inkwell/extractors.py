"""Metadata extractors for Inkwell.

This module contains implementations of the MetadataExtractor protocol.
Each extractor validates and normalizes a single field of the metadata
block, following the Single Responsibility Principle (SRP).

Key classes:
- TitleExtractor: Requires a non-blank title.
- AuthorExtractor / IconExtractor: Optional text fields.
- DateExtractor: Parses the date, falling back to the filename prefix.
- TagExtractor: Normalizes tags from a list or comma-separated text.
- OrderExtractor: Reads the ordering hint of static pages.
- SummaryExtractor: Extracts the first prose paragraph of the body.
- MediaExtractor: Collects image references from the body.
- CompositeMetadataExtractor: Runs the above and merges their results.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import mistune

from .errors import MetadataError
from .frontmatter import split_frontmatter
from .utils import extract_date_from_name

RECOGNIZED_KEYS = ("title", "author", "date", "tags", "icon", "order")
IMAGE_SRC_RE = re.compile(r'<img\s+[^>]*src="([^"]+)"', re.IGNORECASE)

_ast_markdown = mistune.create_markdown(
    renderer="ast", plugins=["strikethrough", "footnotes", "table", "url"]
)


def _optional_text(frontmatter: dict[str, Any], key: str, path: Path) -> str | None:
    value = frontmatter.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MetadataError(path, f"'{key}' must be text, got {type(value).__name__}")
    return value.strip() or None


def _inline_text(tokens: list[dict[str, Any]]) -> str:
    parts: list[str] = []
    for token in tokens:
        kind = token.get("type")
        if kind in ("text", "codespan"):
            parts.append(token.get("raw", ""))
        elif kind in ("softbreak", "linebreak"):
            parts.append(" ")
        elif kind in ("image", "inline_html"):
            continue
        else:
            parts.append(_inline_text(token.get("children") or []))
    return "".join(parts)


class TitleExtractor:
    """Extracts the required title.

    A document without a title, or with a blank one, is malformed.
    """

    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        """Extract title from the metadata block.

        Args:
            frontmatter: Parsed metadata block.
            body: Document body (unused).
            path: Path to the source file.

        Returns:
            Dictionary with 'title' key.

        Raises:
            MetadataError: If the title is missing, blank, or not a scalar.
        """
        if "title" not in frontmatter or frontmatter["title"] is None:
            raise MetadataError(path, "missing required key 'title'")
        value = frontmatter["title"]
        if isinstance(value, (bool, dict, list)):
            raise MetadataError(path, f"'title' must be text, got {type(value).__name__}")
        # YAML reads titles such as 1984 or 2022 as numbers
        title = str(value).strip()
        if not title:
            raise MetadataError(path, "'title' must not be empty")
        return {"title": title}


class AuthorExtractor:
    """Extracts the author, falling back to a configured default."""

    def __init__(self, default: str | None = None):
        self.default = default

    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        return {"author": _optional_text(frontmatter, "author", path) or self.default}


class IconExtractor:
    """Extracts the optional icon name used in page navigation."""

    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        return {"icon": _optional_text(frontmatter, "icon", path)}


class DateExtractor:
    """Extracts the publication date.

    Looks for a ``date`` key first, then for a YYYY-MM-DD prefix in the
    filename. A document with neither is undated.
    """

    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        """Extract date from the metadata block or filename.

        Args:
            frontmatter: Parsed metadata block.
            body: Document body (unused).
            path: Path to the source file.

        Returns:
            Dictionary with 'date' key (a date or None).

        Raises:
            MetadataError: If the date is present but not a valid calendar date.
        """
        value = frontmatter.get("date")
        if value is None:
            return {"date": extract_date_from_name(path.stem.lstrip("_"))}
        if isinstance(value, datetime):
            return {"date": value.date()}
        if isinstance(value, date):
            return {"date": value}
        if isinstance(value, str):
            try:
                return {"date": date.fromisoformat(value.strip())}
            except ValueError as exc:
                raise MetadataError(
                    path, f"'date' is not a valid YYYY-MM-DD date: {value!r}", exc
                ) from exc
        raise MetadataError(path, f"'date' must be a date, got {type(value).__name__}")


class TagExtractor:
    """Extracts tags from a YAML list or a comma-separated string.

    Tags are stripped and de-duplicated; their order is kept.
    """

    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        value = frontmatter.get("tags")
        if value is None:
            raw: list[Any] = []
        elif isinstance(value, str):
            raw = value.split(",")
        elif isinstance(value, list):
            raw = value
        else:
            raise MetadataError(
                path, f"'tags' must be a list or comma-separated text, got {type(value).__name__}"
            )

        tags: list[str] = []
        for item in raw:
            if item is None:
                continue
            if isinstance(item, (dict, list, bool)):
                raise MetadataError(path, f"invalid tag {item!r}")
            tag = str(item).strip()
            if tag and tag not in tags:
                tags.append(tag)
        return {"tags": tags}


class OrderExtractor:
    """Extracts the integer ordering hint of static pages."""

    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        value = frontmatter.get("order")
        if value is None:
            return {"order": None}
        if isinstance(value, bool) or not isinstance(value, int):
            raise MetadataError(path, f"'order' must be an integer, got {value!r}")
        return {"order": value}


class SummaryExtractor:
    """Extracts the first prose paragraph of the body as a summary.

    Only top-level paragraphs of the Markdown tree count, so headings, code
    blocks, rules and raw HTML are passed over. A paragraph holding nothing
    but images is skipped. Whitespace is collapsed.
    """

    def __init__(self, limit: int = 160):
        self.limit = limit

    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        for token in _ast_markdown(body):
            if token.get("type") != "paragraph":
                continue
            text = " ".join(_inline_text(token.get("children", [])).split())
            if text:
                return {"summary": text[: self.limit]}
        return {"summary": ""}


class MediaExtractor:
    """Collects image references from the Markdown body.

    Walks the mistune syntax tree so that image syntax quoted inside code
    blocks is not mistaken for a reference. Inline ``<img>`` tags are
    picked up too. Existence of the files is not checked here.
    """

    def extract(self, frontmatter: dict[str, Any], body: str, path: Path) -> dict[str, Any]:
        media: list[str] = []
        self._walk(_ast_markdown(body), media)
        return {"media": media}

    def _walk(self, tokens: list[dict[str, Any]], media: list[str]) -> None:
        for token in tokens:
            kind = token.get("type")
            if kind == "image":
                self._add(token.get("attrs", {}).get("url"), media)
            elif kind in ("inline_html", "block_html"):
                for src in IMAGE_SRC_RE.findall(token.get("raw", "")):
                    self._add(src, media)
            children = token.get("children")
            if isinstance(children, list):
                self._walk(children, media)

    @staticmethod
    def _add(url: str | None, media: list[str]) -> None:
        if url and url not in media:
            media.append(url)


class CompositeMetadataExtractor:
    """Combines multiple metadata extractors.

    Splits the metadata block from the body once, then runs every
    extractor on it and merges their results. Later extractors can
    override earlier ones. Keys outside RECOGNIZED_KEYS are returned
    untouched under 'extra'.
    """

    def __init__(self, extractors: list | None = None, default_author: str | None = None):
        """Initialize with a list of extractors.

        Args:
            extractors: List of MetadataExtractor implementations.
                       If None, uses default extractors.
            default_author: Author used when a file does not name one.
        """
        if extractors is None:
            self._extractors = [
                TitleExtractor(),
                AuthorExtractor(default_author),
                DateExtractor(),
                TagExtractor(),
                IconExtractor(),
                OrderExtractor(),
                SummaryExtractor(),
                MediaExtractor(),
            ]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        self._extractors.append(extractor)

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract all metadata from a file's content.

        Args:
            content: Raw file content.
            path: Path to the source file.

        Returns:
            Dictionary with 'frontmatter', 'body', 'extra' and every
            extracted field.

        Raises:
            MetadataError: If the block or any field is malformed.
        """
        frontmatter, body = split_frontmatter(content, path)
        result: dict[str, Any] = {
            "frontmatter": frontmatter,
            "body": body,
            "extra": {k: v for k, v in frontmatter.items() if k not in RECOGNIZED_KEYS},
        }
        for extractor in self._extractors:
            result.update(extractor.extract(frontmatter, body, path))
        return result


# Default composite extractor instance
default_metadata_extractor = CompositeMetadataExtractor()
