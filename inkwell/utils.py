"""Utility functions for Inkwell.

This module contains the small string and path helpers shared by the
content loader, the extractors and the command line.

Key functions:
    slugify: Convert filenames or titles to URL slugs.
    split_date_prefix: Separate a YYYY-MM-DD prefix from a filename stem.
    extract_date_from_name: Extract date from filename prefix.
    is_markdown: Check if a path is a Markdown file.
    is_draft: Check if a path is a draft (underscore prefix).
    build_tags_index: Build index of documents by tags.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from pathlib import Path

SLUG_RE = re.compile(r"[^a-zA-Z0-9]+")


def split_date_prefix(name: str) -> tuple[str | None, str]:
    """Split a ``YYYY-MM-DD-`` prefix from a filename stem.

    Args:
        name: Filename stem.

    Returns:
        Tuple of (date prefix or None, remainder of the name).

    Examples:
        >>> split_date_prefix("2022-05-01-caching")
        ('2022-05-01', 'caching')

        >>> split_date_prefix("about")
        (None, 'about')
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        if len(parts[0]) == 4 and len(parts[1]) == 2 and len(parts[2]) == 2:
            return "-".join(parts[:3]), "-".join(parts[3:])
    return None, name


def slugify(name: str) -> str:
    """Convert a filename stem or title to a slug, dropping any date prefix.

    Args:
        name: Filename stem or free text.

    Returns:
        URL-friendly slug, or an empty string when nothing usable remains.
    """
    _, cleaned = split_date_prefix(name)
    cleaned = SLUG_RE.sub("-", cleaned)
    return cleaned.strip("-").lower()


def extract_date_from_name(name: str) -> date | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        date object if a valid date prefix is found, None otherwise.

    Examples:
        >>> extract_date_from_name("2024-01-15-hello-world")
        datetime.date(2024, 1, 15)

        >>> extract_date_from_name("hello-world") is None
        True
    """
    prefix, _ = split_date_prefix(name)
    if prefix is None:
        return None
    try:
        return date.fromisoformat(prefix)
    except ValueError:
        return None


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == ".md"


def is_draft(path: Path) -> bool:
    """Check if a path names a draft (filename starts with ``_``)."""
    return path.name.startswith("_")


def is_internal_path(path: Path) -> bool:
    """Check if a path is internal (contains components starting with _).

    Args:
        path: Relative path to check.

    Returns:
        True if any directory component starts with underscore.
    """
    return any(part.startswith("_") for part in path.parts[:-1])


def build_tags_index(documents: Iterable) -> dict[str, list]:
    """Build an index mapping tags to lists of documents carrying that tag.

    Args:
        documents: Iterable of objects with a 'tags' attribute.

    Returns:
        Dictionary mapping tag names to lists of documents, tags in
        first-seen order.
    """
    tags: dict[str, list] = {}
    for document in documents:
        for tag in document.tags:
            tags.setdefault(tag, []).append(document)
    return tags
