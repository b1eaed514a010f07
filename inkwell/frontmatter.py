"""YAML front-matter codec.

A content file opens with a metadata block fenced by ``---`` lines,
followed by the Markdown body::

    ---
    title: Caching
    date: 2022-05-01
    tags: [Python, Back-end]
    ---
    Body text...

Unlike a lenient site generator, a file without a well-formed block is
rejected: every function here raises MetadataError naming the file.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from .errors import MetadataError

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)
OPENING_RE = re.compile(r"\A---[ \t]*(?:\r?\n|\Z)")
BOM = "\ufeff"


def split_frontmatter(text: str, path: Path) -> tuple[dict[str, Any], str]:
    """Split a file into its parsed metadata block and its body.

    Args:
        text: Raw file content.
        path: Path to the source file, used in error messages.

    Returns:
        Tuple of (metadata dict, body). The body is returned unchanged.

    Raises:
        MetadataError: If the block is missing, unterminated, not valid
            YAML, or not a mapping.
    """
    if text.startswith(BOM):
        text = text[len(BOM) :]
    if not OPENING_RE.match(text):
        raise MetadataError(path, "missing metadata block (file must start with '---')")
    match = FRONTMATTER_RE.match(text)
    if not match:
        raise MetadataError(path, "unterminated metadata block (no closing '---')")

    try:
        data = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError as exc:
        raise MetadataError(path, f"invalid metadata: {_describe(exc)}", exc) from exc
    except ValueError as exc:
        # PyYAML resolves 2022-13-01 as a timestamp and then fails to build it
        raise MetadataError(path, f"invalid metadata: {exc}", exc) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MetadataError(path, "metadata block must be a mapping of keys to values")
    return {str(key): value for key, value in data.items()}, text[match.end() :]


def dump_frontmatter(metadata: dict[str, Any], body: str) -> str:
    """Serialize metadata and body back into the on-disk file format.

    Args:
        metadata: Metadata mapping; dates are written as YAML dates.
        body: Markdown body, written unchanged after the block.

    Returns:
        Text that split_frontmatter parses back to the same values.
    """
    block = yaml.safe_dump(
        metadata,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"---\n{block}---\n{body}"


def _describe(exc: yaml.YAMLError) -> str:
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None) or str(exc)
    if mark is not None:
        # Mark lines are relative to the block, which starts on file line 2
        return f"{problem} (line {mark.line + 2}, column {mark.column + 1})"
    return problem
