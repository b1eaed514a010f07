"""Build-time validation of a content collection.

check_collection reads every file and reports every problem it finds,
so an author can fix a whole batch of files before rebuilding.
Malformed files are errors; departures from the directory conventions
and dangling image references are warnings.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

from .collections import ContentCollection
from .content import Document
from .errors import DocumentError
from .utils import extract_date_from_name, split_date_prefix

ERROR = "error"
WARNING = "warning"

_REMOTE_PREFIXES = ("http://", "https://", "//", "data:", "mailto:", "#", "/")


@dataclass(frozen=True)
class Diagnostic:
    """A problem found in one content file.

    Attributes:
        path: File the problem was found in.
        message: Human-readable description.
        level: ERROR or WARNING.
    """

    path: Path
    message: str
    level: str = ERROR

    @property
    def is_error(self) -> bool:
        return self.level == ERROR

    def __str__(self) -> str:
        return f"{self.path}: {self.level}: {self.message}"


def check_collection(collection: ContentCollection) -> list[Diagnostic]:
    """Validate every file of a collection.

    Args:
        collection: The collection to check. Its cache is not used or
            modified.

    Returns:
        Diagnostics in file discovery order; empty when all is well.
    """
    processor = collection.processor
    diagnostics: list[Diagnostic] = []
    seen: dict[str, Path] = {}
    for path in processor.iter_files(collection.include_drafts):
        try:
            document = processor.build(path)
        except DocumentError as exc:
            diagnostics.append(Diagnostic(exc.source_path, exc.message))
            continue
        other = seen.get(document.slug)
        if other is not None:
            diagnostics.append(
                Diagnostic(path, f"identifier '{document.slug}' is already used by {other}")
            )
        else:
            seen[document.slug] = path
        diagnostics.extend(lint_document(document))
    return diagnostics


def lint_document(document: Document) -> list[Diagnostic]:
    """Report convention warnings for a well-formed Document."""
    warnings: list[Diagnostic] = []
    stem = document.path.stem.lstrip("_")

    if document.is_post:
        prefix, _ = split_date_prefix(stem)
        filename_date = extract_date_from_name(stem)
        if prefix is None:
            warnings.append(
                Diagnostic(document.path, "post filename has no YYYY-MM-DD- prefix", WARNING)
            )
        elif filename_date is None:
            warnings.append(
                Diagnostic(document.path, f"filename date {prefix} is not a valid date", WARNING)
            )
        elif document.date is not None and document.date != filename_date:
            warnings.append(
                Diagnostic(
                    document.path,
                    f"date {document.date.isoformat()} does not match filename date "
                    f"{filename_date.isoformat()}",
                    WARNING,
                )
            )
    elif document.order is None:
        warnings.append(Diagnostic(document.path, "page has no 'order' hint", WARNING))

    for src in missing_media(document):
        warnings.append(Diagnostic(document.path, f"image not found: {src}", WARNING))
    return warnings


def missing_media(document: Document) -> list[str]:
    """Return relative image references that do not exist on disk.

    Remote, absolute and templated references are not checked.
    """
    missing: list[str] = []
    for src in document.media:
        if src.startswith(_REMOTE_PREFIXES) or "{{" in src:
            continue
        # Markdown URLs come back percent-encoded: "my pic.png" is "my%20pic.png"
        target = unquote(src.split("#", 1)[0].split("?", 1)[0])
        if not (document.path.parent / target).exists():
            missing.append(src)
    return missing
