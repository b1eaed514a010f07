"""Exceptions raised by Inkwell.

Library code raises these; only the command line turns them into
messages and exit codes.
"""

from __future__ import annotations

from pathlib import Path


class ContentError(Exception):
    """Base class for every Inkwell error."""


class DocumentError(ContentError):
    """Error in a single content file.

    Attributes:
        source_path: Path to the file that caused the error.
        message: Human-readable error message.
        original_error: The underlying exception, if any.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class MetadataError(DocumentError):
    """The metadata block of a file is missing or malformed."""


class DuplicateIdentifierError(DocumentError):
    """Two files resolve to the same document identifier.

    Attributes:
        identifier: The clashing slug.
        other_path: The file that claimed the identifier first.
    """

    def __init__(self, source_path: Path, identifier: str, other_path: Path):
        self.identifier = identifier
        self.other_path = other_path
        super().__init__(
            source_path,
            f"identifier '{identifier}' is already used by {other_path}",
        )


class DocumentNotFoundError(ContentError, LookupError):
    """No document matches the requested identifier."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"No document with identifier '{identifier}'")


class ConfigError(ContentError):
    """The project configuration file is malformed."""
