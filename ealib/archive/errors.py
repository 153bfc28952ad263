"""Exceptions raised while writing or reading archives."""

from __future__ import annotations


class ArchiveError(Exception):
    """Base class for archive failures."""


class FormatError(ArchiveError):
    """Document structure is wrong: missing tag, bad root, malformed JSON."""


class ParseError(ArchiveError, ValueError):
    """A field value does not parse as its declared type."""


class ResourceError(ArchiveError, OSError):
    """The underlying file or stream cannot be opened, read or written."""
