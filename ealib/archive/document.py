"""Named-field tagged documents backing the JSON archive format.

Archivable types never touch JSON directly. They write scalars and nested
nodes under stable tags through :class:`ArchiveWriter` and read them back by
name through :class:`ArchiveReader`, so a document stays self-describing and
fields can be found regardless of their position.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from contextlib import contextmanager
from typing import IO, Any, Callable, Iterable, Iterator, Protocol, TypeVar

import numpy as np

from ealib.archive.errors import FormatError, ParseError, ResourceError

SCALAR_TYPES: tuple[type, ...] = (bool, int, float, str)

T = TypeVar("T")


class Archivable(Protocol):
    """Anything that can save itself under a tag and load itself back."""

    def save(self, writer: "ArchiveWriter", tag: str) -> None:
        ...

    def load(self, reader: "ArchiveReader", tag: str) -> None:
        ...


class ArchiveWriter:
    """Build a tagged document one named field at a time."""

    def __init__(self) -> None:
        self._root: dict[str, Any] = {}
        self._stack: list[dict[str, Any]] = [self._root]

    def write(self, tag: str, value: Any) -> None:
        """Write a scalar field into the current node."""
        if isinstance(value, np.generic):
            value = value.item()
        if not isinstance(value, SCALAR_TYPES):
            raise TypeError(
                f"field '{tag}' must be bool, int, float or str, "
                f"got {type(value).__name__}"
            )
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"field '{tag}' must be finite, got {value!r}")
        self._put(tag, value)

    @contextmanager
    def node(self, tag: str) -> Iterator["ArchiveWriter"]:
        """Open a nested node; fields written inside the block land in it."""
        child: dict[str, Any] = {}
        self._put(tag, child)
        self._stack.append(child)
        try:
            yield self
        finally:
            self._stack.pop()

    def write_object(self, tag: str, obj: Archivable) -> None:
        """Let an archivable object write itself under tag."""
        obj.save(self, tag)

    def write_nodes(
        self,
        tag: str,
        objects: Iterable[T],
        save: Callable[[T, "ArchiveWriter"], None],
    ) -> None:
        """Write an ordered list of nodes, one per object."""
        entries: list[dict[str, Any]] = []
        self._put(tag, entries)
        for obj in objects:
            entry: dict[str, Any] = {}
            entries.append(entry)
            self._stack.append(entry)
            try:
                save(obj, self)
            finally:
                self._stack.pop()

    def document(self, root_tag: str) -> dict[str, Any]:
        """Return the finished document wrapped in its root tag."""
        if len(self._stack) != 1:
            raise FormatError("cannot finish a document while a node is open")
        return {root_tag: self._root}

    def _put(self, tag: str, value: Any) -> None:
        current = self._stack[-1]
        if tag in current:
            raise FormatError(f"duplicate tag '{tag}'")
        current[tag] = value


class ArchiveReader:
    """Read named fields from one node of a parsed document."""

    def __init__(self, node: Mapping[str, Any], path: str = "") -> None:
        if not isinstance(node, Mapping):
            raise FormatError(f"'{path or '<root>'}' is not a node")
        self._node = node
        self.path = path

    @classmethod
    def from_document(cls, document: Any, root_tag: str) -> "ArchiveReader":
        """Open a reader on the single root node of a document."""
        if not isinstance(document, Mapping):
            raise FormatError("document is not a tagged node")
        if list(document) != [root_tag]:
            raise FormatError(
                f"expected root tag '{root_tag}', got {sorted(document)!r}"
            )
        return cls(document[root_tag], root_tag)

    def has(self, tag: str) -> bool:
        """Return True if tag is present in this node."""
        return tag in self._node

    def tags(self) -> list[str]:
        """Field names of this node, in document order."""
        return list(self._node)

    def read(self, tag: str, kind: type | None = None) -> Any:
        """Read a scalar field, checking it against kind when given.

        Integers are accepted where a float is expected. Booleans are never
        accepted as numbers.
        """
        value = self._get(tag)
        if kind is None:
            if not isinstance(value, SCALAR_TYPES):
                raise ParseError(f"'{self._where(tag)}' is not a scalar")
            return value
        if kind is bool:
            ok = isinstance(value, bool)
        elif kind is int:
            ok = isinstance(value, int) and not isinstance(value, bool)
        elif kind is float:
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
            if ok:
                value = float(value)
        elif kind is str:
            ok = isinstance(value, str)
        else:
            raise TypeError(f"unsupported field kind {kind!r}")
        if not ok:
            raise ParseError(
                f"'{self._where(tag)}' expected {kind.__name__}, got {value!r}"
            )
        return value

    def node(self, tag: str) -> "ArchiveReader":
        """Return a reader for a nested node."""
        return ArchiveReader(self._get(tag), self._where(tag))

    def read_object(self, tag: str, obj: T) -> T:
        """Let an archivable object load itself from tag; return it."""
        obj.load(self, tag)  # type: ignore[attr-defined]
        return obj

    def nodes(self, tag: str) -> list["ArchiveReader"]:
        """Return readers for an ordered list of nodes."""
        entries = self._get(tag)
        if not isinstance(entries, list):
            raise FormatError(f"'{self._where(tag)}' is not a list of nodes")
        return [
            ArchiveReader(entry, f"{self._where(tag)}[{i}]")
            for i, entry in enumerate(entries)
        ]

    def _get(self, tag: str) -> Any:
        try:
            return self._node[tag]
        except KeyError:
            raise FormatError(f"missing tag '{self._where(tag)}'") from None

    def _where(self, tag: str) -> str:
        return f"{self.path}/{tag}" if self.path else tag


def dump_document(document: Mapping[str, Any], stream: IO[str], indent: int) -> None:
    """Serialize a document to a text stream."""
    try:
        json.dump(document, stream, indent=indent, allow_nan=False)
        stream.write("\n")
    except OSError as exc:
        raise ResourceError(f"cannot write archive: {exc}") from exc


def parse_document(stream: IO[str]) -> Any:
    """Parse a document from a text stream."""
    try:
        text = stream.read()
    except OSError as exc:
        raise ResourceError(f"cannot read archive: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise FormatError(f"archive is not valid text: {exc}") from exc
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise FormatError(f"malformed archive: {exc}") from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not allowed")
