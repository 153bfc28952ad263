"""Open key/value annotations attached to individuals."""

from __future__ import annotations

import math
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Iterator

import numpy as np

if TYPE_CHECKING:
    from ealib.archive.document import ArchiveReader, ArchiveWriter

MetaValue = Any


class MetaData(MutableMapping):
    """Ordered mapping of string keys to bool, int, float or str values.

    Values are passed through archives untouched; their meaning belongs to
    whoever put them there. Floats must be finite.
    """

    def __init__(self, values: dict[str, MetaValue] | None = None) -> None:
        self._values: dict[str, MetaValue] = {}
        if values:
            self.update(values)

    def __getitem__(self, key: str) -> MetaValue:
        return self._values[key]

    def __setitem__(self, key: str, value: MetaValue) -> None:
        if not isinstance(key, str):
            raise TypeError(f"meta data keys must be str, got {type(key).__name__}")
        if isinstance(value, np.generic):
            value = value.item()
        if not isinstance(value, (bool, int, float, str)):
            raise TypeError(
                f"meta data '{key}' must be bool, int, float or str, "
                f"got {type(value).__name__}"
            )
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"meta data '{key}' must be finite, got {value!r}")
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MetaData({self._values!r})"

    def put(self, key: str, value: MetaValue) -> None:
        """Store value under key, replacing any previous value."""
        self[key] = value

    def exists(self, key: str) -> bool:
        return key in self._values

    def save(self, writer: "ArchiveWriter", tag: str) -> None:
        with writer.node(tag):
            for key, value in self._values.items():
                writer.write(key, value)

    def load(self, reader: "ArchiveReader", tag: str) -> None:
        node = reader.node(tag)
        values = {key: node.read(key) for key in node.tags()}
        self._values = values
