"""Fitness values with an explicit null (unevaluated) state.

A null fitness is stored as NaN, which text archives cannot be trusted to
round-trip. Archives therefore record nullity separately and never ask a null
fitness to save its value. Infinite values are evaluated and are archived as
the tokens ``inf`` and ``-inf``.

Ordering puts null below every evaluated value, so sorting a population
ascending leaves unevaluated individuals first.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable, Protocol, runtime_checkable

from ealib.archive.errors import ParseError
from ealib.evolution.genome import decode_genome, encode_genome

if TYPE_CHECKING:
    from ealib.archive.document import ArchiveReader, ArchiveWriter

_INFINITY_TOKENS = ("inf", "-inf")


@runtime_checkable
class Fitness(Protocol):
    """Interface required of an individual's fitness."""

    def is_null(self) -> bool:
        ...

    def nullify(self) -> None:
        ...

    def __lt__(self, other) -> bool:
        ...

    def save(self, writer: "ArchiveWriter", tag: str) -> None:
        ...

    def load(self, reader: "ArchiveReader", tag: str) -> None:
        ...


class ScalarFitness:
    """Single real-valued fitness; higher is better."""

    __slots__ = ("_value",)

    def __init__(self, value: float | None = None) -> None:
        self._value = math.nan
        if value is not None:
            self.set(value)

    @property
    def value(self) -> float:
        """Raw value; NaN while null."""
        return self._value

    def set(self, value: float) -> None:
        """Assign an evaluated value."""
        self._value = float(value)

    def is_null(self) -> bool:
        return math.isnan(self._value)

    def nullify(self) -> None:
        self._value = math.nan

    def __lt__(self, other: "ScalarFitness") -> bool:
        if not isinstance(other, ScalarFitness):
            return NotImplemented
        if other.is_null():
            return False
        if self.is_null():
            return True
        return self._value < other._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScalarFitness):
            return NotImplemented
        if self.is_null() or other.is_null():
            return self.is_null() and other.is_null()
        return self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.is_null():
            return "ScalarFitness(null)"
        return f"ScalarFitness({self._value!r})"

    def save(self, writer: "ArchiveWriter", tag: str) -> None:
        if self.is_null():
            raise ValueError("a null fitness has no value to archive")
        if math.isinf(self._value):
            writer.write(tag, repr(self._value))
        else:
            writer.write(tag, self._value)

    def load(self, reader: "ArchiveReader", tag: str) -> None:
        raw = reader.read(tag)
        if isinstance(raw, str):
            if raw not in _INFINITY_TOKENS:
                raise ParseError(f"'{tag}' expected float, got {raw!r}")
            value = float(raw)
        else:
            value = reader.read(tag, float)
        if math.isnan(value):
            raise ParseError(f"'{tag}' holds NaN but is marked as evaluated")
        self._value = value


class MultiObjectiveFitness:
    """Vector of objective values; each is maximized.

    Null when there are no objectives or any of them is NaN. Evaluated
    vectors are ordered lexicographically. Archived with the same packed
    token string as numeric genomes.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[float] | None = None) -> None:
        self._values: tuple[float, ...] = ()
        if values is not None:
            self.set(values)

    @property
    def values(self) -> tuple[float, ...]:
        return self._values

    def set(self, values: Iterable[float]) -> None:
        self._values = tuple(float(v) for v in values)

    def is_null(self) -> bool:
        return not self._values or any(math.isnan(v) for v in self._values)

    def nullify(self) -> None:
        self._values = ()

    def dominates(self, other: "MultiObjectiveFitness") -> bool:
        """Pareto dominance: no objective worse and at least one better."""
        if self.is_null() or other.is_null():
            return False
        if len(self._values) != len(other._values):
            raise ValueError("cannot compare fitness vectors of different length")
        pairs = list(zip(self._values, other._values))
        return all(a >= b for a, b in pairs) and any(a > b for a, b in pairs)

    def __len__(self) -> int:
        return len(self._values)

    def __lt__(self, other: "MultiObjectiveFitness") -> bool:
        if not isinstance(other, MultiObjectiveFitness):
            return NotImplemented
        if other.is_null():
            return False
        if self.is_null():
            return True
        return self._values < other._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiObjectiveFitness):
            return NotImplemented
        if self.is_null() or other.is_null():
            return self.is_null() and other.is_null()
        return self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.is_null():
            return "MultiObjectiveFitness(null)"
        return f"MultiObjectiveFitness({list(self._values)!r})"

    def save(self, writer: "ArchiveWriter", tag: str) -> None:
        if self.is_null():
            raise ValueError("a null fitness has no value to archive")
        writer.write(tag, encode_genome(self._values, finite=False))

    def load(self, reader: "ArchiveReader", tag: str) -> None:
        values = decode_genome(
            reader.read(tag, str), float, factory=tuple, finite=False
        )
        if not values:
            raise ParseError(f"'{tag}' has no objectives but is marked as evaluated")
        self._values = values
