"""Numeric genomes and their compact token-string codec."""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Callable, ClassVar, Iterable, TypeVar

import numpy as np
from numpy.random import Generator

from ealib.archive.errors import ParseError

if TYPE_CHECKING:
    from ealib.archive.document import ArchiveReader, ArchiveWriter

S = TypeVar("S")

# ASCII decimal text only: no underscores, no leading plus, no other digits.
_COUNT_RE = re.compile(r"[0-9]+")
_INT_RE = re.compile(r"-?[0-9]+")
_REAL_RE = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")
_INF_RE = re.compile(r"-?inf")


def encode_genome(sequence: Iterable[int | float], finite: bool = True) -> str:
    """Pack a numeric sequence as ``"<count> <v0> <v1> ..."``.

    Integers are written as decimal literals, reals with ``repr`` so every
    value parses back to the same float. NaN is always rejected; infinities
    are rejected too unless ``finite`` is False.
    """
    tokens = [_format_codon(value, finite) for value in sequence]
    return " ".join([str(len(tokens)), *tokens])


def decode_genome(
    text: str,
    codon_type: type = float,
    factory: Callable[[list], S] = list,
    finite: bool = True,
) -> S:
    """Unpack a string produced by :func:`encode_genome`.

    Exactly ``count`` tokens must follow the count; anything else is a
    ParseError. ``inf``/``-inf`` tokens are accepted only when ``finite`` is
    False.
    """
    if codon_type not in (int, float):
        raise TypeError(f"codon_type must be int or float, got {codon_type!r}")
    if not isinstance(text, str):
        raise ParseError(f"genome must be a string, got {type(text).__name__}")

    tokens = text.split()
    if not tokens:
        raise ParseError("genome string is empty")

    count = _parse_count(tokens[0])
    values = tokens[1:]
    if len(values) != count:
        raise ParseError(
            f"genome declares {count} values but has {len(values)}"
        )

    codons: list = [None] * count
    for i, token in enumerate(values):
        codons[i] = _parse_codon(token, codon_type, i, finite)
    return factory(codons)


def _format_codon(value: int | float, finite: bool = True) -> str:
    if isinstance(value, (bool, np.bool_)):
        raise TypeError("boolean codons are not supported; use 0 and 1")
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        real = float(value)
        if math.isnan(real) or (finite and math.isinf(real)):
            raise ValueError(f"genome codon must be finite, got {real!r}")
        return repr(real)
    raise TypeError(f"genome codon must be numeric, got {type(value).__name__}")


def _parse_count(token: str) -> int:
    if _INT_RE.fullmatch(token) is None:
        raise ParseError(f"genome count {token!r} is not an integer")
    if _COUNT_RE.fullmatch(token) is None:
        raise ParseError(f"genome count must be non-negative, got {token}")
    return int(token)


def _parse_codon(
    token: str, codon_type: type, index: int, finite: bool
) -> int | float:
    if codon_type is int:
        valid = _INT_RE.fullmatch(token)
    else:
        valid = _REAL_RE.fullmatch(token) or (not finite and _INF_RE.fullmatch(token))
    if not valid:
        raise ParseError(
            f"genome token {index} ({token!r}) is not a valid {codon_type.__name__}"
        )
    value = codon_type(token)
    if finite and codon_type is float and not math.isfinite(value):
        raise ParseError(f"genome token {index} ({token!r}) is not finite")
    return value


class NumericVector(list):
    """Variable-length genome of a single numeric codon type.

    Archived as one packed token string rather than one field per codon.
    """

    codon_type: ClassVar[type] = float
    dtype: ClassVar[type] = np.float64

    def __init__(self, values: Iterable[int | float] | int = ()) -> None:
        if isinstance(values, (int, np.integer)) and not isinstance(values, bool):
            values = [self.codon_type(0)] * int(values)
        super().__init__(self._coerce(v) for v in values)

    @classmethod
    def _coerce(cls, value: int | float) -> int | float:
        if isinstance(value, (bool, np.bool_)):
            value = int(value)
        if cls.codon_type is int and not float(value).is_integer():
            raise ValueError(f"{cls.__name__} codons must be integral, got {value!r}")
        return cls.codon_type(value)

    @classmethod
    def random(
        cls,
        n: int,
        rng: Generator | None = None,
        low: float = 0.0,
        high: float = 1.0,
    ) -> "NumericVector":
        """Draw n codons uniformly from [low, high)."""
        generator = rng or np.random.default_rng()
        if cls.codon_type is int:
            return cls(generator.integers(int(low), int(high), size=n))
        return cls(generator.uniform(low, high, size=n))

    def to_array(self) -> np.ndarray:
        """Return the codons as a numpy array of the codon dtype."""
        return np.asarray(self, dtype=self.dtype)

    def encode(self) -> str:
        return encode_genome(self)

    @classmethod
    def decode(cls, text: str) -> "NumericVector":
        return decode_genome(text, cls.codon_type, factory=cls)

    def save(self, writer: "ArchiveWriter", tag: str) -> None:
        writer.write(tag, self.encode())

    def load(self, reader: "ArchiveReader", tag: str) -> None:
        self[:] = self.decode(reader.read(tag, str))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list.__repr__(self)})"


class Bitstring(NumericVector):
    """Genome of 0/1 integer codons."""

    codon_type: ClassVar[type] = int
    dtype: ClassVar[type] = np.int8

    @classmethod
    def random(
        cls,
        n: int,
        rng: Generator | None = None,
        low: float = 0,
        high: float = 2,
    ) -> "Bitstring":
        return super().random(n, rng, low, high)  # type: ignore[return-value]


class IntString(NumericVector):
    """Genome of signed integer codons."""

    codon_type: ClassVar[type] = int
    dtype: ClassVar[type] = np.int64


class RealString(NumericVector):
    """Genome of real-valued codons."""

    codon_type: ClassVar[type] = float
    dtype: ClassVar[type] = np.float64
