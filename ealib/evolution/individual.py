"""Individual: genome, fitness, identity and meta data in one record."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from ealib.evolution.fitness import Fitness, ScalarFitness
from ealib.evolution.genome import RealString
from ealib.evolution.metadata import MetaData

if TYPE_CHECKING:
    from ealib.archive.document import ArchiveReader, ArchiveWriter

R = TypeVar("R")
F = TypeVar("F", bound=Fitness)


class Individual(Generic[R, F]):
    """Candidate solution carried through an evolutionary run.

    The name is assigned by whoever manages the population; an individual
    never numbers itself. Fitness starts null and is set after evaluation.
    Ordering compares fitness only.
    """

    def __init__(
        self,
        genome: R | None = None,
        fitness_type: Callable[[], F] = ScalarFitness,  # type: ignore[assignment]
        name: int = 0,
        generation: float = 0.0,
        update: int = 0,
    ) -> None:
        self.name = int(name)
        self.generation = float(generation)
        self.update = int(update)
        self.fitness: F = fitness_type()
        self.fitness.nullify()
        self.genome: R = genome if genome is not None else RealString()  # type: ignore[assignment]
        self.metadata = MetaData()

    def copy(self) -> "Individual[R, F]":
        """Return an independent copy of every field."""
        return copy.deepcopy(self)

    def save(self, writer: "ArchiveWriter") -> None:
        """Write this individual's fields into the writer's current node."""
        writer.write("name", self.name)
        writer.write("generation", self.generation)
        null_fitness = self.fitness.is_null()
        writer.write("null_fitness", null_fitness)
        if not null_fitness:
            writer.write_object("fitness", self.fitness)
        writer.write_object("representation", self.genome)
        writer.write_object("meta_data", self.metadata)
        writer.write("update", self.update)

    def load(self, reader: "ArchiveReader") -> None:
        """Read this individual's fields from the reader's node.

        On failure the individual is left partially loaded and must be
        discarded.
        """
        self.name = reader.read("name", int)
        self.generation = reader.read("generation", float)
        null_fitness = reader.read("null_fitness", bool)
        if null_fitness:
            self.fitness.nullify()
        else:
            reader.read_object("fitness", self.fitness)
        reader.read_object("representation", self.genome)
        reader.read_object("meta_data", self.metadata)
        self.update = reader.read("update", int)

    def __lt__(self, other: "Individual[R, F]") -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return self.fitness < other.fitness

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return (
            self.name == other.name
            and self.generation == other.generation
            and self.update == other.update
            and self.fitness == other.fitness
            and self.genome == other.genome
            and self.metadata == other.metadata
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Individual(name={self.name}, generation={self.generation}, "
            f"update={self.update}, fitness={self.fitness!r}, "
            f"genome={type(self.genome).__name__}(len={len(self.genome)}))"  # type: ignore[arg-type]
        )


def compare_individuals(a: Individual, b: Individual) -> int:
    """Three-way fitness comparison: -1 if a is worse, 1 if better, else 0."""
    if a.fitness < b.fitness:
        return -1
    if b.fitness < a.fitness:
        return 1
    return 0
