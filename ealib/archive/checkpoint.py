"""Population checkpoints: many individuals in one archive document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from ealib.archive.document import (
    ArchiveReader,
    ArchiveWriter,
    dump_document,
    parse_document,
)
from ealib.archive.errors import ArchiveError, FormatError, ResourceError
from ealib.config import Config
from ealib.evolution.fitness import ScalarFitness
from ealib.evolution.genome import RealString
from ealib.evolution.individual import Individual

logger = logging.getLogger(__name__)


def checkpoint_path(
    generation: int,
    directory: str | Path | None = None,
    config: type[Config] | None = None,
) -> Path:
    """Default file name for a generation's checkpoint."""
    config = config or Config
    out_dir = Path(directory) if directory is not None else Path(config.CHECKPOINT_DIR)
    return out_dir / f"population_gen_{generation:04d}.json"


def save_population(
    path: str | Path,
    individuals: Sequence[Individual],
    generation: int | None = None,
    config: type[Config] | None = None,
) -> Path:
    """Write individuals, in order, to a checkpoint file."""
    config = config or Config
    path = Path(path)

    writer = ArchiveWriter()
    writer.write("size", len(individuals))
    if generation is not None:
        writer.write("generation", int(generation))
    writer.write_nodes("individuals", individuals, lambda ind, w: ind.save(w))
    document = writer.document(config.POPULATION_ROOT_TAG)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        f = open(path, "w", encoding=config.ARCHIVE_ENCODING)
    except OSError as exc:
        raise ResourceError(f"cannot open {path} for writing: {exc}") from exc
    with f:
        dump_document(document, f, config.ARCHIVE_INDENT)

    logger.debug("Saved %d individuals to %s", len(individuals), path)
    return path


def load_population(
    path: str | Path,
    representation_type: Callable[[], object] = RealString,
    fitness_type: Callable[[], object] = ScalarFitness,
    config: type[Config] | None = None,
) -> list[Individual]:
    """Read every individual from a checkpoint file, in saved order."""
    config = config or Config
    path = Path(path)

    try:
        f = open(path, encoding=config.ARCHIVE_ENCODING)
    except OSError as exc:
        raise ResourceError(f"cannot open {path}: {exc}") from exc

    try:
        with f:
            reader = ArchiveReader.from_document(
                parse_document(f), config.POPULATION_ROOT_TAG
            )
        size = reader.read("size", int)
        individuals: list[Individual] = []
        for node in reader.nodes("individuals"):
            individual = Individual(representation_type(), fitness_type=fitness_type)
            individual.load(node)
            individuals.append(individual)
        if len(individuals) != size:
            raise FormatError(
                f"checkpoint declares {size} individuals but holds {len(individuals)}"
            )
    except ArchiveError as exc:
        logger.warning("Failed to load population from %s: %s", path, exc)
        raise

    logger.debug("Loaded %d individuals from %s", len(individuals), path)
    return individuals


def read_checkpoint_generation(
    path: str | Path,
    config: type[Config] | None = None,
) -> int | None:
    """Return the generation recorded in a checkpoint, if any."""
    config = config or Config
    path = Path(path)
    try:
        f = open(path, encoding=config.ARCHIVE_ENCODING)
    except OSError as exc:
        raise ResourceError(f"cannot open {path}: {exc}") from exc

    try:
        with f:
            reader = ArchiveReader.from_document(
                parse_document(f), config.POPULATION_ROOT_TAG
            )
        if not reader.has("generation"):
            return None
        return reader.read("generation", int)
    except ArchiveError as exc:
        logger.warning("Failed to read checkpoint generation from %s: %s", path, exc)
        raise
