"""Save and load single individuals as self-contained archive documents."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Callable, Union

from ealib.archive.document import (
    ArchiveReader,
    ArchiveWriter,
    dump_document,
    parse_document,
)
from ealib.archive.errors import ArchiveError, ResourceError
from ealib.config import Config
from ealib.evolution.fitness import ScalarFitness
from ealib.evolution.genome import RealString
from ealib.evolution.individual import Individual

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def save_individual(
    output: IO[str] | PathLike,
    individual: Individual,
    config: type[Config] | None = None,
) -> None:
    """Write individual as a complete document to a text stream or path."""
    config = config or Config
    writer = ArchiveWriter()
    individual.save(writer)
    document = writer.document(config.INDIVIDUAL_ROOT_TAG)

    if _is_path(output):
        path = Path(output)
        try:
            f = open(path, "w", encoding=config.ARCHIVE_ENCODING)
        except OSError as exc:
            raise ResourceError(f"cannot open {path} for writing: {exc}") from exc
        with f:
            dump_document(document, f, config.ARCHIVE_INDENT)
        logger.debug("Saved individual %d to %s", individual.name, path)
    else:
        dump_document(document, output, config.ARCHIVE_INDENT)
        logger.debug("Saved individual %d to stream", individual.name)


def load_individual(
    source: IO[str] | PathLike,
    representation_type: Callable[[], object] = RealString,
    fitness_type: Callable[[], object] = ScalarFitness,
    config: type[Config] | None = None,
) -> Individual:
    """Read one individual from a text stream or path.

    A fresh individual is built from representation_type and fitness_type
    and only returned if every field loads.
    """
    config = config or Config
    if _is_path(source):
        path = Path(source)
        try:
            f = open(path, encoding=config.ARCHIVE_ENCODING)
        except OSError as exc:
            raise ResourceError(f"cannot open {path}: {exc}") from exc
        with f:
            individual = _load(f, representation_type, fitness_type, config, str(path))
        logger.debug("Loaded individual %d from %s", individual.name, path)
        return individual

    individual = _load(source, representation_type, fitness_type, config, "stream")
    logger.debug("Loaded individual %d from stream", individual.name)
    return individual


def _load(
    stream: IO[str],
    representation_type: Callable[[], object],
    fitness_type: Callable[[], object],
    config: type[Config],
    origin: str,
) -> Individual:
    try:
        reader = ArchiveReader.from_document(
            parse_document(stream), config.INDIVIDUAL_ROOT_TAG
        )
        individual = Individual(representation_type(), fitness_type=fitness_type)
        individual.load(reader)
    except ArchiveError as exc:
        logger.warning("Failed to load individual from %s: %s", origin, exc)
        raise
    return individual


def _is_path(target: object) -> bool:
    return isinstance(target, (str, os.PathLike))
