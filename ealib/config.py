"""Project-wide configuration constants."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar


@dataclass(frozen=True)
class Config:
    """Central configuration constants for ealib archives."""

    # Archive document parameters
    INDIVIDUAL_ROOT_TAG: ClassVar[str] = "individual"  # Root of a single-individual document
    POPULATION_ROOT_TAG: ClassVar[str] = "population"  # Root of a checkpoint document
    ARCHIVE_INDENT: ClassVar[int] = 2  # JSON indentation
    ARCHIVE_ENCODING: ClassVar[str] = "utf-8"  # File encoding

    # Path parameters
    DATA_DIR: ClassVar[str] = "data"  # Base data directory
    CHECKPOINT_DIR: ClassVar[str] = "data/checkpoints"  # Population checkpoints

    @classmethod
    def create_dirs(cls) -> None:
        """Create required data directories."""
        paths = (
            cls.DATA_DIR,
            cls.CHECKPOINT_DIR,
        )
        for path in paths:
            Path(path).mkdir(parents=True, exist_ok=True)
