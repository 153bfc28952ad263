"""Evolution module: individuals, genomes, fitness and metadata."""

from __future__ import annotations

__all__ = [
    "genome",
    "fitness",
    "metadata",
    "individual",
    "selection",
]
