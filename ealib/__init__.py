"""Individual data model and archive serialization for evolutionary runs."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "archive",
    "config",
    "evolution",
]
