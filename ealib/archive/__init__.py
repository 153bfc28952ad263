"""Archive module for persisting individuals and populations."""

from __future__ import annotations

__all__ = [
    "errors",
    "document",
    "io",
    "checkpoint",
]
