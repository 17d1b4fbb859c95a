"""Ports consumed by the seed pipeline."""

from __future__ import annotations

from .sources import Dataset, SourceReader
from .store import Condition, DocumentStore, Operator, Where, find_one

__all__ = [
    "Condition",
    "Dataset",
    "DocumentStore",
    "Operator",
    "SourceReader",
    "Where",
    "find_one",
]
