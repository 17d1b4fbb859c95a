"""Dataset source adapters: cached extracts and their remote fallbacks."""

from __future__ import annotations

from .catalog import CATALOG, DatasetFormat, DatasetSpec
from .datasets import DatasetSources
from .remote import RemoteFetcher

__all__ = [
    "CATALOG",
    "DatasetFormat",
    "DatasetSources",
    "DatasetSpec",
    "RemoteFetcher",
]
