"""Seed pipeline: ordered stages writing reference data through idempotent upserts.

Stages share a ``SeedContext`` (store, source reader, run options) and report one
``StageStats`` per step. ``SeedPipeline`` clears, sequences and isolates them.
"""

from __future__ import annotations

from .clearing import ClearResult, clear_collection, clear_collections
from .context import SeedContext, SeedOptions
from .orchestrator import (
    RunReport,
    SeedPipeline,
    SeedStage,
    StageName,
    StageReport,
    StageStatus,
)
from .stages import default_stages

__all__ = [
    "ClearResult",
    "RunReport",
    "SeedContext",
    "SeedOptions",
    "SeedPipeline",
    "SeedStage",
    "StageName",
    "StageReport",
    "StageStatus",
    "clear_collection",
    "clear_collections",
    "default_stages",
]
