"""Error taxonomy for seed runs.

Field parse failures never raise (normalizers return ``None``) and resolution failures
are reported as skipped outcomes, so only store and source problems surface as
exceptions.
"""

from __future__ import annotations


class SeedError(RuntimeError):
    """Base class for seed pipeline errors."""


class StoreUnavailableError(SeedError):
    """The document store cannot be reached; the run cannot make progress."""


class StoreOperationError(SeedError):
    """A single store operation was rejected (validation or constraint failure)."""

    def __init__(self, message: str, *, collection: str | None = None) -> None:
        super().__init__(message)
        self.collection = collection


class SourceUnavailableError(SeedError):
    """A dataset could not be read at all; the owning stage fails."""

    def __init__(self, message: str, *, dataset: str | None = None) -> None:
        super().__init__(message)
        self.dataset = dataset
