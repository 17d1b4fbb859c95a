"""Seed run configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Final

from .env import env_flag, env_list, optional_env_var
from .errors import ConfigurationError
from .storage import get_storage_config

if TYPE_CHECKING:
    from .storage import StorageConfig

DEFAULT_BATCH_SIZE: Final[int] = 100
DEFAULT_LARGE_BATCH_SIZE: Final[int] = 500
DEFAULT_ROUTE_BATCH_SIZE: Final[int] = 1000
DEFAULT_FETCH_TIMEOUT_SECONDS: Final[float] = 5.0


class SeedMode(StrEnum):
    """How a run treats collections that already hold documents."""

    FULL = "full"
    ADDITIVE = "additive"


@dataclass(frozen=True, slots=True)
class SeedConfig:
    datasets_dir: Path
    mode: SeedMode = SeedMode.FULL
    remote_datasets: frozenset[str] = field(default_factory=frozenset[str])
    fuzzy_matching: bool = True
    batch_size: int = DEFAULT_BATCH_SIZE
    large_batch_size: int = DEFAULT_LARGE_BATCH_SIZE
    route_batch_size: int = DEFAULT_ROUTE_BATCH_SIZE
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        for name in ("batch_size", "large_batch_size", "route_batch_size"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")
        if self.fetch_timeout_seconds <= 0:
            raise ConfigurationError("fetch_timeout_seconds must be positive")

    def with_overrides(self, **changes: object) -> SeedConfig:
        return replace(self, **changes)  # type: ignore[arg-type]


def parse_seed_mode(value: str) -> SeedMode:
    try:
        return SeedMode(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in SeedMode)
        raise ConfigurationError(f"Invalid seed mode {value!r} (expected one of {choices})") from exc


def get_seed_config(*, storage: StorageConfig | None = None) -> SeedConfig:
    storage_config = storage or get_storage_config()

    datasets_dir_value = optional_env_var("TRAVELREF_DATASETS_DIR")
    datasets_dir = (
        Path(datasets_dir_value).expanduser()
        if datasets_dir_value
        else storage_config.datasets_dir()
    )

    mode_value = optional_env_var("TRAVELREF_SEED_MODE")
    mode = parse_seed_mode(mode_value) if mode_value else SeedMode.FULL

    return SeedConfig(
        datasets_dir=datasets_dir,
        mode=mode,
        remote_datasets=frozenset(env_list("TRAVELREF_REMOTE_DATASETS")),
        fuzzy_matching=env_flag("TRAVELREF_FUZZY_MATCHING", default=True),
    )
