from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from travelref.config import (
    ConfigurationError,
    SeedConfig,
    SeedMode,
    env_flag,
    env_list,
    get_seed_config,
    get_storage_config,
    parse_seed_mode,
)


def test_seed_config_defaults_to_full_cached_run(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("TRAVELREF_DATA_DIR", str(tmp_path))
    for name in (
        "TRAVELREF_DATASETS_DIR",
        "TRAVELREF_SEED_MODE",
        "TRAVELREF_REMOTE_DATASETS",
        "TRAVELREF_FUZZY_MATCHING",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_seed_config()

    assert config.mode is SeedMode.FULL
    assert config.datasets_dir == tmp_path.resolve() / "datasets"
    assert config.remote_datasets == frozenset()
    assert config.fuzzy_matching is True


def test_seed_config_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TRAVELREF_DATASETS_DIR", str(tmp_path / "extracts"))
    monkeypatch.setenv("TRAVELREF_SEED_MODE", " Additive ")
    monkeypatch.setenv("TRAVELREF_REMOTE_DATASETS", "countries, ,timezones")
    monkeypatch.setenv("TRAVELREF_FUZZY_MATCHING", "off")

    config = get_seed_config()

    assert config.datasets_dir == tmp_path / "extracts"
    assert config.mode is SeedMode.ADDITIVE
    assert config.remote_datasets == frozenset({"countries", "timezones"})
    assert config.fuzzy_matching is False


def test_invalid_seed_mode_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="expected one of full, additive"):
        parse_seed_mode("partial")


def test_seed_config_rejects_non_positive_sizes(tmp_path: Path) -> None:
    config = SeedConfig(datasets_dir=tmp_path)

    with pytest.raises(ConfigurationError, match="batch_size"):
        config.with_overrides(batch_size=0)
    with pytest.raises(ConfigurationError, match="fetch_timeout_seconds"):
        config.with_overrides(fetch_timeout_seconds=0)


def test_env_flag_rejects_unknown_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")

    with pytest.raises(ConfigurationError, match="EXAMPLE_FLAG"):
        env_flag("EXAMPLE_FLAG", default=True)


def test_env_helpers_treat_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", "   ")
    monkeypatch.setenv("EXAMPLE_LIST", "  ")

    assert env_flag("EXAMPLE_FLAG", default=False) is False
    assert env_list("EXAMPLE_LIST") == ()


def test_storage_config_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TRAVELREF_DATA_DIR", str(tmp_path / "data"))

    storage = get_storage_config()

    expected = (tmp_path / "data" / "travelref.db").resolve()
    assert storage.database_uri() == f"sqlite+aiosqlite:///{expected}"
    assert storage.http_cache_path().parent.exists()
