from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from travelref.config import SeedConfig, SeedMode
from travelref.domain.seeding import RunReport, StageName, StageReport, StageStatus
from travelref.ui import cli


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, object]:
    monkeypatch.setenv("TRAVELREF_DATA_DIR", str(tmp_path))
    for name in ("TRAVELREF_DATASETS_DIR", "TRAVELREF_SEED_MODE", "TRAVELREF_REMOTE_DATASETS"):
        monkeypatch.delenv(name, raising=False)
    calls: dict[str, object] = {}

    def fake_seed(config: SeedConfig, **kwargs: object) -> RunReport:
        calls["config"] = config
        calls.update(kwargs)
        return RunReport()

    monkeypatch.setattr(cli, "seed_reference_data", fake_seed)
    return calls


def test_seed_defaults(captured: dict[str, object], tmp_path: Path) -> None:
    cli.main(["seed"])

    config = captured["config"]
    assert isinstance(config, SeedConfig)
    assert config.mode is SeedMode.FULL
    assert config.datasets_dir == tmp_path.resolve() / "datasets"
    assert captured["only"] is None
    assert captured["skip"] is None


def test_seed_flags(captured: dict[str, object], tmp_path: Path) -> None:
    cli.main(
        [
            "seed",
            "--mode",
            "additive",
            "--datasets-dir",
            str(tmp_path / "extracts"),
            "--remote",
            "countries",
            "Timezones",
            "--no-fuzzy",
            "--skip",
            "airlines-and-routes",
        ]
    )

    config = captured["config"]
    assert isinstance(config, SeedConfig)
    assert config.mode is SeedMode.ADDITIVE
    assert config.datasets_dir == tmp_path / "extracts"
    assert config.remote_datasets == frozenset({"countries", "timezones"})
    assert config.fuzzy_matching is False
    assert captured["skip"] == frozenset({StageName.AIRLINES_AND_ROUTES})


@pytest.mark.parametrize(
    "argv",
    [
        ["seed", "--mode", "partial"],
        ["seed", "--only", "everything"],
        ["seed", "--remote", "atlantis"],
    ],
)
def test_invalid_arguments_exit_with_usage_error(
    captured: dict[str, object], argv: list[str]
) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)

    assert exc.value.code == 2
    assert "config" not in captured


def test_failed_stage_exits_non_zero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TRAVELREF_DATA_DIR", str(tmp_path))

    def failing_seed(config: SeedConfig, **_: object) -> RunReport:
        return RunReport(stages=[StageReport(StageName.REGIONS, StageStatus.FAILED, error="gone")])

    monkeypatch.setattr(cli, "seed_reference_data", failing_seed)

    with pytest.raises(SystemExit) as exc:
        cli.main(["seed"])

    assert exc.value.code == 1


def test_unexpected_error_exits_non_zero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TRAVELREF_DATA_DIR", str(tmp_path))

    def broken_seed(config: SeedConfig, **_: object) -> RunReport:
        raise RuntimeError("store exploded")

    monkeypatch.setattr(cli, "seed_reference_data", broken_seed)

    with pytest.raises(SystemExit) as exc:
        cli.main(["seed"])

    assert exc.value.code == 1


def test_stages_command_lists_the_graph(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["stages"])

    output = capsys.readouterr().out.splitlines()
    assert [line.split()[0] for line in output] == [name.value for name in StageName]
    assert "depends on: countries" in output[2]
