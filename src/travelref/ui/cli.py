from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from travelref.app import build_default_pipeline, seed_reference_data
from travelref.config import (
    ConfigurationError,
    configure_logging,
    get_seed_config,
    parse_seed_mode,
)
from travelref.domain.ports.sources import Dataset
from travelref.domain.seeding import StageName

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from travelref.config import SeedConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed travel reference data")
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed = subparsers.add_parser("seed", help="Run the seed pipeline")
    seed.add_argument(
        "--mode",
        type=str,
        help="full clears and reseeds, additive leaves non-empty collections alone "
        "(defaults to config)",
    )
    seed.add_argument(
        "--datasets-dir",
        type=str,
        help="Directory holding the cached dataset extracts (defaults to config)",
    )
    seed.add_argument(
        "--remote",
        nargs="+",
        default=[],
        metavar="DATASET",
        help="Fetch these datasets from their remote source instead of the cache",
    )
    seed.add_argument(
        "--no-fuzzy",
        action="store_true",
        help="Disable fuzzy country name matching",
    )
    seed.add_argument(
        "--only",
        nargs="+",
        default=[],
        metavar="STAGE",
        help="Run only these stages",
    )
    seed.add_argument(
        "--skip",
        nargs="+",
        default=[],
        metavar="STAGE",
        help="Do not run these stages",
    )

    subparsers.add_parser("stages", help="List the seed stages and their dependencies")

    return parser.parse_args(list(argv))


def _parse_stages(values: Sequence[str]) -> frozenset[StageName]:
    stages: set[StageName] = set()
    for value in values:
        try:
            stages.add(StageName(value.strip().lower()))
        except ValueError as exc:
            choices = ", ".join(name.value for name in StageName)
            raise ValueError(f"Unknown stage {value!r} (expected one of {choices})") from exc
    return frozenset(stages)


def _parse_datasets(values: Sequence[str]) -> frozenset[str]:
    datasets: set[str] = set()
    for value in values:
        try:
            datasets.add(Dataset(value.strip().lower()).value)
        except ValueError as exc:
            choices = ", ".join(dataset.value for dataset in Dataset)
            raise ValueError(f"Unknown dataset {value!r} (expected one of {choices})") from exc
    return frozenset(datasets)


def _seed_config(args: argparse.Namespace) -> SeedConfig:
    config = get_seed_config()
    changes: dict[str, object] = {}
    if args.mode is not None:
        changes["mode"] = parse_seed_mode(args.mode)
    if args.datasets_dir is not None:
        changes["datasets_dir"] = Path(args.datasets_dir).expanduser()
    if args.remote:
        changes["remote_datasets"] = config.remote_datasets | _parse_datasets(args.remote)
    if args.no_fuzzy:
        changes["fuzzy_matching"] = False
    return config.with_overrides(**changes) if changes else config


def format_stage_graph() -> str:
    lines: list[str] = []
    for stage in build_default_pipeline().stages:
        depends = ", ".join(sorted(stage.depends_on)) or "-"
        collections = ", ".join(stage.collections)
        lines.append(f"{stage.name:<22} depends on: {depends:<12} writes: {collections}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "seed":
            config = _seed_config(parsed_args)
            only = _parse_stages(parsed_args.only)
            skip = _parse_stages(parsed_args.skip)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    if parsed_args.command == "stages":
        print(format_stage_graph())  # noqa: T201
        return

    try:
        report = seed_reference_data(config, only=only or None, skip=skip or None)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during seed run")
        sys.exit(1)

    if report.failed:
        log.error("Seed run finished with failed stages: %s", ", ".join(report.failed))
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
