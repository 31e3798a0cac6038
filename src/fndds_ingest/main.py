"""Command line entry point for the FNDDS ingest."""

import argparse
import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from fndds_ingest.app_logging import configure_logging
from fndds_ingest.config import Settings
from fndds_ingest.containers import build_container
from fndds_ingest.domain.ingest import IngestReport
from fndds_ingest.errors import IngestError

_logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="fndds-ingest",
        description="Merge FNDDS survey extracts into aggregate food documents.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding food.csv and its dependent extracts",
    )
    parser.add_argument("--source", help="Source tag stored on every food")
    parser.add_argument(
        "--no-serialize-flushes",
        action="store_true",
        help="Do not lock foods while join workers update them",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ingest and return a process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    container = build_container(Settings(**_overrides(args)))
    data_dir = container.settings.data_dir
    try:
        report = asyncio.run(container.ingest_service.run(data_dir))
    except IngestError as exc:
        _logger.error("Ingest aborted before joins started: %s", exc)
        return 1
    print(_format_report(report))
    return 0 if report.ok else 1


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    overrides: dict[str, object] = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.source:
        overrides["source_tag"] = args.source
    if args.no_serialize_flushes:
        overrides["serialize_flushes"] = False
    return overrides


def _format_report(report: IngestReport) -> str:
    counts = report.counts
    lines = [
        f"Foods: {counts.foods}",
        f"Servings: {counts.servings}",
        f"Nutrients: {counts.nutrients}",
        f"Other: {counts.other}",
    ]
    for outcome in report.outcomes:
        status = "ok" if outcome.ok else f"failed ({outcome.error})"
        lines.append(f"{outcome.name}: {status}")
    return "\n".join(lines)


if __name__ == "__main__":
    raise SystemExit(main())
