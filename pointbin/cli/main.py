"""
pointbin - Main Entry Point.

This is the CLI entry point that uses tyro for argument parsing.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import tyro

from pointbin.config import MAX_POINT_COUNT, LoaderConfig
from pointbin.domain.interfaces import DecodeMode
from pointbin.infrastructure.formats.binary.loader import BinaryPointCloudLoader

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """
    Setup logging configuration.

    Parameters
    ----------
    level : str
        Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(
    path: Annotated[Path, tyro.conf.Positional],
    mode: DecodeMode = DecodeMode.AUTO,
    max_point_count: int = MAX_POINT_COUNT,
    show: int = 5,
    log_level: str = "INFO",
) -> int:
    """
    Load a binary point cloud and print a summary.

    Parameters
    ----------
    path : Path
        Path to a .bin point cloud file
    mode : DecodeMode
        Decode strategy: streamed, bulk, or auto (bulk when the host layout allows)
    max_point_count : int
        Reject headers declaring more points than this
    show : int
        Number of leading points to print
    log_level : str
        Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)

    Examples
    --------
    Inspect a file:
        pointbin-inspect ./scans/room.bin

    Force the streamed decoder with debug timings:
        pointbin-inspect ./scans/room.bin --mode streamed --log-level DEBUG
    """
    setup_logging(log_level)

    config = LoaderConfig(decode_mode=mode, max_point_count=max_point_count)
    with BinaryPointCloudLoader(config) as loader:
        if not loader.can_load(path):
            logger.warning("%s does not have a supported extension %s", path, sorted(loader.supported_extensions))
        result = loader.load(path)

    if not result.ok:
        print(f"Failed to load {path}: {result.error}", file=sys.stderr)
        return 1

    collection = result.collection
    print(collection)
    bounds = collection.bounds
    print(f"  min: {bounds.minimum}")
    print(f"  max: {bounds.maximum}")
    print(f"  decoder: {result.strategy.value}")
    for stage, ms in result.stage_timings.items():
        print(f"  {stage}: {ms:.2f} ms")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    for index in range(min(show, len(collection))):
        print(f"  {collection[index]}")
    return 0


def cli() -> None:
    """Entry point for the console script."""
    raise SystemExit(tyro.cli(main))


if __name__ == "__main__":
    cli()
