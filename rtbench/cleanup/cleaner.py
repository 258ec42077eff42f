# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Generated-artifact cleanup.

After a run (unless `--no-clean` is given) the ts2wasm outputs and the build
log are removed from the benchmark directory. Only files matching the
patterns below are touched: benchmark sources, the JavaScript versions and
the MoonBit projects are never deleted.

Failures to delete are collected and reported, not raised; a leftover .aot
file is not a reason to fail a finished run.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from rtbench.build.pipeline import BUILD_LOG_NAME
from rtbench.logging.logger import get_logger

_logger: logging.Logger = get_logger(__name__)

_ARTIFACT_PATTERNS: tuple[str, ...] = ("*.wasm", "*.wat", "*.aot", BUILD_LOG_NAME)


@dataclass(frozen=True)
class CleanResult:
    """Outcome of a cleanup pass."""

    removed_files: int
    freed_bytes: int
    errors: list[str]


def clean_artifacts(benchmark_dir: Path) -> CleanResult:
    """
    Remove generated artifacts from the top level of the benchmark directory.

    Args:
        benchmark_dir: The directory the benchmarks were built in.

    Returns:
        CleanResult with counts of removed files and any errors.
    """
    if not benchmark_dir.is_dir():
        raise FileNotFoundError(f"Benchmark directory not found: {benchmark_dir}")

    removed_files = 0
    freed_bytes = 0
    errors: list[str] = []

    for pattern in _ARTIFACT_PATTERNS:
        for match in sorted(benchmark_dir.glob(pattern)):
            if not match.is_file():
                continue
            try:
                size = match.stat().st_size
                match.unlink()
                removed_files += 1
                freed_bytes += size
                _logger.debug("Removed artifact", extra={"path": str(match)})
            except OSError as err:
                errors.append(f"Failed to remove {match}: {err}")

    _logger.info(
        "Cleanup complete",
        extra={
            "benchmark_dir": str(benchmark_dir),
            "removed_files": removed_files,
            "freed_kb": f"{freed_bytes / 1024:.1f}",
            "errors": len(errors),
        },
    )
    for error in errors:
        _logger.warning("Cleanup error", extra={"error": error})

    return CleanResult(
        removed_files=removed_files,
        freed_bytes=freed_bytes,
        errors=errors,
    )
