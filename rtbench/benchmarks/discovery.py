# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Benchmark discovery.

Scans the benchmark directory and decides which programs take part in this
run. A program is eligible when both its TypeScript source (`<name>.ts`) and
its JavaScript version (`<name>.js`) exist side by side; a program missing
either one is left out without an error, since the directory also holds
helper scripts and work-in-progress sources.

Eligible programs are then filtered by the registry's `skip` flag and by the
`--benchmarks` allow-list. The result keeps directory-listing order.
"""

from pathlib import Path
from typing import Mapping

from rtbench.benchmarks.models import (
    PREBUILT_EXTENSION,
    SOURCE_EXTENSION,
    BenchmarkOptions,
    BenchmarkUnit,
)
from rtbench.benchmarks.registry import DEFAULT_REGISTRY, lookup
from rtbench.config.schema import RunOptions
from rtbench.logging.logger import get_logger

logger = get_logger(__name__)


def find_candidates(benchmark_dir: Path) -> list[str]:
    """
    Names of every program with both a .ts source and a .js counterpart.

    Order follows the directory listing, not sorted.
    """
    if not benchmark_dir.is_dir():
        raise FileNotFoundError(f"Benchmark directory not found: {benchmark_dir}")

    names: list[str] = []
    for entry in benchmark_dir.iterdir():
        if entry.suffix != SOURCE_EXTENSION or not entry.is_file():
            continue
        counterpart = entry.with_suffix(PREBUILT_EXTENSION)
        if not counterpart.is_file():
            logger.debug(
                "No JavaScript counterpart, not a benchmark",
                extra={"source": entry.name, "expected": counterpart.name},
            )
            continue
        names.append(entry.stem)
    return names


def discover_benchmarks(
    benchmark_dir: Path,
    options: RunOptions,
    registry: Mapping[str, BenchmarkOptions] = DEFAULT_REGISTRY,
) -> list[BenchmarkUnit]:
    """
    Build the ordered list of benchmark units to process in this run.

    Args:
        benchmark_dir: Directory holding the benchmark programs.
        options: Resolved run options (benchmark filter, stack and heap sizes).
        registry: Per-benchmark quirks, keyed by name.

    Returns:
        One BenchmarkUnit per program that survives eligibility and filtering.

    Raises:
        FileNotFoundError: benchmark_dir does not exist.
    """
    units: list[BenchmarkUnit] = []

    for name in find_candidates(benchmark_dir):
        entry = lookup(registry, name)

        if entry.skip:
            logger.info("Skip benchmark", extra={"benchmark": name, "reason": "registry"})
            continue

        if not options.allows_benchmark(name):
            logger.info(
                "Skip benchmark due to argument filter",
                extra={"benchmark": name, "reason": "filter"},
            )
            continue

        units.append(BenchmarkUnit(
            name=name,
            directory=benchmark_dir,
            skip=False,
            runtime_flags=entry.runtime_flags(options.stack_size, options.gc_heap),
        ))

    if options.benchmarks is not None:
        missing = sorted(options.benchmarks - {unit.name for unit in units})
        if missing:
            logger.warning(
                "Requested benchmarks were not found or are skipped",
                extra={"benchmarks": missing},
            )

    logger.info(
        "Benchmarks discovered",
        extra={"count": len(units), "benchmarks": [unit.name for unit in units]},
    )
    return units
