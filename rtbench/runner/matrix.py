# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime execution matrix and the per-benchmark run loop.

For one built benchmark, run_runtime_matrix walks RUNTIMES in declared order,
skips the runtimes excluded by `--runtimes`, and samples every other one.
run_benchmarks drives the whole thing for a list of benchmarks: build, then
measure, one benchmark at a time. Nothing here runs concurrently; two
commands running side by side would compete for CPU and memory and skew the
comparison.
"""

from typing import Callable, Optional

from rtbench.benchmarks.models import BenchmarkUnit
from rtbench.build.pipeline import ArtifactSet, BuildError, build_benchmark
from rtbench.config.schema import RunOptions
from rtbench.logging.logger import get_logger
from rtbench.process.executor import CommandRunner, execute_command
from rtbench.runner.models import BenchmarkResult, Measurement
from rtbench.runner.runtimes import RUNTIMES, build_command
from rtbench.runner.sampler import sample_command
from rtbench.toolchain.locator import Toolchain

logger = get_logger(__name__)

Sampler = Callable[..., Optional[float]]


def run_runtime_matrix(
    unit: BenchmarkUnit,
    artifacts: ArtifactSet,
    toolchain: Toolchain,
    options: RunOptions,
    runner: CommandRunner = execute_command,
    sampler: Sampler = sample_command,
) -> BenchmarkResult:
    """
    Measure one benchmark under every enabled runtime.

    Returns a BenchmarkResult with one Measurement per enabled runtime, in
    RUNTIMES order.
    """
    result = BenchmarkResult(benchmark=unit.name)

    for spec in RUNTIMES:
        if not options.allows_runtime(spec.runtime_id.value):
            logger.info(
                "Skip runtime due to argument filter",
                extra={"benchmark": unit.name, "runtime": spec.runtime_id.value},
            )
            continue

        argv = build_command(spec, unit, artifacts, toolchain)
        elapsed = sampler(
            argv,
            warmup=options.warmup,
            times=options.times,
            timeout_seconds=options.timeout_seconds,
            cwd=unit.directory,
            runner=runner,
        )
        result.measurements[spec.runtime_id] = Measurement(
            benchmark=unit.name,
            runtime=spec.runtime_id,
            elapsed_ms=elapsed,
        )

        logger.info(
            f"{spec.display_name} ... {'failed' if elapsed is None else f'{elapsed:.2f}ms'}",
            extra={
                "benchmark": unit.name,
                "runtime": spec.runtime_id.value,
                "elapsed_ms": None if elapsed is None else round(elapsed, 2),
            },
        )

    return result


def run_benchmarks(
    units: list[BenchmarkUnit],
    toolchain: Toolchain,
    options: RunOptions,
    runner: CommandRunner = execute_command,
    sampler: Sampler = sample_command,
) -> list[BenchmarkResult]:
    """
    Build and measure every benchmark, in order.

    A build failure is confined to its benchmark: it is logged, the benchmark
    gets a result with build_error set and no measurements, and the loop moves
    on to the next one.
    """
    results: list[BenchmarkResult] = []

    for index, unit in enumerate(units):
        logger.info(
            "Benchmark started",
            extra={"benchmark": unit.name, "index": index + 1, "total": len(units)},
        )

        try:
            artifacts = build_benchmark(
                unit, toolchain, timeout_seconds=options.timeout_seconds, runner=runner,
            )
        except BuildError as err:
            logger.error(
                "Build failed, benchmark not measured",
                extra={
                    "benchmark": unit.name,
                    "step": err.step,
                    "command": err.command,
                    "exit_code": err.exit_code,
                    "error": err.detail,
                },
            )
            results.append(BenchmarkResult(benchmark=unit.name, build_error=str(err)))
            continue

        results.append(run_runtime_matrix(
            unit, artifacts, toolchain, options, runner=runner, sampler=sampler,
        ))

    return results
