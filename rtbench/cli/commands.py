# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Run command handler.

Wires the pieces together in the order a run needs them: run options, harness
config, toolchain, discovery, build + measure per benchmark, cleanup, report.
Anything that makes the whole run pointless (bad options, unreadable config,
missing engines, no benchmark directory) ends the process here with the
matching exit code before a single command has been executed.

Diagnostics go through the structured logger on stderr. Standard output gets
the usage text or the final table and nothing else.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from rtbench.cli.exit_codes import (
    CONFIG_ERROR,
    RUNTIME_ERROR,
    SUCCESS,
    VALIDATION_ERROR,
)
from rtbench.config.exceptions import ConfigError, HelpRequested
from rtbench.config.loader import load_config
from rtbench.config.options import format_usage, resolve_options
from rtbench.config.schema import HarnessConfig, RunOptions
from rtbench.logging.logger import configure_logging, get_logger
from rtbench.process.executor import CommandRunner, execute_command
from rtbench.runner.runtimes import RUNTIME_IDS
from rtbench.toolchain.locator import ToolchainNotFoundError, resolve_toolchain

logger: logging.Logger = get_logger("rtbench.cli.run")


def _load_harness_config(config_path: Optional[str]) -> HarnessConfig:
    if config_path is None:
        return HarnessConfig()
    return load_config(Path(config_path))


def _resolve_benchmark_dir(args: argparse.Namespace, config: HarnessConfig) -> Path:
    """--benchmark-dir wins over the config file, which wins over the working directory."""
    if getattr(args, "benchmark_dir", None):
        return Path(args.benchmark_dir)
    if config.benchmark_directory:
        return Path(config.benchmark_directory)
    return Path.cwd()


def _log_run_options(options: RunOptions, benchmark_dir: Path) -> None:
    logger.info(
        "Run options",
        extra={
            "benchmark_dir": str(benchmark_dir),
            "strategy": f"run {options.times} times and get average",
            "warmup": options.warmup,
            "clean": options.clean,
            "benchmarks": sorted(options.benchmarks) if options.benchmarks is not None else None,
            "runtimes": sorted(options.runtimes) if options.runtimes is not None else None,
            "timeout_seconds": options.timeout_seconds,
        },
    )
    if options.runtimes is not None:
        unknown_runtimes = sorted(options.runtimes - RUNTIME_IDS)
        if unknown_runtimes:
            logger.warning(
                "Unknown runtime identifiers in --runtimes",
                extra={"runtimes": unknown_runtimes, "known": sorted(RUNTIME_IDS)},
            )


def handle_run(
    args: argparse.Namespace,
    tokens: Sequence[str],
    runner: CommandRunner = execute_command,
    stdout: Optional[TextIO] = None,
) -> int:
    """
    Build and benchmark everything in the benchmark directory.

    Args:
        args: Parsed global options (config, log level, benchmark dir).
        tokens: The remaining `key=value` run option tokens.
        runner: Command runner used for every build step and measured run.
        stdout: Where usage and the table are written, sys.stdout by default.

    Returns:
        An exit code from rtbench.cli.exit_codes.
    """
    out = stdout if stdout is not None else sys.stdout
    if args.log_level:
        configure_logging(args.log_level)

    try:
        options = resolve_options(tokens)
    except HelpRequested:
        out.write(format_usage())
        return SUCCESS
    except ConfigError as err:
        logger.error("Invalid run options", extra={"error": str(err)})
        return CONFIG_ERROR

    try:
        config = _load_harness_config(args.config)
    except ConfigError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        return CONFIG_ERROR

    log_file = Path(config.global_config.log_file) if config.global_config.log_file else None
    configure_logging(args.log_level or config.global_config.log_level, log_file)

    benchmark_dir = _resolve_benchmark_dir(args, config)
    if not benchmark_dir.is_dir():
        logger.error("Benchmark directory not found", extra={"path": str(benchmark_dir)})
        return VALIDATION_ERROR

    try:
        toolchain = resolve_toolchain(config.toolchain, benchmark_dir)
    except ToolchainNotFoundError as err:
        logger.error(
            "Required executable not found",
            extra={"executable": err.name, "tried": list(err.tried)},
        )
        return VALIDATION_ERROR

    _log_run_options(options, benchmark_dir)

    from rtbench.benchmarks.discovery import discover_benchmarks
    from rtbench.benchmarks.registry import build_registry
    from rtbench.cleanup.cleaner import clean_artifacts
    from rtbench.reporting.results import build_records
    from rtbench.reporting.table import render_table
    from rtbench.runner.matrix import run_benchmarks

    units = discover_benchmarks(benchmark_dir, options, build_registry(config.benchmarks))
    results = run_benchmarks(units, toolchain, options, runner=runner)

    if options.clean:
        clean_artifacts(benchmark_dir)

    out.write(render_table(build_records(results)))

    failed_builds = [result.benchmark for result in results if result.build_error is not None]
    if failed_builds:
        logger.error(
            "Run finished with build failures",
            extra={"benchmarks": failed_builds},
        )
        return RUNTIME_ERROR

    logger.info("Run complete", extra={"benchmarks": len(results)})
    return SUCCESS
