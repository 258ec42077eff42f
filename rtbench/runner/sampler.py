# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Timing sampler.

Runs one command `warmup` times without recording anything, then `times`
more times with the elapsed wall-clock time of each run recorded, and reduces
the samples to their arithmetic mean in milliseconds.

A benchmark program reports a wrong result by printing a line that starts
with VALIDATION_FAILURE_MARKER. That, a non-zero exit, a timeout or a
command that can't be started all count as a failed measurement: the
remaining runs are abandoned, the diagnostics are logged, and the sampler
returns None. The failure never escapes this module, so one broken
(benchmark, runtime) pair can't stop the rest of the run.
"""

from pathlib import Path
from statistics import fmean
from typing import Optional, Sequence

from rtbench.logging.logger import get_logger
from rtbench.process.executor import (
    CommandResult,
    CommandRunner,
    execute_command,
    format_command,
)

logger = get_logger(__name__)

VALIDATION_FAILURE_MARKER = "Validate result error"


class SampleError(RuntimeError):
    """One run of a sampled command failed; carries whatever diagnostics exist."""

    def __init__(self, message: str, result: CommandResult) -> None:
        super().__init__(message)
        self.result = result


def _check_exit(result: CommandResult) -> None:
    if result.failure_reason is not None:
        raise SampleError(f"Command failed: {result.failure_reason}", result)
    if result.exit_code != 0:
        detail = result.stderr.strip()
        message = f"Command failed with exit code {result.exit_code}"
        raise SampleError(f"{message}: {detail}" if detail else message, result)


def _check_output(result: CommandResult) -> None:
    output = result.stdout.strip()
    if output.startswith(VALIDATION_FAILURE_MARKER):
        raise SampleError(output, result)


def sample_command(
    argv: Sequence[str],
    warmup: int = 0,
    times: int = 1,
    timeout_seconds: Optional[float] = None,
    cwd: Optional[Path] = None,
    runner: CommandRunner = execute_command,
) -> Optional[float]:
    """
    Measure the average wall-clock time of a command.

    Args:
        argv: Command to measure.
        warmup: Discarded runs before measuring.
        times: Measured runs; must be at least 1.
        timeout_seconds: Per-run timeout, None waits forever.
        cwd: Working directory for every run.
        runner: Command runner, execute_command outside of tests.

    Returns:
        Mean elapsed milliseconds over the measured runs, or None if any run
        (warm-up included) failed.
    """
    if times < 1:
        raise ValueError(f"times must be at least 1, got {times}")

    samples: list[float] = []
    try:
        for _ in range(warmup):
            _check_exit(runner(argv, timeout_seconds=timeout_seconds, cwd=cwd))

        for _ in range(times):
            result = runner(argv, timeout_seconds=timeout_seconds, cwd=cwd)
            _check_exit(result)
            samples.append(result.elapsed_ms)
            _check_output(result)
    except SampleError as err:
        logger.error(
            "Measurement failed",
            extra={
                "command": format_command(argv),
                "exit_code": err.result.exit_code,
                "error": str(err),
                "stdout": err.result.stdout,
            },
        )
        return None

    return fmean(samples)
