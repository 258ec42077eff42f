# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The one place where rtbench starts child processes.

Every build step and every timed benchmark run goes through execute_command:
run the argv list synchronously, capture everything, optionally enforce a
timeout, return a structured result. Nothing here raises for process-level
problems (non-zero exit, missing executable, timeout); those come back as a
CommandResult with success=False and a failure_reason, and the caller decides
whether that is fatal.

No shell=True. Commands are argv lists, so benchmark names and paths with
spaces can't turn into extra arguments.
"""

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from rtbench.logging.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """What came back from running one external command."""

    argv: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str
    elapsed_ms: float
    failure_reason: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failure_reason is None and self.exit_code == 0


# Signature shared by execute_command and the fakes used in tests.
CommandRunner = Callable[..., CommandResult]


def format_command(argv: Sequence[str]) -> str:
    """Render an argv list the way a user would type it, for log lines."""
    return subprocess.list2cmdline([str(part) for part in argv])


def execute_command(
    argv: Sequence[str],
    timeout_seconds: Optional[float] = None,
    cwd: Optional[Path] = None,
) -> CommandResult:
    """
    Run one command to completion and capture the result.

    The elapsed time brackets only the blocking subprocess call, measured with
    a monotonic high-resolution clock, and is reported in milliseconds.

    Args:
        argv: Program and arguments.
        timeout_seconds: Kill the child after this long. None waits forever.
        cwd: Working directory for the child.

    Returns:
        A CommandResult. exit_code is -1 when the command never produced one
        (not found, timed out, OS error).
    """
    args = tuple(str(part) for part in argv)
    start = time.perf_counter()

    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout_seconds,
            cwd=str(cwd) if cwd is not None else None,
        )
    except subprocess.TimeoutExpired as err:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.warning(
            "Command timed out",
            extra={"command": format_command(args), "timeout_seconds": timeout_seconds},
        )
        return CommandResult(
            argv=args,
            exit_code=-1,
            stdout=_decode(err.stdout),
            stderr=_decode(err.stderr),
            elapsed_ms=elapsed_ms,
            failure_reason=f"timed out after {timeout_seconds}s",
        )
    except FileNotFoundError:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return CommandResult(
            argv=args,
            exit_code=-1,
            stdout="",
            stderr="",
            elapsed_ms=elapsed_ms,
            failure_reason=f"executable not found: {args[0]}",
        )
    except OSError as err:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return CommandResult(
            argv=args,
            exit_code=-1,
            stdout="",
            stderr="",
            elapsed_ms=elapsed_ms,
            failure_reason=f"cannot start {args[0]}: {err}",
        )

    elapsed_ms = (time.perf_counter() - start) * 1000.0

    logger.debug(
        "Command finished",
        extra={
            "command": format_command(args),
            "exit_code": result.returncode,
            "elapsed_ms": round(elapsed_ms, 3),
        },
    )

    return CommandResult(
        argv=args,
        exit_code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        elapsed_ms=elapsed_ms,
    )


def _decode(output: object) -> str:
    """TimeoutExpired carries whatever was captured so far, possibly as bytes."""
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return str(output)
