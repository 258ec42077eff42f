# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build pipeline.

For every benchmark the same fixed sequence of external commands runs, in
order, inside the benchmark directory:

  ts2wasm toolchain
    1. compile <name>.ts to <name>.wasm (optimisation level 3)
    2. print the text form to <name>.wat (diagnostic only)
    3. wasm-opt -O3 over <name>.wasm, in place
    4. wamrc AOT compile to <name>.aot

  MoonBit toolchain, project directory <name>/
    5. moon clean
    6. moon build --target wasm-gc
    7. moon build --target wasm
    8. moon build --target wasm-gc --output-wat
    9-10. wasm-opt -O3 over both lib.wasm files, in place
    11-12. wamrc AOT compile of both lib.wasm files

The first step that fails raises BuildError and nothing after it runs. The
run loop treats that as a per-benchmark failure, so one broken toolchain
doesn't take down the measurements for every other program.

Captured output of every step is appended to the build log in the
benchmark directory.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rtbench.benchmarks.models import BenchmarkUnit
from rtbench.logging.logger import get_logger
from rtbench.process.executor import CommandRunner, execute_command, format_command
from rtbench.toolchain.locator import Toolchain

logger = get_logger(__name__)

OPTIMIZE_LEVEL = 3
BUILD_LOG_NAME = "build.log"

_WAMRC_FLAGS: tuple[str, ...] = ("--enable-gc", "--size-level=0")
_WASM_OPT_FLAGS: tuple[str, ...] = ("-all", "-O3")


class BuildError(RuntimeError):
    """A build step exited non-zero, timed out, or could not be started."""

    def __init__(
        self,
        benchmark: str,
        step: str,
        command: str,
        exit_code: int,
        detail: str,
    ) -> None:
        self.benchmark = benchmark
        self.step = step
        self.command = command
        self.exit_code = exit_code
        self.detail = detail
        super().__init__(
            f"Build step '{step}' failed for {benchmark} (exit code {exit_code}): {detail}"
        )


def moonbit_artifact(project_dir: Path, target: str, package: str, filename: str) -> Path:
    """<project>/target/<target>/release/build/<package>/<filename>"""
    return project_dir / "target" / target / "release" / "build" / package / filename


@dataclass(frozen=True)
class ArtifactSet:
    """Every file the runtimes consume for one benchmark."""

    wasm: Path
    wat: Path
    aot: Path
    js: Path
    mbt_gc_wasm: Path
    mbt_gc_aot: Path
    mbt_wasm: Path
    mbt_wasm_aot: Path
    mbt_js: Path

    @classmethod
    def for_unit(cls, unit: BenchmarkUnit) -> "ArtifactSet":
        base = unit.directory
        project = unit.moonbit_dir
        return cls(
            wasm=base / f"{unit.name}.wasm",
            wat=base / f"{unit.name}.wat",
            aot=base / f"{unit.name}.aot",
            js=unit.js_path,
            mbt_gc_wasm=moonbit_artifact(project, "wasm-gc", "lib", "lib.wasm"),
            mbt_gc_aot=moonbit_artifact(project, "wasm-gc", "lib", "lib.aot"),
            mbt_wasm=moonbit_artifact(project, "wasm", "lib", "lib.wasm"),
            mbt_wasm_aot=moonbit_artifact(project, "wasm", "lib", "lib.aot"),
            mbt_js=moonbit_artifact(project, "js", "main", "main.js"),
        )


@dataclass(frozen=True)
class BuildStep:
    name: str
    argv: tuple[str, ...]


def plan_build(unit: BenchmarkUnit, toolchain: Toolchain) -> list[BuildStep]:
    """The fixed, ordered list of commands that builds one benchmark."""
    artifacts = ArtifactSet.for_unit(unit)
    project = str(unit.moonbit_dir)
    node = str(toolchain.node)
    wamrc = str(toolchain.wamrc)
    wasm_opt = toolchain.wasm_opt
    moon = toolchain.moon

    def step(name: str, *argv: object) -> BuildStep:
        return BuildStep(name=name, argv=tuple(str(part) for part in argv))

    return [
        step("ts2wasm compile", node, toolchain.ts2wasm, unit.source_path,
             "--opt", OPTIMIZE_LEVEL, "--output", artifacts.wasm),
        step("wasm-tools print", toolchain.wasm_tools, "print", artifacts.wasm,
             "-o", artifacts.wat),
        step("wasm-opt", wasm_opt, *_WASM_OPT_FLAGS, "-o", artifacts.wasm, artifacts.wasm),
        step("wamrc", wamrc, *_WAMRC_FLAGS, "-o", artifacts.aot, artifacts.wasm),
        step("moon clean", moon, "clean", "--source-dir", project),
        step("moon build wasm-gc", moon, "build", "--source-dir", project,
             "--target", "wasm-gc"),
        step("moon build wasm", moon, "build", "--source-dir", project,
             "--target", "wasm"),
        step("moon build wasm-gc wat", moon, "build", "--source-dir", project,
             "--target", "wasm-gc", "--output-wat"),
        step("wasm-opt moonbit wasm-gc", wasm_opt, *_WASM_OPT_FLAGS,
             artifacts.mbt_gc_wasm, "-o", artifacts.mbt_gc_wasm),
        step("wasm-opt moonbit wasm", wasm_opt, *_WASM_OPT_FLAGS,
             artifacts.mbt_wasm, "-o", artifacts.mbt_wasm),
        step("wamrc moonbit wasm-gc", wamrc, *_WAMRC_FLAGS,
             "-o", artifacts.mbt_gc_aot, artifacts.mbt_gc_wasm),
        step("wamrc moonbit wasm", wamrc, *_WAMRC_FLAGS,
             "-o", artifacts.mbt_wasm_aot, artifacts.mbt_wasm),
    ]


def _append_build_log(log_path: Path, step: BuildStep, stdout: str, stderr: str) -> None:
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write(f"$ {format_command(step.argv)}\n")
        if stdout:
            handle.write(stdout if stdout.endswith("\n") else stdout + "\n")
        if stderr:
            handle.write(stderr if stderr.endswith("\n") else stderr + "\n")


def build_benchmark(
    unit: BenchmarkUnit,
    toolchain: Toolchain,
    timeout_seconds: Optional[float] = None,
    runner: CommandRunner = execute_command,
) -> ArtifactSet:
    """
    Run every build step for one benchmark and return its artifacts.

    Args:
        unit: The benchmark to build.
        toolchain: Resolved tool paths.
        timeout_seconds: Per-step timeout, None waits forever.
        runner: Command runner, execute_command outside of tests.

    Raises:
        BuildError: On the first step that doesn't succeed, or when the build
            log can't be written.
    """
    log_path = unit.directory / BUILD_LOG_NAME
    logger.info("Compiling benchmark", extra={"benchmark": unit.name})

    for step in plan_build(unit, toolchain):
        result = runner(step.argv, timeout_seconds=timeout_seconds, cwd=unit.directory)
        try:
            _append_build_log(log_path, step, result.stdout, result.stderr)
        except OSError as err:
            raise BuildError(
                benchmark=unit.name,
                step=step.name,
                command=format_command(step.argv),
                exit_code=result.exit_code,
                detail=f"cannot write build log {log_path}: {err}",
            ) from err

        if not result.success:
            detail = result.failure_reason or (result.stderr.strip() or result.stdout.strip())
            raise BuildError(
                benchmark=unit.name,
                step=step.name,
                command=format_command(step.argv),
                exit_code=result.exit_code,
                detail=detail,
            )

        logger.debug(
            "Build step done",
            extra={
                "benchmark": unit.name,
                "step": step.name,
                "elapsed_ms": round(result.elapsed_ms, 3),
            },
        )

    return ArtifactSet.for_unit(unit)
