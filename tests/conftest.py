# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for rtbench tests.

No test here needs a real toolchain. Every external command goes through a
FakeRunner, which records the argv it was given and answers with a
CommandResult chosen by the test.
"""

import logging
import textwrap
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest

from rtbench.logging.logger import configure_logging
from rtbench.process.executor import CommandResult
from rtbench.toolchain.locator import Toolchain

Responder = Callable[[tuple[str, ...]], Optional[CommandResult]]


def ok_result(argv: Sequence[str], elapsed_ms: float = 10.0, stdout: str = "") -> CommandResult:
    return CommandResult(
        argv=tuple(argv), exit_code=0, stdout=stdout, stderr="", elapsed_ms=elapsed_ms,
    )


class FakeRunner:
    """
    Stand-in for execute_command.

    The responder gets the argv and may return a CommandResult; returning
    None falls back to a successful run taking `elapsed_ms`.
    """

    def __init__(self, elapsed_ms: float = 10.0, responder: Optional[Responder] = None) -> None:
        self.elapsed_ms = elapsed_ms
        self.responder = responder
        self.calls: list[tuple[str, ...]] = []
        self.timeouts: list[Optional[float]] = []
        self.cwds: list[Optional[Path]] = []

    def __call__(
        self,
        argv: Sequence[str],
        timeout_seconds: Optional[float] = None,
        cwd: Optional[Path] = None,
    ) -> CommandResult:
        args = tuple(str(part) for part in argv)
        self.calls.append(args)
        self.timeouts.append(timeout_seconds)
        self.cwds.append(cwd)
        if self.responder is not None:
            answer = self.responder(args)
            if answer is not None:
                return answer
        return ok_result(args, elapsed_ms=self.elapsed_ms)

    def calls_with(self, fragment: str) -> list[tuple[str, ...]]:
        """Calls whose argv contains an element ending with `fragment`."""
        return [call for call in self.calls if any(part.endswith(fragment) for part in call)]


@pytest.fixture(autouse=True)
def _restore_logging() -> None:
    """Undo configure_logging calls so one test's level or log file doesn't leak into the next."""
    yield  # type: ignore[misc]
    configure_logging("INFO")
    for name in list(logging.Logger.manager.loggerDict):
        if not name.startswith("rtbench"):
            continue
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if isinstance(handler, logging.FileHandler):
                handler.close()
                logger.removeHandler(handler)


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def make_runner() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture()
def toolchain(tmp_path: Path) -> Toolchain:
    """A toolchain whose paths are only used as argv strings."""
    tools = tmp_path / "tools"
    return Toolchain(
        qjs=tools / "qjs",
        node=tools / "node",
        iwasm_gc=tools / "iwasm_gc",
        wamrc=tools / "wamrc",
        ts2wasm=tools / "ts2wasm.js",
        node_wasm_runner=tools / "run_module_on_node.js",
    )


@pytest.fixture()
def benchmark_dir(tmp_path: Path) -> Path:
    """
    A benchmark directory with two complete programs and some noise:
    a source without a JS counterpart and a JS file without a source.
    """
    directory = tmp_path / "benchmark"
    directory.mkdir()
    for name in ("quicksort", "mandelbrot"):
        (directory / f"{name}.ts").write_text("export function main() {}\n", encoding="utf-8")
        (directory / f"{name}.js").write_text("function main() {}\nmain();\n", encoding="utf-8")
        (directory / name).mkdir()
    (directory / "orphan.ts").write_text("export function main() {}\n", encoding="utf-8")
    (directory / "run_helper.js").write_text("// not a benchmark\n", encoding="utf-8")
    return directory


@pytest.fixture()
def harness_config_file(tmp_path: Path, toolchain: Toolchain) -> Path:
    """A harness config pinning every tool so no PATH lookups happen."""
    config_content = textwrap.dedent(f"""\
        global:
          log_level: "DEBUG"
        toolchain:
          qjs: "{toolchain.qjs}"
          node: "{toolchain.node}"
          iwasm_gc: "{toolchain.iwasm_gc}"
          wamrc: "{toolchain.wamrc}"
          ts2wasm: "{toolchain.ts2wasm}"
          node_wasm_runner: "{toolchain.node_wasm_runner}"
    """)
    config_file = tmp_path / "rtbench.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file
