# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Toolchain discovery.

Two engines are load-bearing for every measurement, QuickJS (`qjs`) and
Node.js (`node`), so they are resolved up front and a missing one stops the
harness before anything is built. Each is found by walking an ordered chain of
strategies where the first hit wins:

  1. system PATH lookup
  2. an environment variable override (QJS_PATH / NODE_PATH)
  3. the conventional /usr/local/bin location
  4. for qjs only, the copy shipped inside the install tree

The remaining tools (ts2wasm, iwasm_gc, wamrc, the Node Wasm runner) live at
fixed places in the install tree. They are not checked for existence here: a
missing compiler shows up as a build failure for each benchmark and a missing
engine as unavailable measurements, both with the exact command in the log.
"""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from rtbench.config.schema import ToolchainConfig
from rtbench.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BIN_DIR = Path("/usr/local/bin")

# Install-tree layout, relative to the toolchain root.
TS2WASM_SCRIPT = Path("build/cli/ts2wasm.js")
IWASM_GC = Path("runtime-library/build/iwasm_gc")
BUNDLED_QJS = Path("runtime-library/deps/quickjs/qjs")
WAMRC = Path("runtime-library/deps/wamr-gc/wamr-compiler/build/wamrc")
NODE_WASM_RUNNER = Path("tools/validate/run_module/run_module_on_node.js")


class ToolchainNotFoundError(RuntimeError):
    """Raised when every discovery strategy for a required executable failed."""

    def __init__(self, name: str, tried: Sequence[str]) -> None:
        self.name = name
        self.tried = tuple(tried)
        super().__init__(
            f"Cannot locate required executable '{name}'. Tried: {', '.join(self.tried)}"
        )


class DiscoveryStrategy(Protocol):
    description: str

    def locate(self) -> Optional[Path]: ...


@dataclass(frozen=True)
class PathLookup:
    """Find a command on the system PATH."""

    command: str

    @property
    def description(self) -> str:
        return f"PATH lookup for '{self.command}'"

    def locate(self) -> Optional[Path]:
        found = shutil.which(self.command)
        return Path(found) if found else None


@dataclass(frozen=True)
class EnvironmentOverride:
    """Use the path named by an environment variable, if it points at a file."""

    variable: str

    @property
    def description(self) -> str:
        return f"${self.variable}"

    def locate(self) -> Optional[Path]:
        value = os.environ.get(self.variable)
        if not value:
            return None
        candidate = Path(value)
        if not candidate.is_file():
            logger.warning(
                "Environment override does not point at a file",
                extra={"variable": self.variable, "path": value},
            )
            return None
        return candidate


@dataclass(frozen=True)
class FixedLocation:
    """A well-known filesystem location."""

    path: Path

    @property
    def description(self) -> str:
        return str(self.path)

    def locate(self) -> Optional[Path]:
        return self.path if self.path.is_file() else None


def locate_executable(name: str, strategies: Sequence[DiscoveryStrategy]) -> Path:
    """
    Walk the strategy chain in order and return the first hit.

    Raises:
        ToolchainNotFoundError: The whole chain was exhausted.
    """
    tried: list[str] = []
    for strategy in strategies:
        found = strategy.locate()
        if found is not None:
            logger.debug(
                "Located executable",
                extra={"executable": name, "path": str(found), "via": strategy.description},
            )
            return found
        tried.append(strategy.description)
    raise ToolchainNotFoundError(name, tried)


@dataclass(frozen=True)
class Toolchain:
    """Every external program the harness calls, resolved for this machine."""

    qjs: Path
    node: Path
    iwasm_gc: Path
    wamrc: Path
    ts2wasm: Path
    node_wasm_runner: Path
    wasm_opt: str = "wasm-opt"
    wasm_tools: str = "wasm-tools"
    moon: str = "moon"


def default_toolchain_root(benchmark_dir: Path) -> Path:
    """Benchmarks live at <root>/tests/benchmark in a source checkout."""
    return benchmark_dir.resolve().parent.parent


def qjs_strategies(config: ToolchainConfig, root: Path) -> list[DiscoveryStrategy]:
    return [
        PathLookup("qjs"),
        EnvironmentOverride(config.qjs_env_var),
        FixedLocation(DEFAULT_BIN_DIR / "qjs"),
        FixedLocation(root / BUNDLED_QJS),
    ]


def node_strategies(config: ToolchainConfig) -> list[DiscoveryStrategy]:
    return [
        PathLookup("node"),
        EnvironmentOverride(config.node_env_var),
        FixedLocation(DEFAULT_BIN_DIR / "node"),
    ]


def _install_tree_tool(explicit: Optional[str], root: Path, relative: Path) -> Path:
    path = Path(explicit) if explicit else root / relative
    if not path.exists():
        logger.warning("Toolchain component not found", extra={"path": str(path)})
    return path


def resolve_toolchain(config: ToolchainConfig, benchmark_dir: Path) -> Toolchain:
    """
    Resolve every tool the build pipeline and the runtime matrix need.

    Explicit paths in the harness config always win. Otherwise qjs and node go
    through their discovery chains and the install-tree tools are taken from
    the toolchain root.

    Raises:
        ToolchainNotFoundError: qjs or node could not be found.
    """
    root = Path(config.root) if config.root else default_toolchain_root(benchmark_dir)

    qjs = Path(config.qjs) if config.qjs else locate_executable("qjs", qjs_strategies(config, root))
    node = Path(config.node) if config.node else locate_executable("node", node_strategies(config))

    toolchain = Toolchain(
        qjs=qjs,
        node=node,
        iwasm_gc=_install_tree_tool(config.iwasm_gc, root, IWASM_GC),
        wamrc=_install_tree_tool(config.wamrc, root, WAMRC),
        ts2wasm=_install_tree_tool(config.ts2wasm, root, TS2WASM_SCRIPT),
        node_wasm_runner=_install_tree_tool(config.node_wasm_runner, root, NODE_WASM_RUNNER),
        wasm_opt=config.wasm_opt,
        wasm_tools=config.wasm_tools,
        moon=config.moon,
    )

    logger.info(
        "Toolchain resolved",
        extra={"qjs": str(toolchain.qjs), "node": str(toolchain.node), "root": str(root)},
    )
    return toolchain
