# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for rtbench.

There are two layers of configuration and each gets its own frozen pydantic
model:

  - RunOptions: what one invocation should do (sample counts, heap sizes,
    filters). Built from the `key=value` tokens on the command line.
  - HarnessConfig: where things live on this machine (toolchain root, tool
    overrides, per-benchmark quirks). Loaded from an optional YAML file.

Both use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_STACK_SIZE: int = 40_960_000
DEFAULT_GC_HEAP: int = 40_960_000


class RunOptions(BaseModel):
    """
    The resolved run configuration. Created once at process start and never
    mutated afterwards.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    times: int = Field(
        default=1,
        ge=1,
        description="Timed samples per (benchmark, runtime) pair",
    )
    warmup: int = Field(
        default=0,
        ge=0,
        description="Discarded warm-up runs before the timed samples",
    )
    stack_size: int = Field(
        default=DEFAULT_STACK_SIZE,
        ge=1,
        description="Value for --stack-size on stack-sensitive WAMR runs",
    )
    gc_heap: int = Field(
        default=DEFAULT_GC_HEAP,
        ge=1,
        description="Value for --gc-heap-size on GC-enabled WAMR runs",
    )
    clean: bool = Field(
        default=True,
        description="Remove generated artifacts once the run completes",
    )
    benchmarks: Optional[frozenset[str]] = Field(
        default=None,
        description="Allow-list of benchmark names, None means every benchmark",
    )
    runtimes: Optional[frozenset[str]] = Field(
        default=None,
        description="Allow-list of runtime identifiers, None means every runtime",
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-command timeout, None waits forever",
    )
    unknown: tuple[str, ...] = Field(
        default=(),
        description="Unrecognised option keys, kept for diagnostics only",
    )

    def allows_benchmark(self, name: str) -> bool:
        return self.benchmarks is None or name in self.benchmarks

    def allows_runtime(self, runtime_id: str) -> bool:
        return self.runtimes is None or runtime_id in self.runtimes


class GlobalConfig(BaseModel):
    """Cross-cutting settings: observability only, for now."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return upper


class ToolchainConfig(BaseModel):
    """
    Where the external tools live.

    `root` is the install tree that holds the ts2wasm build, the WAMR runtime
    library and the Node Wasm runner. When it is unset the locator uses two
    directories above the benchmark directory, which is where the benchmarks
    sit inside a source checkout. Every individual tool can be pinned
    explicitly, which wins over the discovery chain.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    root: Optional[str] = Field(default=None, description="Install tree root")
    qjs: Optional[str] = Field(default=None, description="Explicit QuickJS binary")
    node: Optional[str] = Field(default=None, description="Explicit Node.js binary")
    iwasm_gc: Optional[str] = Field(default=None, description="Explicit iwasm_gc binary")
    wamrc: Optional[str] = Field(default=None, description="Explicit wamrc binary")
    ts2wasm: Optional[str] = Field(default=None, description="Explicit ts2wasm.js script")
    node_wasm_runner: Optional[str] = Field(
        default=None, description="Explicit run_module_on_node.js script",
    )
    wasm_opt: str = Field(default="wasm-opt", description="wasm-opt command")
    wasm_tools: str = Field(default="wasm-tools", description="wasm-tools command")
    moon: str = Field(default="moon", description="MoonBit build tool command")
    qjs_env_var: str = Field(default="QJS_PATH", description="Override variable for qjs")
    node_env_var: str = Field(default="NODE_PATH", description="Override variable for node")


class BenchmarkEntryConfig(BaseModel):
    """Known quirks of one benchmark program."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    skip: bool = Field(default=False, description="Never build or run this benchmark")
    needs_stack_size: bool = Field(
        default=False, description="Pass --stack-size to WAMR runtimes",
    )
    needs_gc_heap: bool = Field(
        default=False, description="Pass --gc-heap-size to WAMR runtimes",
    )


class HarnessConfig(BaseModel):
    """
    Top-level YAML config container. Every section is optional; an empty file
    (or no file at all) means built-in defaults everywhere.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    benchmark_directory: Optional[str] = Field(
        default=None,
        description="Directory holding the benchmark programs",
    )
    benchmarks: dict[str, BenchmarkEntryConfig] = Field(
        default_factory=dict,
        description="Registry overrides keyed by benchmark name",
    )
