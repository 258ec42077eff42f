# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The fixed table of execution engines.

Each RuntimeSpec ties a runtime identifier (what `--runtimes` filters on) to
the engine that runs it, the artifact it runs, and the column label used in
the report. The declaration order of RUNTIMES is the execution order for
every benchmark and must not change without updating the ratio table in
rtbench.reporting.results.
"""

import enum
from dataclasses import dataclass

from rtbench.benchmarks.models import BenchmarkUnit
from rtbench.build.pipeline import ArtifactSet
from rtbench.toolchain.locator import Toolchain


class RuntimeId(str, enum.Enum):
    MOONBIT_WASM_AOT = "moonbit-wasm-aot"
    MOONBIT_WASM = "moonbit-wasm"
    WAMR_INTERP = "wamr-interp"
    WAMR_AOT = "wamr-aot"
    NODE_WASM = "node-wasm"
    MOONBIT_NODE_WASM = "moonbit-node-wasm"
    QJS = "qjs"
    NODE = "node"
    MOONBIT_WAMR_INTERP = "moonbit-wamr-interp"
    MOONBIT_WAMR_AOT = "moonbit-wamr-aot"
    MOONBIT_QJS = "moonbit-qjs"
    MOONBIT_NODE = "moonbit-node"


class Engine(str, enum.Enum):
    IWASM = "iwasm"
    NODE_WASM = "node-wasm"
    QJS = "qjs"
    NODE = "node"


@dataclass(frozen=True)
class RuntimeSpec:
    """
    One column of the benchmark matrix.

    `artifact` names an ArtifactSet field. `uses_runtime_flags` says whether
    the benchmark's stack/heap flags are passed, which only the WAMR runs of
    the GC-enabled modules need.
    """

    runtime_id: RuntimeId
    display_name: str
    label: str
    engine: Engine
    artifact: str
    uses_runtime_flags: bool = False


RUNTIMES: tuple[RuntimeSpec, ...] = (
    RuntimeSpec(RuntimeId.MOONBIT_WASM_AOT, "MoonBit Wasm1 AoT", "mbt wasm1 aot",
                Engine.IWASM, "mbt_wasm_aot"),
    RuntimeSpec(RuntimeId.MOONBIT_WASM, "MoonBit Wasm1", "mbt wasm1",
                Engine.IWASM, "mbt_wasm"),
    RuntimeSpec(RuntimeId.WAMR_INTERP, "WAMR interpreter", "interp",
                Engine.IWASM, "wasm", uses_runtime_flags=True),
    RuntimeSpec(RuntimeId.WAMR_AOT, "WAMR AoT", "aot",
                Engine.IWASM, "aot", uses_runtime_flags=True),
    RuntimeSpec(RuntimeId.NODE_WASM, "Node Wasm", "v8 wasm",
                Engine.NODE_WASM, "wasm"),
    RuntimeSpec(RuntimeId.MOONBIT_NODE_WASM, "MoonBit Node Wasm", "mbt v8 wasm",
                Engine.NODE_WASM, "mbt_gc_wasm"),
    RuntimeSpec(RuntimeId.QJS, "QuickJS", "qjs",
                Engine.QJS, "js"),
    RuntimeSpec(RuntimeId.NODE, "Node", "Node",
                Engine.NODE, "js"),
    RuntimeSpec(RuntimeId.MOONBIT_WAMR_INTERP, "MoonBit WAMR interpreter", "mbt interp",
                Engine.IWASM, "mbt_gc_wasm", uses_runtime_flags=True),
    RuntimeSpec(RuntimeId.MOONBIT_WAMR_AOT, "MoonBit WAMR AoT", "mbt aot",
                Engine.IWASM, "mbt_gc_aot", uses_runtime_flags=True),
    RuntimeSpec(RuntimeId.MOONBIT_QJS, "MoonBit QuickJS", "mbt qjs",
                Engine.QJS, "mbt_js"),
    RuntimeSpec(RuntimeId.MOONBIT_NODE, "MoonBit Node", "mbt node",
                Engine.NODE, "mbt_js"),
)

RUNTIME_IDS: frozenset[str] = frozenset(runtime.value for runtime in RuntimeId)

# Report column order for the time cells.
TIME_COLUMN_ORDER: tuple[RuntimeId, ...] = (
    RuntimeId.MOONBIT_WASM_AOT,
    RuntimeId.MOONBIT_WASM,
    RuntimeId.WAMR_INTERP,
    RuntimeId.WAMR_AOT,
    RuntimeId.QJS,
    RuntimeId.NODE,
    RuntimeId.NODE_WASM,
    RuntimeId.MOONBIT_WAMR_INTERP,
    RuntimeId.MOONBIT_WAMR_AOT,
    RuntimeId.MOONBIT_QJS,
    RuntimeId.MOONBIT_NODE,
    RuntimeId.MOONBIT_NODE_WASM,
)

_SPECS_BY_ID: dict[RuntimeId, RuntimeSpec] = {spec.runtime_id: spec for spec in RUNTIMES}


def spec_for(runtime_id: RuntimeId) -> RuntimeSpec:
    return _SPECS_BY_ID[runtime_id]


def build_command(
    spec: RuntimeSpec,
    unit: BenchmarkUnit,
    artifacts: ArtifactSet,
    toolchain: Toolchain,
) -> tuple[str, ...]:
    """Command line that runs one artifact under one engine."""
    artifact = str(getattr(artifacts, spec.artifact))
    flags = unit.runtime_flags if spec.uses_runtime_flags else ()

    if spec.engine is Engine.IWASM:
        return (str(toolchain.iwasm_gc), *flags, "-f", "main", artifact)
    if spec.engine is Engine.NODE_WASM:
        return (str(toolchain.node), str(toolchain.node_wasm_runner), "-s", "-f", "main", artifact)
    if spec.engine is Engine.QJS:
        return (str(toolchain.qjs), artifact)
    return (str(toolchain.node), artifact)
