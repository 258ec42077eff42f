# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Result types produced by the measurement loop.

A Measurement exists for every runtime that was enabled for a benchmark; its
elapsed_ms is None when the runtime failed. A runtime removed by the
`--runtimes` filter has no Measurement at all.
"""

from dataclasses import dataclass, field
from typing import Optional

from rtbench.runner.runtimes import RuntimeId


@dataclass(frozen=True)
class Measurement:
    benchmark: str
    runtime: RuntimeId
    elapsed_ms: Optional[float]

    @property
    def available(self) -> bool:
        return self.elapsed_ms is not None


@dataclass
class BenchmarkResult:
    """
    Everything measured for one benchmark, keyed by runtime.

    Built by the runtime matrix and only read afterwards. build_error is set
    when the build pipeline failed, in which case there are no measurements.
    """

    benchmark: str
    measurements: dict[RuntimeId, Measurement] = field(default_factory=dict)
    build_error: Optional[str] = None

    def elapsed(self, runtime: RuntimeId) -> Optional[float]:
        """Averaged time for a runtime, None if skipped or failed."""
        measurement = self.measurements.get(runtime)
        return measurement.elapsed_ms if measurement is not None else None
