# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Result records and ratio metrics.

A ResultRecord is the row of the final table for one benchmark: the
benchmark name, one time cell per available measurement, then one cell per
declared ratio whose two operands are both available. Everything here is a
pure function of the BenchmarkResult, so the same measurements always give
the same row.
"""

from dataclasses import dataclass
from typing import Optional

from rtbench.runner.models import BenchmarkResult
from rtbench.runner.runtimes import TIME_COLUMN_ORDER, RuntimeId, spec_for

BENCHMARK_COLUMN = "benchmark"

ResultRecord = dict[str, str]


@dataclass(frozen=True)
class RatioSpec:
    """label = numerator / denominator"""

    label: str
    numerator: RuntimeId
    denominator: RuntimeId


R = RuntimeId

RATIOS: tuple[RatioSpec, ...] = (
    RatioSpec("mbt/ts(interp)", R.MOONBIT_WAMR_INTERP, R.WAMR_INTERP),
    RatioSpec("mbt/ts(aot)", R.MOONBIT_WAMR_AOT, R.WAMR_AOT),
    RatioSpec("mbt/js(qjs)", R.MOONBIT_QJS, R.QJS),
    RatioSpec("mbt/ts(v8 wasm)", R.MOONBIT_NODE_WASM, R.NODE_WASM),
    RatioSpec("mbt/js(node)", R.MOONBIT_NODE, R.NODE),
    RatioSpec("interp/qjs", R.WAMR_INTERP, R.QJS),
    RatioSpec("mbt interp/qjs", R.MOONBIT_WAMR_INTERP, R.QJS),
    RatioSpec("mbt aot/qjs", R.MOONBIT_WAMR_AOT, R.QJS),
    RatioSpec("aot/qjs", R.WAMR_AOT, R.QJS),
    RatioSpec("WAMR_interpreter/node", R.WAMR_INTERP, R.NODE),
    RatioSpec("WAMR_aot/node", R.WAMR_AOT, R.NODE),
    RatioSpec("mbt/ts wasm1/interp", R.MOONBIT_WASM, R.WAMR_INTERP),
    RatioSpec("mbt wasm1/wasm-gc", R.MOONBIT_WASM, R.MOONBIT_WAMR_INTERP),
    RatioSpec("mbt wasm1/wasm-gc(aot)", R.MOONBIT_WASM_AOT, R.MOONBIT_WAMR_AOT),
    RatioSpec("mbt wasm1(aot)/qjs", R.MOONBIT_WASM_AOT, R.QJS),
    RatioSpec("mbt wasm1/qjs", R.MOONBIT_WASM, R.QJS),
)


def compute_ratio(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """numerator / denominator, or None when either side is missing or the denominator is 0."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


def format_time(elapsed_ms: float) -> str:
    return f"{elapsed_ms:.2f}ms"


def format_ratio(ratio: float) -> str:
    return f"{ratio:.2f}"


def build_record(result: BenchmarkResult) -> ResultRecord:
    """Turn one benchmark's measurements into an ordered report row."""
    record: ResultRecord = {BENCHMARK_COLUMN: result.benchmark}

    for runtime in TIME_COLUMN_ORDER:
        elapsed = result.elapsed(runtime)
        if elapsed is not None:
            record[spec_for(runtime).label] = format_time(elapsed)

    for ratio_spec in RATIOS:
        ratio = compute_ratio(
            result.elapsed(ratio_spec.numerator),
            result.elapsed(ratio_spec.denominator),
        )
        if ratio is not None:
            record[ratio_spec.label] = format_ratio(ratio)

    return record


def build_records(results: list[BenchmarkResult]) -> list[ResultRecord]:
    return [build_record(result) for result in results]
