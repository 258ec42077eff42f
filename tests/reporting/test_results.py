# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for result records and ratios.

We verify:
  - time cells are formatted with two decimals and an "ms" suffix
  - a ratio appears only when both of its operands exist
  - a zero denominator gives no ratio instead of inf
  - column order within a record is fixed
"""

import pytest

from rtbench.reporting.results import (
    BENCHMARK_COLUMN,
    RATIOS,
    build_record,
    build_records,
    compute_ratio,
    format_ratio,
    format_time,
)
from rtbench.runner.models import BenchmarkResult, Measurement
from rtbench.runner.runtimes import RuntimeId


def _result(name: str, **times: float | None) -> BenchmarkResult:
    result = BenchmarkResult(benchmark=name)
    for key, elapsed in times.items():
        runtime = RuntimeId(key.replace("_", "-"))
        result.measurements[runtime] = Measurement(name, runtime, elapsed)
    return result


class TestFormatting:
    def test_format_time(self) -> None:
        assert format_time(12.3456) == "12.35ms"
        assert format_time(0.0) == "0.00ms"

    def test_format_ratio(self) -> None:
        assert format_ratio(0.5) == "0.50"
        assert format_ratio(2.0 / 3.0) == "0.67"


class TestComputeRatio:
    def test_plain_division(self) -> None:
        assert compute_ratio(30.0, 10.0) == pytest.approx(3.0)

    @pytest.mark.parametrize("numerator, denominator", [(None, 1.0), (1.0, None), (None, None)])
    def test_missing_operand(self, numerator, denominator) -> None:  # type: ignore[no-untyped-def]
        assert compute_ratio(numerator, denominator) is None

    def test_zero_denominator(self) -> None:
        assert compute_ratio(1.0, 0.0) is None


class TestRatioTable:
    def test_sixteen_ratios_in_order(self) -> None:
        assert [ratio.label for ratio in RATIOS] == [
            "mbt/ts(interp)", "mbt/ts(aot)", "mbt/js(qjs)", "mbt/ts(v8 wasm)",
            "mbt/js(node)", "interp/qjs", "mbt interp/qjs", "mbt aot/qjs", "aot/qjs",
            "WAMR_interpreter/node", "WAMR_aot/node", "mbt/ts wasm1/interp",
            "mbt wasm1/wasm-gc", "mbt wasm1/wasm-gc(aot)", "mbt wasm1(aot)/qjs",
            "mbt wasm1/qjs",
        ]


class TestBuildRecord:
    def test_node_only(self) -> None:
        record = build_record(_result("quicksort", node=12.0))
        assert record == {BENCHMARK_COLUMN: "quicksort", "Node": "12.00ms"}

    def test_ratio_needs_both_operands(self) -> None:
        record = build_record(_result("fib", qjs=100.0, wamr_interp=50.0))
        assert record["interp/qjs"] == "0.50"
        assert "mbt/js(qjs)" not in record
        assert "aot/qjs" not in record

    def test_failed_measurement_has_no_cell(self) -> None:
        record = build_record(_result("fib", qjs=None, node=4.0))
        assert "qjs" not in record
        assert "Node" in record

    def test_column_order(self) -> None:
        record = build_record(_result(
            "fib", node=2.0, qjs=4.0, wamr_interp=8.0, moonbit_wamr_interp=2.0,
        ))
        assert list(record) == [
            BENCHMARK_COLUMN, "interp", "qjs", "Node", "mbt interp",
            "mbt/ts(interp)", "interp/qjs", "mbt interp/qjs", "WAMR_interpreter/node",
        ]

    def test_build_failure_gives_name_only(self) -> None:
        result = BenchmarkResult(benchmark="broken", build_error="boom")
        assert build_record(result) == {BENCHMARK_COLUMN: "broken"}

    def test_records_keep_result_order(self) -> None:
        records = build_records([_result("b", node=1.0), _result("a", node=1.0)])
        assert [record[BENCHMARK_COLUMN] for record in records] == ["b", "a"]
