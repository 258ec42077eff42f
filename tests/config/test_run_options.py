# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the `key=value` run option resolver.

Covers defaults, numeric parsing, list splitting, help detection, the
--no-clean inversion, and how unknown keys are kept aside.
"""

import pytest
from pydantic import ValidationError

from rtbench.config.exceptions import HelpRequested, OptionError
from rtbench.config.options import format_usage, resolve_options, split_tokens
from rtbench.config.schema import DEFAULT_GC_HEAP, DEFAULT_STACK_SIZE, RunOptions


class TestDefaults:
    def test_no_tokens_gives_defaults(self) -> None:
        options = resolve_options([])
        assert options.times == 1
        assert options.warmup == 0
        assert options.stack_size == DEFAULT_STACK_SIZE == 40_960_000
        assert options.gc_heap == DEFAULT_GC_HEAP == 40_960_000
        assert options.clean is True
        assert options.benchmarks is None
        assert options.runtimes is None
        assert options.timeout_seconds is None

    def test_no_filter_allows_everything(self) -> None:
        options = resolve_options([])
        assert options.allows_benchmark("anything")
        assert options.allows_runtime("qjs")


class TestNumericOptions:
    def test_parses_integers(self) -> None:
        options = resolve_options([
            "--times=3", "--warmup=1", "--stack-size=1024", "--gc-heap=2048",
        ])
        assert options.times == 3
        assert options.warmup == 1
        assert options.stack_size == 1024
        assert options.gc_heap == 2048

    def test_non_numeric_value_is_rejected(self) -> None:
        with pytest.raises(OptionError, match="--times"):
            resolve_options(["--times=abc"])

    def test_float_is_not_an_integer(self) -> None:
        with pytest.raises(OptionError):
            resolve_options(["--warmup=1.5"])

    def test_zero_times_is_rejected(self) -> None:
        with pytest.raises(OptionError):
            resolve_options(["--times=0"])

    def test_negative_warmup_is_rejected(self) -> None:
        with pytest.raises(OptionError):
            resolve_options(["--warmup=-1"])

    def test_timeout_accepts_fractions(self) -> None:
        assert resolve_options(["--timeout=2.5"]).timeout_seconds == 2.5

    def test_bad_timeout_is_rejected(self) -> None:
        with pytest.raises(OptionError):
            resolve_options(["--timeout=soon"])


class TestListOptions:
    def test_benchmarks_are_split_into_a_set(self) -> None:
        options = resolve_options(["--benchmarks=mandelbrot,quicksort,mandelbrot"])
        assert options.benchmarks == frozenset({"mandelbrot", "quicksort"})
        assert options.allows_benchmark("quicksort")
        assert not options.allows_benchmark("merkletrees")

    def test_runtimes_are_split_into_a_set(self) -> None:
        options = resolve_options(["--runtimes=node,qjs"])
        assert options.runtimes == frozenset({"node", "qjs"})
        assert options.allows_runtime("node")
        assert not options.allows_runtime("wamr-aot")


class TestNoClean:
    @pytest.mark.parametrize("value", ["true", "1", "yes", "anything"])
    def test_truthy_value_disables_cleanup(self, value: str) -> None:
        assert resolve_options([f"--no-clean={value}"]).clean is False

    @pytest.mark.parametrize("token", ["--no-clean=false", "--no-clean=0", "--no-clean="])
    def test_falsy_value_keeps_cleanup(self, token: str) -> None:
        assert resolve_options([token]).clean is True


class TestHelp:
    @pytest.mark.parametrize("token", ["--help", "help", "h"])
    def test_help_tokens_short_circuit(self, token: str) -> None:
        with pytest.raises(HelpRequested):
            resolve_options(["--times=3", token])

    def test_help_wins_over_bad_values(self) -> None:
        with pytest.raises(HelpRequested):
            resolve_options(["--times=abc", "--help"])

    def test_usage_lists_every_option(self) -> None:
        usage = format_usage()
        for key in ("--no-clean", "--times", "--warmup", "--stack-size",
                    "--gc-heap", "--benchmarks", "--runtimes", "--help"):
            assert key in usage


class TestUnknownKeys:
    def test_unknown_keys_are_kept_but_ignored(self) -> None:
        options = resolve_options(["--colour=blue", "--times=2"])
        assert options.times == 2
        assert options.unknown == ("--colour",)

    def test_last_occurrence_wins(self) -> None:
        assert split_tokens(["--times=2", "--times=5"]) == {"--times": "5"}


class TestImmutability:
    def test_options_are_frozen(self) -> None:
        options = resolve_options([])
        with pytest.raises(ValidationError):
            options.times = 5  # type: ignore[misc]

    def test_schema_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            RunOptions(repetitions=3)  # type: ignore[call-arg]


class TestEmptyValues:
    @pytest.mark.parametrize("token", ["--benchmarks=", "--runtimes=", "--benchmarks"])
    def test_empty_filter_means_no_filter(self, token: str) -> None:
        options = resolve_options([token])
        assert options.benchmarks is None
        assert options.runtimes is None
        assert options.allows_benchmark("quicksort")

    @pytest.mark.parametrize("token", ["--times=", "--times= ", "--warmup=", "--timeout="])
    def test_empty_number_keeps_default(self, token: str) -> None:
        options = resolve_options([token])
        assert options.times == 1
        assert options.warmup == 0
        assert options.timeout_seconds is None

    def test_empty_value_is_not_reported_as_unknown(self) -> None:
        assert resolve_options(["--times="]).unknown == ()
