# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

import pytest

from rtbench.benchmarks.models import BenchmarkOptions
from rtbench.benchmarks.registry import DEFAULT_REGISTRY, build_registry, lookup
from rtbench.config.schema import BenchmarkEntryConfig


class TestDefaultRegistry:
    @pytest.mark.parametrize(
        "name",
        ["merkletrees", "mandelbrot", "mandelbrot_i32", "binarytrees_class", "binarytrees_interface"],
    )
    def test_gc_heap_programs(self, name: str) -> None:
        entry = DEFAULT_REGISTRY[name]
        assert entry.needs_gc_heap
        assert not entry.needs_stack_size
        assert not entry.skip

    @pytest.mark.parametrize("name", ["quicksort", "quicksort_float"])
    def test_stack_and_heap_programs(self, name: str) -> None:
        entry = DEFAULT_REGISTRY[name]
        assert entry.needs_stack_size and entry.needs_gc_heap

    def test_unknown_name_gets_defaults(self) -> None:
        assert lookup(DEFAULT_REGISTRY, "fib") == BenchmarkOptions()

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_REGISTRY["fib"] = BenchmarkOptions()  # type: ignore[index]


class TestBuildRegistry:
    def test_without_overrides_matches_default(self) -> None:
        assert dict(build_registry()) == dict(DEFAULT_REGISTRY)

    def test_override_replaces_entry(self) -> None:
        registry = build_registry({"merkletrees": BenchmarkEntryConfig(skip=True)})
        assert lookup(registry, "merkletrees") == BenchmarkOptions(skip=True)
        assert lookup(registry, "quicksort") == DEFAULT_REGISTRY["quicksort"]

    def test_override_adds_entry(self) -> None:
        registry = build_registry({"fib": BenchmarkEntryConfig(needs_stack_size=True)})
        assert lookup(registry, "fib").runtime_flags(8, 16) == ("--stack-size=8",)


class TestRuntimeFlags:
    def test_stack_size_comes_first(self) -> None:
        options = BenchmarkOptions(needs_stack_size=True, needs_gc_heap=True)
        assert options.runtime_flags(1, 2) == ("--stack-size=1", "--gc-heap-size=2")

    def test_no_needs_no_flags(self) -> None:
        assert BenchmarkOptions().runtime_flags(1, 2) == ()
