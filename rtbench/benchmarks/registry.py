# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Static per-benchmark registry.

Programs not listed here run with default options. The harness YAML config
can replace an entry or add new ones under `benchmarks:`; whatever is given
there replaces the built-in entry for that name wholesale.
"""

from types import MappingProxyType
from typing import Mapping

from rtbench.benchmarks.models import BenchmarkOptions
from rtbench.config.schema import BenchmarkEntryConfig

_GC_HEAP = BenchmarkOptions(needs_gc_heap=True)
_STACK_AND_GC_HEAP = BenchmarkOptions(needs_stack_size=True, needs_gc_heap=True)

DEFAULT_REGISTRY: Mapping[str, BenchmarkOptions] = MappingProxyType({
    "merkletrees": _GC_HEAP,
    "mandelbrot": _GC_HEAP,
    "mandelbrot_i32": _GC_HEAP,
    "binarytrees_class": _GC_HEAP,
    "binarytrees_interface": _GC_HEAP,
    "quicksort": _STACK_AND_GC_HEAP,
    "quicksort_float": _STACK_AND_GC_HEAP,
})


def build_registry(
    overrides: Mapping[str, BenchmarkEntryConfig] | None = None,
) -> Mapping[str, BenchmarkOptions]:
    """Merge config overrides over the built-in registry. The result is read-only."""
    merged: dict[str, BenchmarkOptions] = dict(DEFAULT_REGISTRY)
    for name, entry in (overrides or {}).items():
        merged[name] = BenchmarkOptions(
            skip=entry.skip,
            needs_stack_size=entry.needs_stack_size,
            needs_gc_heap=entry.needs_gc_heap,
        )
    return MappingProxyType(merged)


def lookup(registry: Mapping[str, BenchmarkOptions], name: str) -> BenchmarkOptions:
    return registry.get(name, BenchmarkOptions())
