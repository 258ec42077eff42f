# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for benchmark programs.

Frozen dataclasses: a unit is fixed once discovery has produced it.
"""

from dataclasses import dataclass
from pathlib import Path

SOURCE_EXTENSION = ".ts"
PREBUILT_EXTENSION = ".js"


@dataclass(frozen=True)
class BenchmarkOptions:
    """
    Known quirks of one benchmark program.

    Some programs recurse deeply or allocate a lot and need larger limits on
    the WAMR runtimes than the engine defaults. The actual sizes come from the
    run options; the registry only says which limits a program needs.
    """

    skip: bool = False
    needs_stack_size: bool = False
    needs_gc_heap: bool = False

    def runtime_flags(self, stack_size: int, gc_heap: int) -> tuple[str, ...]:
        """WAMR command-line flags for this program, stack size first."""
        flags: list[str] = []
        if self.needs_stack_size:
            flags.append(f"--stack-size={stack_size}")
        if self.needs_gc_heap:
            flags.append(f"--gc-heap-size={gc_heap}")
        return tuple(flags)


@dataclass(frozen=True)
class BenchmarkUnit:
    """
    One benchmark program, ready to build.

    A unit is identified by the stem of its TypeScript source; the hand-written
    JavaScript version with the same stem is what the JS engines run, and the
    MoonBit project lives in a directory of the same name.
    """

    name: str
    directory: Path
    skip: bool = False
    runtime_flags: tuple[str, ...] = ()

    @property
    def source_path(self) -> Path:
        return self.directory / f"{self.name}{SOURCE_EXTENSION}"

    @property
    def js_path(self) -> Path:
        return self.directory / f"{self.name}{PREBUILT_EXTENSION}"

    @property
    def moonbit_dir(self) -> Path:
        return self.directory / self.name
