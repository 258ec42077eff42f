# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Run option resolver.

Turns the `key=value` tokens from the command line into a frozen RunOptions.
Every recognised key is listed in OPTION_KEYS together with how its value is
parsed; anything else is kept aside and reported as a warning instead of being
silently dropped.

A help token (`--help`, `help`, `h`) anywhere in the sequence wins over
everything else, including malformed values that come before it.
"""

import re
from typing import Callable, Iterable

from pydantic import ValidationError

from rtbench.config.exceptions import HelpRequested, OptionError
from rtbench.config.schema import RunOptions
from rtbench.logging.logger import get_logger

logger = get_logger(__name__)

HELP_TOKENS: frozenset[str] = frozenset({"--help", "help", "h"})

_FALSY_VALUES: frozenset[str] = frozenset({"", "false", "0", "no", "off"})
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_int(key: str, raw: str) -> int:
    text = raw.strip()
    if not _INTEGER.fullmatch(text):
        raise OptionError(f"{key} expects a base-10 integer, got {raw!r}")
    return int(text, 10)


def _parse_seconds(key: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as err:
        raise OptionError(f"{key} expects a number of seconds, got {raw!r}") from err


def _parse_truthy(key: str, raw: str) -> bool:
    return raw.strip().lower() not in _FALSY_VALUES


def _parse_name_list(key: str, raw: str) -> frozenset[str]:
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


# key -> (RunOptions field, parser). `--no-clean` is inverted below.
OPTION_KEYS: dict[str, tuple[str, Callable[[str, str], object]]] = {
    "--no-clean": ("clean", _parse_truthy),
    "--times": ("times", _parse_int),
    "--warmup": ("warmup", _parse_int),
    "--stack-size": ("stack_size", _parse_int),
    "--gc-heap": ("gc_heap", _parse_int),
    "--benchmarks": ("benchmarks", _parse_name_list),
    "--runtimes": ("runtimes", _parse_name_list),
    "--timeout": ("timeout_seconds", _parse_seconds),
}


def split_tokens(tokens: Iterable[str]) -> dict[str, str]:
    """
    Split raw tokens into a key/value mapping.

    Raises HelpRequested as soon as a help token shows up. A token without
    `=` maps to an empty value, which resolve_options treats as not given.
    The last occurrence of a key wins.
    """
    tokens = list(tokens)
    if any(token in HELP_TOKENS for token in tokens):
        raise HelpRequested()

    pairs: dict[str, str] = {}
    for token in tokens:
        key, _, value = token.partition("=")
        pairs[key] = value
    return pairs


def resolve_options(tokens: Iterable[str]) -> RunOptions:
    """
    Resolve command-line tokens into a validated, frozen RunOptions.

    Args:
        tokens: The `key=value` strings, in command-line order.

    Returns:
        The run configuration for this process.

    Raises:
        HelpRequested: A help token was present.
        OptionError: A value could not be parsed or failed validation.
    """
    pairs = split_tokens(tokens)

    values: dict[str, object] = {}
    unknown: list[str] = []
    for key, raw in pairs.items():
        if key not in OPTION_KEYS:
            unknown.append(key)
            continue
        if not raw.strip():
            # `--times=` or a bare `--benchmarks` means the option was not given
            continue
        field_name, parser = OPTION_KEYS[key]
        parsed = parser(key, raw)
        if key == "--no-clean":
            parsed = not parsed
        values[field_name] = parsed

    if unknown:
        logger.warning(
            "Ignoring unrecognised options",
            extra={"options": unknown, "known": sorted(OPTION_KEYS)},
        )
    values["unknown"] = tuple(unknown)

    try:
        return RunOptions(**values)
    except ValidationError as err:
        raise OptionError(f"Invalid run options:\n{err}") from err


def format_usage(prog: str = "rtbench") -> str:
    """Usage text printed for help tokens."""
    return "\n".join([
        f"Usage: {prog} [--config=PATH] [--log-level=LEVEL] [--benchmark-dir=PATH] [options]",
        "Options:",
        "  --no-clean=true|false",
        "  --times=NUM",
        "  --warmup=NUM",
        "  --stack-size=NUM",
        "  --gc-heap=NUM",
        "  --benchmarks=NAME1,NAME2,...",
        "  --runtimes=NAME1,NAME2,...",
        "  --timeout=SECONDS",
        "  --help",
        "Example:",
        f"  {prog} --no-clean=true --times=10 --gc-heap=40960000 "
        "--benchmarks=mandelbrot,binarytrees_class --runtimes=wamr-interp,qjs",
    ]) + "\n"
