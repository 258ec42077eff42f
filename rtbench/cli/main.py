# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for rtbench.

The harness has a single job, so there are no subcommands. argparse only
picks out the global options (--config, --log-level, --benchmark-dir); every
other token is a `key=value` run option and is handed to the option resolver
untouched. That is also why argparse's own help is disabled: `--help`,
`help` and `h` are run-option tokens and the resolver answers them.

Usage:
    rtbench --times=10 --warmup=2
    rtbench --benchmarks=quicksort --runtimes=node,qjs --no-clean=true
    rtbench --config=bench.yaml --log-level=DEBUG
"""

import argparse
import sys
from typing import Optional, Sequence

from rtbench.cli.commands import handle_run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtbench",
        description="rtbench: cross-runtime benchmark harness.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML harness configuration file.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level.",
    )
    parser.add_argument(
        "--benchmark-dir",
        type=str,
        default=None,
        dest="benchmark_dir",
        help="Directory holding the benchmark programs (default: current directory).",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    Parses the global options, passes everything else on as run options, and
    exits with the handler's return code.
    """
    parser = build_parser()
    args, tokens = parser.parse_known_args(list(argv) if argv is not None else None)
    sys.exit(handle_run(args, tokens))


if __name__ == "__main__":
    main()
