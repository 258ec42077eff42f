# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Comparison table rendering.

All records go into one grid table. The column set is the union of every
record's labels in the order they are first seen, so a runtime that produced
nothing for any benchmark has no column at all, and a benchmark missing a
value just gets a blank cell.
"""

from tabulate import tabulate

from rtbench.reporting.results import ResultRecord

INDEX_COLUMN = "(index)"


def collect_columns(records: list[ResultRecord]) -> list[str]:
    """Union of labels across records, first-seen order."""
    columns: list[str] = []
    seen: set[str] = set()
    for record in records:
        for label in record:
            if label not in seen:
                seen.add(label)
                columns.append(label)
    return columns


def render_table(records: list[ResultRecord]) -> str:
    """Render every record as a single text table, one row per benchmark."""
    if not records:
        return "No benchmarks were run.\n"

    columns = collect_columns(records)
    rows = [
        [index, *(record.get(column, "") for column in columns)]
        for index, record in enumerate(records)
    ]
    table = tabulate(
        rows,
        headers=[INDEX_COLUMN, *columns],
        tablefmt="grid",
        disable_numparse=True,
    )
    return table + "\n"
