"""Identifier allocation for new rows.

The store never enforces identifier uniqueness; callers ask for the next
free identifier before inserting.
"""

from __future__ import annotations

import math
from typing import Sequence

from core.types import Record
from store.query_engine import cell_value, is_numeric_value


def next_id(rows: Sequence[Record], column: str) -> int:
    """Return one more than the largest numeric value in a column.

    Non-numeric and absent values are ignored. The running maximum starts
    at zero, so an empty table or a column without positive numbers yields 1.

    Args:
        rows: Rows to scan.
        column: Identifier column name.

    Returns:
        Fresh identifier, truncated to an integer.
    """
    max_value = 0.0
    for row in rows:
        value = cell_value(row, column)
        if not is_numeric_value(value):
            continue
        number = float(value)
        if math.isfinite(number):
            max_value = max(max_value, number)
    return int(max_value + 1)
