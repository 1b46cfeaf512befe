"""
Table helper functions.

Stateless helpers for reading rows and columns out of a table and turning
them into percent-of-total values. Each takes the table and indexes
explicitly.
"""

from typing import Any, List, Optional, Sequence

import numpy as np

from tablepivot.table.model import Table


def get_column_entries(table: Table, col: int, limit: Optional[int] = None) -> List[Any]:
    """Get the values of a column, top to bottom.

    Args:
        table: Table to read
        col: Column index
        limit: Maximum number of rows to read (defaults to all rows; values
            above the row count are clamped)

    Returns:
        List of cell values
    """
    rows = table.get_number_of_rows()
    if not limit or limit > rows:
        limit = rows
    return [table.get_value(r, col) for r in range(limit)]


def get_row_values(table: Table, row: int, cols: Sequence[int]) -> List[Any]:
    """Get the values of one row for the given columns, in column order."""
    return [table.get_value(row, c) for c in cols]


def round_percent(fractions: Any) -> Any:
    """Convert fractions to percentages rounded half-up to 2 decimals.

    ``0.123456`` becomes ``12.35``. Works element-wise on arrays; NaN stays
    NaN.
    """
    return np.floor(np.asarray(fractions, dtype=float) * 10000 + 0.5) / 100


def get_percent_total_array(values: Sequence[Any]) -> List[float]:
    """Express each value as a fraction of the sum of all values.

    None counts as 0. With a zero total, non-zero entries become +inf or
    -inf and zero entries become NaN.

    Args:
        values: Numeric values

    Returns:
        List of fractions (not yet multiplied by 100)
    """
    arr = np.array([0 if v is None else v for v in values], dtype=float)
    total = arr.sum()
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.divide(arr, total).tolist()


def get_column_percent_total_array(table: Table, col: int) -> List[float]:
    """Fractions of the column total for every cell in a column."""
    return get_percent_total_array(get_column_entries(table, col))


def get_row_percent_total_array(table: Table, row: int, cols: Sequence[int]) -> List[float]:
    """Fractions of the row total (over ``cols``) for the given cells of a row."""
    return get_percent_total_array(get_row_values(table, row, cols))
