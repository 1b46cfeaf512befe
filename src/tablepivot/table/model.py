"""
In-memory data table model.

This module provides the tabular structure the pivot builder reads from and
writes to:
- ColumnType: the typed column vocabulary (string, number, boolean, ...)
- Cell: a stored value plus its optional formatted representation
- Table: the protocol the pivot builder consumes
- DataTable: a concrete list-of-rows implementation with a pandas bridge
"""

import math
from enum import Enum
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from pandas.api import types as ptypes


class ColumnType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIMEOFDAY = "timeofday"


class Table(Protocol):
    """Capability the pivot builder needs from a source or output table."""

    def get_number_of_rows(self) -> int: ...

    def get_number_of_columns(self) -> int: ...

    def get_value(self, row: int, col: int) -> Any: ...

    def set_value(self, row: int, col: int, value: Any) -> None: ...

    def add_column(self, type: Union[str, ColumnType], label: str = "") -> int: ...

    def add_row(self, values: Optional[Sequence[Any]] = None) -> int: ...

    def get_column_type(self, col: int) -> ColumnType: ...

    def get_column_label(self, col: int) -> str: ...

    def get_distinct_values(self, col: int) -> List[Any]: ...


class Cell:
    """A single stored cell.

    Attributes:
        value: The raw cell value (any Python scalar, or None)
        formatted: Display string written by a formatter, or None
    """

    __slots__ = ("value", "formatted")

    def __init__(self, value: Any = None, formatted: Optional[str] = None) -> None:
        self.value = value
        self.formatted = formatted

    def __repr__(self) -> str:
        if self.formatted is None:
            return f"Cell({self.value!r})"
        return f"Cell({self.value!r}, formatted={self.formatted!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.value == other.value and self.formatted == other.formatted


def _distinct_sort_key(value: Any) -> Tuple[int, Any]:
    # None sorts before every other value
    if value is None:
        return (0, 0)
    return (1, value)


def _column_type_for_dtype(dtype: Any) -> ColumnType:
    """Map a pandas dtype onto a ColumnType."""
    if ptypes.is_bool_dtype(dtype):
        return ColumnType.BOOLEAN
    if ptypes.is_numeric_dtype(dtype):
        return ColumnType.NUMBER
    if ptypes.is_datetime64_any_dtype(dtype):
        return ColumnType.DATETIME
    return ColumnType.STRING


def _to_python(value: Any) -> Any:
    """Convert a pandas/numpy scalar to a plain Python value, NaN to None."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
        if isinstance(value, float) and math.isnan(value):
            return None
    return value


class DataTable:
    """A typed, row-oriented table.

    Columns are addressed by 0-indexed position and carry a ColumnType and a
    label. Rows always have exactly one cell per column: adding a column pads
    every existing row with None, and short rows are padded on insert.

    Usage::

        table = DataTable()
        table.add_column("string", "Name")
        table.add_column("number", "Spend")
        table.add_row(["Oli", 10])
        table.get_value(0, 1)  # 10
    """

    def __init__(self) -> None:
        self._columns: List[Tuple[ColumnType, str]] = []
        self._rows: List[List[Cell]] = []

    @classmethod
    def from_records(
        cls,
        columns: Sequence[Tuple[Union[str, ColumnType], str]],
        rows: Iterable[Sequence[Any]] = (),
    ) -> "DataTable":
        """Build a table from ``(type, label)`` column specs and row values.

        Args:
            columns: Sequence of (type, label) pairs
            rows: Iterable of row value sequences

        Returns:
            New DataTable holding the given rows
        """
        table = cls()
        for col_type, label in columns:
            table.add_column(col_type, label)
        table.add_rows(rows)
        return table

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "DataTable":
        """Build a table from a pandas DataFrame.

        Column types are inferred from the frame's dtypes; NaN and NaT cells
        become None. The index is dropped.

        Args:
            df: Source DataFrame

        Returns:
            New DataTable with one column per DataFrame column
        """
        table = cls()
        for label, dtype in zip(df.columns, df.dtypes):
            table.add_column(_column_type_for_dtype(dtype), str(label))
        for row in df.itertuples(index=False, name=None):
            table.add_row([_to_python(v) for v in row])
        return table

    def to_dataframe(self, formatted: bool = False) -> pd.DataFrame:
        """Convert the table to a pandas DataFrame.

        Args:
            formatted: If True, use formatted strings where a formatter has
                written one and fall back to the raw value elsewhere

        Returns:
            DataFrame with one column per table column, labels as headers
        """
        labels = [label for _, label in self._columns]
        if formatted:
            data = [
                [c.formatted if c.formatted is not None else c.value for c in row]
                for row in self._rows
            ]
        else:
            data = [[c.value for c in row] for row in self._rows]
        return pd.DataFrame(data, columns=labels)

    def _check_row(self, row: int) -> None:
        if row < 0 or row >= len(self._rows):
            raise IndexError(f"Row index {row} out of range (0..{len(self._rows) - 1})")

    def _check_col(self, col: int) -> None:
        if col < 0 or col >= len(self._columns):
            raise IndexError(
                f"Column index {col} out of range (0..{len(self._columns) - 1})"
            )

    def get_number_of_rows(self) -> int:
        return len(self._rows)

    def get_number_of_columns(self) -> int:
        return len(self._columns)

    def add_column(self, type: Union[str, ColumnType], label: str = "") -> int:
        """Append a column and return its index.

        Args:
            type: ColumnType or its string value
            label: Column label

        Returns:
            Index of the new column

        Raises:
            ValueError: If type is not a known column type
        """
        self._columns.append((ColumnType(type), label))
        for row in self._rows:
            row.append(Cell())
        return len(self._columns) - 1

    def add_row(self, values: Optional[Sequence[Any]] = None) -> int:
        """Append a row and return its index.

        Args:
            values: Cell values; shorter sequences are padded with None

        Returns:
            Index of the new row

        Raises:
            ValueError: If more values than columns are given
        """
        values = list(values) if values is not None else []
        if len(values) > len(self._columns):
            raise ValueError(
                f"Row has {len(values)} values but table has {len(self._columns)} columns"
            )
        values.extend([None] * (len(self._columns) - len(values)))
        self._rows.append([Cell(v) for v in values])
        return len(self._rows) - 1

    def add_rows(self, rows: Iterable[Sequence[Any]]) -> int:
        """Append several rows and return the index of the last one (-1 if none)."""
        index = -1
        for values in rows:
            index = self.add_row(values)
        return index

    def get_value(self, row: int, col: int) -> Any:
        self._check_row(row)
        self._check_col(col)
        return self._rows[row][col].value

    def set_value(self, row: int, col: int, value: Any) -> None:
        """Store a value, clearing any formatted representation of the cell."""
        self._check_row(row)
        self._check_col(col)
        cell = self._rows[row][col]
        cell.value = value
        cell.formatted = None

    def get_formatted_value(self, row: int, col: int) -> str:
        """Return the formatted string, or ``str(value)`` if none was set.

        None cells format as the empty string.
        """
        self._check_row(row)
        self._check_col(col)
        cell = self._rows[row][col]
        if cell.formatted is not None:
            return cell.formatted
        if cell.value is None:
            return ""
        return str(cell.value)

    def set_formatted_value(self, row: int, col: int, formatted: Optional[str]) -> None:
        self._check_row(row)
        self._check_col(col)
        self._rows[row][col].formatted = formatted

    def get_column_type(self, col: int) -> ColumnType:
        self._check_col(col)
        return self._columns[col][0]

    def get_column_label(self, col: int) -> str:
        self._check_col(col)
        return self._columns[col][1]

    def set_column_label(self, col: int, label: str) -> None:
        self._check_col(col)
        self._columns[col] = (self._columns[col][0], label)

    def get_distinct_values(self, col: int) -> List[Any]:
        """Return the distinct values of a column in ascending order.

        None, if present, comes first. Values of mixed, non-comparable types
        raise TypeError.
        """
        self._check_col(col)
        distinct = dict.fromkeys(row[col].value for row in self._rows)
        return sorted(distinct, key=_distinct_sort_key)

    def get_row(self, row: int) -> List[Any]:
        """Return a copy of a row's values."""
        self._check_row(row)
        return [c.value for c in self._rows[row]]

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        labels = [label for _, label in self._columns]
        return f"DataTable(columns={labels!r}, rows={len(self._rows)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataTable):
            return NotImplemented
        return self._columns == other._columns and self._rows == other._rows
