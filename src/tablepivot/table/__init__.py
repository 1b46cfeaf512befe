"""
Table module.

This module provides the typed data table the pivot builder reads and
writes, plus the formatters that render its columns for display.
"""

from tablepivot.table.model import (
    Cell,
    ColumnType,
    DataTable,
    Table,
)
from tablepivot.table.formatters import (
    DateFormat,
    Formatter,
    NumberFormat,
    PatternFormat,
)

__all__ = [
    "Cell",
    "ColumnType",
    "DataTable",
    "Table",
    "DateFormat",
    "Formatter",
    "NumberFormat",
    "PatternFormat",
]
