"""
tablepivot - Pivot tables over typed data tables.

This package reshapes rows of raw observations into a pivoted summary table:
rows keyed by one or more key columns, one generated column per distinct value
of a pivot column, and cells aggregated from the matching raw values.

Usage:
    >>> from tablepivot import DataTable, PivotBuilder
    >>> source = DataTable.from_records(
    ...     [("string", "Name"), ("string", "Day"), ("number", "Spend")],
    ...     [["Oli", "Mon", 10], ["Oli", "Mon", 15], ["Kate", "Tue", 15]],
    ... )
    >>> builder = PivotBuilder(source, {
    ...     "key_columns": [{"column": 0}],
    ...     "pivot_column": {"column": 1, "aggregator": "sum"},
    ...     "value_column": {"column": 2},
    ... })
    >>> table = builder.get_data_table()

Key components:
- DataTable: typed in-memory table with a pandas bridge
- PivotConfig: the pivot configuration (key, pivot, value, summary columns)
- PivotBuilder: runs the pivot and exposes the result and its model
- pivot_dataframe: one-call pivot for pandas DataFrames
"""

from .table import (
    Cell,
    ColumnType,
    DataTable,
    DateFormat,
    NumberFormat,
    PatternFormat,
    Table,
)
from .config import (
    ApplyOrder,
    KeyColumn,
    PercentOfTotal,
    PivotColumn,
    PivotConfig,
    SummaryColumn,
    ValueColumn,
)
from .aggregation import AGGREGATORS, get_aggregator
from .pivot import ColumnStatus, PivotBuilder
from .frame import pivot_dataframe
from .exceptions import *

# Version
__version__ = "0.1.0"

__all__ = [
    'Cell',
    'ColumnType',
    'DataTable',
    'DateFormat',
    'NumberFormat',
    'PatternFormat',
    'Table',
    'ApplyOrder',
    'KeyColumn',
    'PercentOfTotal',
    'PivotColumn',
    'PivotConfig',
    'SummaryColumn',
    'ValueColumn',
    'AGGREGATORS',
    'get_aggregator',
    'ColumnStatus',
    'PivotBuilder',
    'PivotConfigurationError',
    'pivot_dataframe',
]
