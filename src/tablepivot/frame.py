"""pandas convenience wrapper around PivotBuilder."""

from __future__ import annotations

from typing import Any, Callable, Mapping

import pandas as pd

from tablepivot.aggregation import Aggregator
from tablepivot.config import (
    KeyColumn,
    PivotColumn,
    PivotConfig,
    SummaryColumn,
    ValueColumn,
)
from tablepivot.pivot import PivotBuilder
from tablepivot.table.model import DataTable


def _column_position(df: pd.DataFrame, name: Any) -> int:
    try:
        return list(df.columns).index(name)
    except ValueError:
        raise KeyError(f"Column {name!r} not found in DataFrame") from None


def pivot_dataframe(
    df: pd.DataFrame,
    index: Any | list[Any],
    columns: Any,
    values: Any,
    aggfunc: str | Aggregator = "sum",
    sort_descending: bool = False,
    title_transform: Callable[[Any], Any] | None = None,
    summary: Mapping[str, str | Aggregator] | None = None,
    percent_of_total: str | None = None,
) -> pd.DataFrame:
    """Pivot a DataFrame and return the result as a DataFrame.

    Rows come out in first-seen key order and generated columns follow the
    builder's ordering rules, unlike ``DataFrame.pivot_table`` which sorts
    both. Unobserved cells are 0 rather than NaN.

    Args:
        df: Source DataFrame
        index: Key column name, or list of names
        columns: Name of the column whose distinct values become columns
        values: Name of the column to aggregate
        aggfunc: Aggregator name or callable
        sort_descending: Column ordering flag of the pivot column
        title_transform: Optional transform for generated column titles
        summary: Mapping of label -> aggregator for summary columns
        percent_of_total: ``"row"``, ``"col"`` or None

    Returns:
        Pivoted DataFrame (key columns, generated columns, summary columns)

    Raises:
        KeyError: If a named column is not in the DataFrame
    """
    keys = index if isinstance(index, list) else [index]
    config = PivotConfig(
        key_columns=[KeyColumn(column=_column_position(df, k)) for k in keys],
        pivot_column=PivotColumn(
            column=_column_position(df, columns),
            aggregator=aggfunc,
            sort_descending=sort_descending,
            title_transform=title_transform,
        ),
        value_column=ValueColumn(column=_column_position(df, values)),
        summary_columns=[
            SummaryColumn(label=label, aggregator=func)
            for label, func in (summary or {}).items()
        ],
        percent_of_total=percent_of_total,
    )
    builder = PivotBuilder(DataTable.from_dataframe(df), config)
    return builder.get_data_table().to_dataframe()
