"""Pivot builder: reshapes a table of raw observations into a pivot table.

The whole conversion runs inside the constructor, in a fixed order:

1. key columns are copied onto the output schema,
2. one output column is generated per distinct pivot value,
3. a single pass over the source rows groups raw values into the model,
4. every model cell is reduced with the pivot aggregator,
5. summary columns, percent-of-total conversion and formatting run in the
   order the configuration asks for.

Example: with key ``name``, pivot ``day`` and value ``spend``::

    Name | Day | Spend             Name | Tue | Mon
    Oli  | Mon | 10        ==>     Oli  |   0 |  25
    Oli  | Mon | 15                Kate |  15 |   8
    Kate | Mon | 8
    Kate | Tue | 15

and the intermediate model is ``{0: {2: [10, 15]}, 1: {2: [8], 1: [15]}}``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from tablepivot.aggregation import agg_sum
from tablepivot.config import PercentOfTotal, PivotConfig
from tablepivot.exceptions import PivotConfigurationError
from tablepivot.table.model import ColumnType, DataTable, Table
from tablepivot.utils import (
    get_column_entries,
    get_column_percent_total_array,
    get_row_percent_total_array,
    get_row_values,
    round_percent,
)

logger = logging.getLogger(__name__)


@dataclass
class ColumnStatus:
    """Snapshot of one generated column."""

    entries: list[Any]
    label: str


def _row_key(values: Sequence[Any]) -> str:
    """Encode a key tuple as a stable string (``1``, ``1.0`` and ``"1"`` differ)."""
    return repr(tuple(values))


class PivotBuilder:
    """Builds a pivoted DataTable from a source table and a PivotConfig.

    Usage::

        builder = PivotBuilder(source, {
            "key_columns": [{"column": 0}],
            "pivot_column": {"column": 1, "aggregator": "sum"},
            "value_column": {"column": 2},
            "summary_columns": [{"label": "Total", "aggregator": "sum"}],
        })
        result = builder.get_data_table()

    Raises:
        PivotConfigurationError: If key columns, pivot column (with its
            aggregator) or value column is missing. Any other error raised
            while pivoting propagates unchanged.
    """

    def __init__(self, table: Table, config: PivotConfig | Mapping[str, Any]) -> None:
        if not isinstance(config, PivotConfig):
            config = PivotConfig.from_dict(config)
        missing = config.missing()
        if missing:
            raise PivotConfigurationError(
                "Insufficient options provided: key_columns, pivot_column, "
                f"value_column must be provided (missing: {', '.join(missing)})"
            )

        self._source = table
        self._config = config
        self._output = DataTable()
        self._key_column_index_map: dict[int, int] = {}
        self._column_index_map: dict[str, int] = {}
        self._row_aggregates: dict[int, list[Any]] = {}
        self._model: dict[int, dict[int, list[Any]]] = {}

        self._convert()

    def _convert(self) -> None:
        config = self._config
        self._add_key_columns()
        self._add_pivot_columns()
        self._build_model()
        self._write_table_from_model()
        logger.debug(
            "Pivoted %d source rows into %d rows x %d generated columns",
            self._source.get_number_of_rows(),
            self._output.get_number_of_rows(),
            len(self._column_index_map),
        )

        before = config.summary_before_transforms
        if before:
            self._add_summary_columns()
        if config.percent_of_total is not None:
            self._convert_to_percent_of_total(config.percent_of_total)
        if config.pivot_column.formatters:
            self._apply_formatting(config.pivot_column.formatters, self.get_column_indexes())
        if config.summary_columns and not before:
            self._add_summary_columns()

    # -- schema -----------------------------------------------------------

    def _add_key_columns(self) -> None:
        for kc in self._config.key_columns:
            col_type = kc.type or self._source.get_column_type(kc.column)
            label = self._source.get_column_label(kc.column)
            self._key_column_index_map[kc.column] = self._output.add_column(col_type, label)

    def _column_title(self, value: Any) -> Any:
        transform = self._config.pivot_column.title_transform
        return transform(value) if transform is not None else value

    def _add_pivot_columns(self) -> None:
        pivot = self._config.pivot_column
        distinct = self._source.get_distinct_values(pivot.column)
        # Ascending, reversed unless sort_descending is set: the default
        # display order is descending.
        if not pivot.sort_descending:
            distinct = list(reversed(distinct))

        col_type = self._source.get_column_type(self._config.value_column.column)
        for value in distinct:
            title = self._column_title(value)
            # Titles that collide after the transform share one column
            if str(title) not in self._column_index_map:
                label = "" if title is None else str(title)
                self._column_index_map[str(title)] = self._output.add_column(col_type, label)

    # -- grouping -----------------------------------------------------------

    def _key_values(self, row: int) -> list[Any]:
        values = []
        for kc in self._config.key_columns:
            value = self._source.get_value(row, kc.column)
            if kc.transform is not None:
                value = kc.transform(value)
            if kc.type == ColumnType.STRING:
                value = str(value)
            values.append(value)
        return values

    def _build_model(self) -> None:
        keys_map: dict[str, int] = {}
        default_row = [0] * len(self._column_index_map)
        pivot_col = self._config.pivot_column.column
        value_col = self._config.value_column.column

        for i in range(self._source.get_number_of_rows()):
            key_values = self._key_values(i)
            key = _row_key(key_values)
            row_index = keys_map.get(key)
            if row_index is None:
                row_index = self._output.add_row(key_values + default_row)
                keys_map[key] = row_index
                self._model[row_index] = {}
                self._row_aggregates[row_index] = []

            title = self._column_title(self._source.get_value(i, pivot_col))
            column_index = self._column_index_map[str(title)]
            self._model[row_index].setdefault(column_index, []).append(
                self._source.get_value(i, value_col)
            )

    def _write_table_from_model(self) -> None:
        aggregator = self._config.pivot_column.aggregator
        for row_index, columns in self._model.items():
            for column_index in sorted(columns):
                result = aggregator(list(columns[column_index]))
                self._output.set_value(row_index, column_index, result)
                self._row_aggregates[row_index].append(result)

    # -- post-processing ------------------------------------------------------

    def _add_summary_columns(self) -> None:
        cols = self.get_column_indexes()
        for summary in self._config.summary_columns:
            summary_col = self._output.add_column(ColumnType.NUMBER, summary.label)
            for row_index in self._row_aggregates:
                row_values = get_row_values(self._output, row_index, cols)
                self._output.set_value(row_index, summary_col, summary.aggregator(row_values))
            if summary.formatters:
                self._apply_formatting(summary.formatters, [summary_col])
        logger.debug("Added %d summary columns", len(self._config.summary_columns))

    def _apply_formatting(self, formatters: Sequence[Any], cols: Sequence[int]) -> None:
        for formatter in formatters:
            for col in cols:
                formatter.format(self._output, col)

    def _convert_to_percent_of_total(self, mode: PercentOfTotal) -> None:
        cols = self.get_column_indexes()
        if mode == PercentOfTotal.COL:
            for col in cols:
                percents = round_percent(get_column_percent_total_array(self._output, col))
                for row, pct in enumerate(percents.tolist()):
                    self._output.set_value(row, col, pct)
        elif mode == PercentOfTotal.ROW:
            for row in range(self._output.get_number_of_rows()):
                percents = round_percent(get_row_percent_total_array(self._output, row, cols))
                for col, pct in zip(cols, percents.tolist()):
                    self._output.set_value(row, col, pct)
        logger.debug("Converted generated columns to percent of %s total", mode.value)

    # -- accessors ------------------------------------------------------------

    def get_data_table(self) -> DataTable:
        """Return the pivoted table."""
        return self._output

    def get_model(self) -> dict[int, dict[int, list[Any]]]:
        """Return a copy of the grouping model (row -> column -> raw values)."""
        return {
            row: {col: list(values) for col, values in columns.items()}
            for row, columns in self._model.items()
        }

    def get_row_aggregates(self) -> dict[int, list[Any]]:
        """Return a copy of each row's aggregated values, in column order."""
        return {row: list(values) for row, values in self._row_aggregates.items()}

    def get_key_column_indexes(self) -> dict[int, int]:
        """Source column index -> output column index for the key columns."""
        return dict(self._key_column_index_map)

    def get_column_indexes(self) -> list[int]:
        """Output indexes of the generated pivot columns, in creation order."""
        return list(self._column_index_map.values())

    def get_generated_columns_totals(self) -> list[Any]:
        """Sum of every generated column, in generated-column order."""
        return [
            agg_sum(get_column_entries(self._output, col))
            for col in self.get_column_indexes()
        ]

    def get_column_status(self) -> dict[int, ColumnStatus]:
        """Entries and label of every generated column, keyed by column index."""
        return {
            col: ColumnStatus(
                entries=get_column_entries(self._output, col),
                label=self._output.get_column_label(col),
            )
            for col in self.get_column_indexes()
        }
