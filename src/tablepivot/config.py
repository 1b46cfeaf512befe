"""
Pivot configuration.

Configuration objects are plain dataclasses describing what to pivot; they do
no work themselves. ``PivotConfig.from_dict`` builds a configuration from a
mapping and understands both the snake_case field names and the legacy
camelCase option names:

    ================  =========================
    field             legacy option
    ================  =========================
    key_columns       pivotKeyIndexes
    pivot_column      pivotColumnIndex
    value_column      pivotValueIndex
    summary_columns   summaryColumns
    percent_of_total  usePercentTotalValues
    sort_descending   sortDesc
    title_transform   columnTitleModifier
    transform         modifier
    apply_order       applyOrder
    ================  =========================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from tablepivot.aggregation import Aggregator, get_aggregator
from tablepivot.exceptions import PivotConfigurationError
from tablepivot.table.model import ColumnType


class PercentOfTotal(str, Enum):
    ROW = "row"
    COL = "col"


class ApplyOrder(str, Enum):
    BEFORE = "before"
    AFTER = "after"


_ALIASES: Dict[str, str] = {
    "pivotKeyIndexes": "key_columns",
    "pivotColumnIndex": "pivot_column",
    "pivotValueIndex": "value_column",
    "summaryColumns": "summary_columns",
    "usePercentTotalValues": "percent_of_total",
    "sortDesc": "sort_descending",
    "columnTitleModifier": "title_transform",
    "modifier": "transform",
    "applyOrder": "apply_order",
}


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {_ALIASES.get(k, k): v for k, v in data.items()}


def _parse_enum(enum_cls, value, name):
    if isinstance(value, enum_cls):
        return value
    # Legacy boolean flags (usePercentTotalValues: true) select nothing
    if value is None or isinstance(value, bool):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(repr(m.value) for m in enum_cls)
        raise PivotConfigurationError(
            f"Invalid {name}: {value!r}. Expected one of {choices}"
        ) from None


@dataclass
class KeyColumn:
    """A source column that contributes to output row identity.

    Attributes:
        column: Source column index
        transform: Optional ``(value) -> value`` applied before keying
        type: Optional declared output type; ``"string"`` also coerces keys
            with ``str()``
    """

    column: int
    transform: Optional[Callable[[Any], Any]] = None
    type: Optional[ColumnType] = None

    def __post_init__(self):
        self.type = _parse_enum(ColumnType, self.type, "key column type")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeyColumn":
        data = _normalize_keys(data)
        return cls(
            column=data["column"],
            transform=data.get("transform"),
            type=data.get("type"),
        )


@dataclass
class PivotColumn:
    """The source column whose distinct values become output columns.

    Attributes:
        column: Source column index
        aggregator: Aggregator callable or name (see tablepivot.aggregation)
        sort_descending: Column ordering flag, read for truthiness (pass a
            real bool; the string "false" counts as set). Distinct values
            are sorted ascending and then reversed unless this is set, so
            the default display order is descending.
        title_transform: Optional ``(value) -> title`` for column headers
        formatters: Formatters applied to every generated column
    """

    column: int
    aggregator: Optional[Union[str, Aggregator]] = None
    sort_descending: bool = False
    title_transform: Optional[Callable[[Any], Any]] = None
    formatters: List[Any] = field(default_factory=list)

    def __post_init__(self):
        if self.aggregator is not None:
            self.aggregator = get_aggregator(self.aggregator)
        self.formatters = list(self.formatters or [])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PivotColumn":
        data = _normalize_keys(data)
        return cls(
            column=data["column"],
            aggregator=data.get("aggregator"),
            sort_descending=data.get("sort_descending", False),
            title_transform=data.get("title_transform"),
            formatters=data.get("formatters"),
        )


@dataclass
class ValueColumn:
    """The source column supplying the values to aggregate."""

    column: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ValueColumn":
        return cls(column=data["column"])


@dataclass
class SummaryColumn:
    """An extra output column aggregating across a row's generated columns.

    Attributes:
        label: Column label
        aggregator: Aggregator callable or name
        formatters: Formatters applied to this column once it is filled
        apply_order: Read from the first summary column only; BEFORE runs
            all summary columns ahead of percent conversion and formatting
    """

    label: str
    aggregator: Union[str, Aggregator]
    formatters: List[Any] = field(default_factory=list)
    apply_order: Optional[ApplyOrder] = None

    def __post_init__(self):
        self.aggregator = get_aggregator(self.aggregator)
        self.formatters = list(self.formatters or [])
        self.apply_order = _parse_enum(ApplyOrder, self.apply_order, "apply_order")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SummaryColumn":
        data = _normalize_keys(data)
        return cls(
            label=data["label"],
            aggregator=data["aggregator"],
            formatters=data.get("formatters"),
            apply_order=data.get("apply_order"),
        )


def _coerce(item: Any, cls):
    if item is None or isinstance(item, cls):
        return item
    return cls.from_dict(item)


@dataclass
class PivotConfig:
    """Everything a PivotBuilder needs to know.

    ``key_columns``, ``pivot_column`` and ``value_column`` are mandatory; the
    builder refuses to run without them. They default to empty here so that
    an incomplete configuration can still be constructed and reported.
    """

    key_columns: List[KeyColumn] = field(default_factory=list)
    pivot_column: Optional[PivotColumn] = None
    value_column: Optional[ValueColumn] = None
    summary_columns: List[SummaryColumn] = field(default_factory=list)
    percent_of_total: Optional[PercentOfTotal] = None

    def __post_init__(self):
        self.key_columns = [_coerce(k, KeyColumn) for k in (self.key_columns or [])]
        self.pivot_column = _coerce(self.pivot_column, PivotColumn)
        self.value_column = _coerce(self.value_column, ValueColumn)
        self.summary_columns = [
            _coerce(s, SummaryColumn) for s in (self.summary_columns or [])
        ]
        self.percent_of_total = _parse_enum(
            PercentOfTotal, self.percent_of_total, "percent_of_total"
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PivotConfig":
        """Build a configuration from a mapping of options.

        Nested specs may be mappings or already-built dataclass instances.

        Args:
            data: Option mapping (snake_case or legacy camelCase keys)

        Returns:
            PivotConfig instance (not yet validated for completeness)

        Raises:
            PivotConfigurationError: If an enum option has an unknown value
            TypeError: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected mapping, got {type(data)}")
        data = _normalize_keys(data)
        return cls(
            key_columns=list(data.get("key_columns") or []),
            pivot_column=data.get("pivot_column"),
            value_column=data.get("value_column"),
            summary_columns=list(data.get("summary_columns") or []),
            percent_of_total=data.get("percent_of_total"),
        )

    def missing(self) -> List[str]:
        """Names of the mandatory groups that are absent."""
        missing = []
        if not self.key_columns:
            missing.append("key_columns")
        if self.pivot_column is None or self.pivot_column.aggregator is None:
            missing.append("pivot_column")
        if self.value_column is None:
            missing.append("value_column")
        return missing

    @property
    def summary_before_transforms(self) -> bool:
        """Whether summary columns run before percent conversion and formatting.

        Only the first summary column's apply_order is consulted.
        """
        return bool(self.summary_columns) and (
            self.summary_columns[0].apply_order == ApplyOrder.BEFORE
        )
