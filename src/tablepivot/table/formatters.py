"""
Column formatters.

A formatter rewrites the display strings of one column in place; the stored
values are never changed. Formatters are applied with
``formatter.format(table, column_index)`` and skip None cells.
"""

import datetime
from typing import Any, Protocol

from tablepivot.table.model import DataTable


class Formatter(Protocol):
    """Anything exposing ``format(table, column_index)``."""

    def format(self, table: DataTable, column_index: int) -> None: ...


class NumberFormat:
    """Format numeric cells with fixed fraction digits and digit grouping.

    Attributes:
        fraction_digits: Digits after the decimal symbol
        decimal_symbol: Character separating the fraction
        grouping_symbol: Thousands separator (empty string for none)
        prefix: Text placed before the number, e.g. ``"$"``
        suffix: Text placed after the number, e.g. ``"%"``
        negative_parens: Render negatives as ``(1.00)`` instead of ``-1.00``
    """

    def __init__(
        self,
        fraction_digits: int = 2,
        decimal_symbol: str = ".",
        grouping_symbol: str = ",",
        prefix: str = "",
        suffix: str = "",
        negative_parens: bool = False,
    ) -> None:
        if fraction_digits < 0:
            raise ValueError("fraction_digits must be non-negative")
        self.fraction_digits = fraction_digits
        self.decimal_symbol = decimal_symbol
        self.grouping_symbol = grouping_symbol
        self.prefix = prefix
        self.suffix = suffix
        self.negative_parens = negative_parens

    def format_value(self, value: Any) -> str:
        """Render a single number."""
        text = f"{abs(value):,.{self.fraction_digits}f}"
        # Swap the locale-neutral separators for the configured ones
        text = text.replace(",", "\x00").replace(".", self.decimal_symbol)
        text = text.replace("\x00", self.grouping_symbol)
        text = f"{self.prefix}{text}{self.suffix}"
        if value < 0:
            return f"({text})" if self.negative_parens else f"-{text}"
        return text

    def format(self, table: DataTable, column_index: int) -> None:
        for row in range(table.get_number_of_rows()):
            value = table.get_value(row, column_index)
            if value is None or isinstance(value, bool):
                continue
            if isinstance(value, (int, float)):
                table.set_formatted_value(row, column_index, self.format_value(value))

    def __repr__(self) -> str:
        return (
            f"NumberFormat(fraction_digits={self.fraction_digits}, "
            f"prefix={self.prefix!r}, suffix={self.suffix!r})"
        )


class PatternFormat:
    """Format cells through a ``str.format`` pattern.

    The value is available as ``{0}`` and ``{value}``; the current formatted
    string (from an earlier formatter, or ``str(value)``) as ``{1}`` and
    ``{text}``, so patterns can wrap a previous formatter's output.

    Example:
        >>> PatternFormat("{text} units")
    """

    def __init__(self, pattern: str) -> None:
        if not isinstance(pattern, str):
            raise ValueError("Pattern must be a string")
        self.pattern = pattern

    def format(self, table: DataTable, column_index: int) -> None:
        for row in range(table.get_number_of_rows()):
            value = table.get_value(row, column_index)
            if value is None:
                continue
            text = table.get_formatted_value(row, column_index)
            table.set_formatted_value(
                row, column_index, self.pattern.format(value, text, value=value, text=text)
            )

    def __repr__(self) -> str:
        return f"PatternFormat({self.pattern!r})"


class DateFormat:
    """Format date and datetime cells with an ``strftime`` pattern."""

    def __init__(self, pattern: str = "%Y-%m-%d") -> None:
        self.pattern = pattern

    def format(self, table: DataTable, column_index: int) -> None:
        for row in range(table.get_number_of_rows()):
            value = table.get_value(row, column_index)
            if isinstance(value, (datetime.date, datetime.time)):
                table.set_formatted_value(row, column_index, value.strftime(self.pattern))

    def __repr__(self) -> str:
        return f"DateFormat({self.pattern!r})"
