"""Shared pytest configuration and fixtures for tablepivot tests."""

import pandas as pd
import pytest

from tablepivot import DataTable

SPEND_COLUMNS = [("string", "Name"), ("string", "Day"), ("number", "Spend")]

SPEND_ROWS = [
    ["Oli", "Mon", 10],
    ["Oli", "Mon", 15],
    ["Oli", "Mon", 13],
    ["Kate", "Mon", 8],
    ["Kate", "Tue", 15],
    ["Kate", "Tue", 11],
    ["Joe", "Tue", 25],
    ["Oli", "Tue", 30],
]


@pytest.fixture
def spend_table() -> DataTable:
    return DataTable.from_records(SPEND_COLUMNS, SPEND_ROWS)


@pytest.fixture
def spend_frame() -> pd.DataFrame:
    return pd.DataFrame(SPEND_ROWS, columns=["Name", "Day", "Spend"])


@pytest.fixture
def spend_config() -> dict:
    return {
        "key_columns": [{"column": 0}],
        "pivot_column": {"column": 1, "aggregator": "sum"},
        "value_column": {"column": 2},
    }
