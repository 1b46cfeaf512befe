"""Named aggregators for pivot cells and summary columns.

Every aggregator takes the list of values collected for one cell (or one
row, for summary columns) and returns a single value. None entries are
ignored.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np

Aggregator = Callable[[Sequence[Any]], Any]


def _present(values: Sequence[Any]) -> list[Any]:
    return [v for v in values if v is not None]


def agg_sum(values: Sequence[Any]) -> Any:
    total = 0
    for v in _present(values):
        total += v
    return total


def agg_count(values: Sequence[Any]) -> int:
    return len(_present(values))


def agg_avg(values: Sequence[Any]) -> Any:
    present = _present(values)
    if not present:
        return None
    return agg_sum(present) / len(present)


def agg_min(values: Sequence[Any]) -> Any:
    present = _present(values)
    return min(present) if present else None


def agg_max(values: Sequence[Any]) -> Any:
    present = _present(values)
    return max(present) if present else None


def agg_first(values: Sequence[Any]) -> Any:
    present = _present(values)
    return present[0] if present else None


def agg_last(values: Sequence[Any]) -> Any:
    present = _present(values)
    return present[-1] if present else None


def agg_median(values: Sequence[Any]) -> Any:
    present = _present(values)
    if not present:
        return None
    return float(np.median(present))


AGGREGATORS: dict[str, Aggregator] = {
    "sum": agg_sum,
    "count": agg_count,
    "avg": agg_avg,
    "mean": agg_avg,
    "min": agg_min,
    "max": agg_max,
    "first": agg_first,
    "last": agg_last,
    "median": agg_median,
}


def get_aggregator(func: str | Aggregator) -> Aggregator:
    """Resolve an aggregator name to its function; callables pass through."""
    if callable(func):
        return func
    try:
        return AGGREGATORS[func]
    except KeyError:
        raise ValueError(
            f"Unknown aggregator: {func!r}. Expected one of {sorted(AGGREGATORS)}"
        ) from None
