"""Dashboard analytics over the portfolio."""

from imob_control.analytics.aggregation import (
    AggregationResult,
    MonthlyBucket,
    RecordRow,
    SelectionFilter,
    aggregate,
    aggregate_filter,
)

__all__ = [
    "AggregationResult",
    "MonthlyBucket",
    "RecordRow",
    "SelectionFilter",
    "aggregate",
    "aggregate_filter",
]
