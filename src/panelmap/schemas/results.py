"""
Typed query result shapes accepted by the normalizer.

These mirror what the dashboard hands a map panel: time series with a
``datapoints`` list of ``[value, timestamp]`` pairs, tables with
``columns`` and ``rows``, Elasticsearch documents, and plain points.
"""

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

STAT_NAMES = (
    "first",
    "current",
    "min",
    "max",
    "total",
    "avg",
    "count",
    "range",
    "diff",
)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def compute_series_stats(datapoints: list[list[Any]]) -> dict[str, float]:
    """
    Compute the summary statistics a series exposes to panels.

    Null and non-numeric values are ignored. A series without numeric
    values only reports ``count`` = 0.

    Args:
        datapoints: ``[value, timestamp]`` pairs in time order.

    Returns:
        Mapping of statistic name to value.
    """
    numbers = [
        point[0] for point in datapoints if point and _is_number(point[0])
    ]
    if not numbers:
        return {"count": 0}

    total = sum(numbers)
    return {
        "first": numbers[0],
        "current": numbers[-1],
        "min": min(numbers),
        "max": max(numbers),
        "total": total,
        "avg": total / len(numbers),
        "count": len(numbers),
        "range": max(numbers) - min(numbers),
        "diff": numbers[-1] - numbers[0],
    }


class TimeSeries(BaseModel):
    """One time series, named by its alias."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    alias: str = Field(validation_alias="target")
    datapoints: list[list[Any]] = Field(default_factory=list)
    stats: dict[str, Any] = Field(
        default_factory=dict, description="Raw statistics; nulls are kept"
    )

    @model_validator(mode="before")
    @classmethod
    def fill_stats(cls, data: Any) -> Any:
        """Compute stats from the datapoints when none were supplied."""
        if isinstance(data, dict) and not data.get("stats"):
            data = dict(data)
            data["stats"] = compute_series_stats(data.get("datapoints") or [])
        return data

    @property
    def last_value(self) -> Any:
        """First element of the last datapoint, or None."""
        if not self.datapoints:
            return None
        last_point = self.datapoints[-1]
        return last_point[0] if last_point else None


class TableColumn(BaseModel):
    """Header of one table column."""

    model_config = ConfigDict(frozen=True)

    text: str


class TableResult(BaseModel):
    """Tabular query result."""

    model_config = ConfigDict(frozen=True)

    type: Literal["table"] = "table"
    columns: list[TableColumn] = Field(default_factory=list)
    rows: list[list[Any]] = Field(default_factory=list)


class PointResult(BaseModel):
    """Document-style result: one dict per datapoint."""

    model_config = ConfigDict(frozen=True)

    type: str = "docs"
    datapoints: list[dict[str, Any]] = Field(default_factory=list)


class JsonPoint(BaseModel):
    """A point that already carries its coordinates and value."""

    model_config = ConfigDict(frozen=True, extra="allow")

    key: Any = None
    name: Any = None
    latitude: float | None = None
    longitude: float | None = None
    value: Any = Field(
        default=None, description="Raw metric, coerced when normalized"
    )


GeoResult = TableResult | PointResult
