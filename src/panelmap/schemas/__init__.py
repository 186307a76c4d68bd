"""
Schema definitions for query inputs and normalized output.

Inputs are Pydantic models; the output frame contract is a Pandera schema.
"""

from panelmap.schemas.output import DataValueFrameSchema
from panelmap.schemas.results import (
    GeoResult,
    JsonPoint,
    PointResult,
    TableColumn,
    TableResult,
    TimeSeries,
    compute_series_stats,
)

__all__ = [
    "DataValueFrameSchema",
    "GeoResult",
    "JsonPoint",
    "PointResult",
    "TableColumn",
    "TableResult",
    "TimeSeries",
    "compute_series_stats",
]
