"""
Pandera schema for the normalized output frame.

One row per DataValue, in emission order.
"""

import pandera.pandas as pa
from pandera.typing import Series

FRAME_COLUMNS = [
    "key",
    "location_name",
    "location_latitude",
    "location_longitude",
    "value",
    "value_formatted",
    "value_rounded",
    "is_metric_field_nan",
]


class DataValueFrameSchema(pa.DataFrameModel):
    """
    Schema for normalized map data values.

    Placeholders for unmatched or non-numeric series may carry no
    coordinates, so latitude and longitude are nullable.
    """

    key: Series[str] = pa.Field(
        nullable=True,
        description="Location key, geohash or '<lat>_<lon>'",
    )
    location_latitude: Series[float] = pa.Field(
        ge=-90.0,
        le=90.0,
        nullable=True,
        description="Latitude in WGS84",
    )
    location_longitude: Series[float] = pa.Field(
        ge=-180.0,
        le=180.0,
        nullable=True,
        description="Longitude in WGS84",
    )
    value: Series[float] = pa.Field(description="Numeric value used for scaling")
    value_rounded: Series[float] = pa.Field(
        nullable=True,
        description="Value rounded to the panel precision",
    )

    class Config:
        """Schema configuration."""

        name = "DataValueFrameSchema"
        strict = False  # Legend and display columns vary
        coerce = True
