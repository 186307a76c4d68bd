"""
Typed panel configuration models using Pydantic.

Field names are snake_case; the dashboard's camelCase panel keys
(``valueName``, ``esGeoPoint``, ``tableQueryOptions`` ...) are accepted
as aliases so a saved panel definition can be loaded unchanged.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from panelmap.normalization.rounding import parse_decimals

_DASH = re.compile(r"[-\s]+")


class LocationData(str, Enum):
    """Source of the locations shown on the map."""

    COUNTRIES = "countries"
    STATES = "states"
    JSON_ENDPOINT = "json_endpoint"
    GEOHASH = "geohash"
    TABLE = "table"
    JSON_RESULT = "json_result"

    @property
    def uses_time_series(self) -> bool:
        """Whether the source matches series aliases against a location list."""
        return self in {
            LocationData.COUNTRIES,
            LocationData.STATES,
            LocationData.JSON_ENDPOINT,
        }


class QueryType(str, Enum):
    """How table rows carry their coordinates."""

    GEOHASH = "geohash"
    COORDINATES = "coordinates"


class TableQueryOptions(BaseModel):
    """Column mapping for generic table results."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    query_type: QueryType = Field(
        default=QueryType.GEOHASH,
        description="Resolve coordinates from a geohash or from lat/lon columns",
    )
    geohash_field: str = Field(default="geohash", description="Geohash column")
    latitude_field: str = Field(default="latitude", description="Latitude column")
    longitude_field: str = Field(default="longitude", description="Longitude column")
    metric_field: str = Field(default="metric", description="Metric column")
    label_field: str | None = Field(
        default=None, description="Column used as location name"
    )


class PanelConfig(BaseModel):
    """Complete map panel configuration used by the normalizer."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    location_data: LocationData = Field(
        default=LocationData.COUNTRIES,
        description="Which query result shape the panel expects",
    )
    value_name: str = Field(
        default="total",
        description="Series statistic used as the value (current, avg, total ...)",
    )
    decimals: int = Field(default=0, ge=0, description="Rounding precision")

    es_geo_point: str | None = Field(
        default=None, description="Geohash field of Elasticsearch results"
    )
    es_metric: str | None = Field(
        default="Count", description="Metric field of Elasticsearch results"
    )
    es_location_name: str | None = Field(
        default=None, description="Optional label field of Elasticsearch results"
    )

    table_query_options: TableQueryOptions = Field(default_factory=TableQueryOptions)
    aggregation_legend_field: str = Field(
        default="", description="Field counted for the legend aggregation"
    )

    locations_path: Path | None = Field(
        default=None, description="JSON file with the location list"
    )

    @field_validator("decimals", mode="before")
    @classmethod
    def coerce_decimals(cls, v: Any) -> int:
        """Take the integer prefix of the configured precision, 0 if none."""
        return parse_decimals(v)

    @field_validator("location_data", mode="before")
    @classmethod
    def parse_location_data(cls, v: Any) -> Any:
        """Accept dashboard spellings such as "json endpoint" or "json-result"."""
        if isinstance(v, str):
            return _DASH.sub("_", v.strip().lower())
        return v

    @field_validator("aggregation_legend_field", mode="before")
    @classmethod
    def blank_legend_field(cls, v: Any) -> str:
        """Treat a null legend field as not configured."""
        return "" if v is None else v

    @property
    def has_es_mapping(self) -> bool:
        """Whether geohash and metric fields are both configured."""
        return bool(self.es_geo_point) and bool(self.es_metric)

    @property
    def legend_key(self) -> str:
        """Record key under which the legend value is stored."""
        return f"agg-{self.aggregation_legend_field}"

