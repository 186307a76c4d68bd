"""
Normalized data values and the list that carries their statistics.

A DataValue is one geolocated record ready for rendering. DataValueList
keeps the records in emission order together with the side-channel
aggregates the renderer needs to scale markers and draw the legend.
"""

import sys
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, overload

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    import pandas as pd


class Location(BaseModel):
    """A named map location that time series are matched against."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Identifier matched against series aliases")
    name: str = Field(description="Display name")
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


@dataclass(frozen=True)
class DataValue:
    """A single normalized, geolocated value."""

    key: str
    location_name: Any
    location_latitude: float | None
    location_longitude: float | None
    value: float
    value_formatted: Any
    value_rounded: float
    is_metric_field_nan: bool | None = None
    legend: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Render the record with the camelCase keys the map renderer reads."""
        record: dict[str, Any] = {
            "key": self.key,
            "locationName": self.location_name,
            "locationLatitude": self.location_latitude,
            "locationLongitude": self.location_longitude,
            "value": self.value,
            "valueFormatted": self.value_formatted,
            "valueRounded": self.value_rounded,
        }
        if self.is_metric_field_nan is not None:
            record["isMetricFieldNaN"] = self.is_metric_field_nan
        record.update(self.legend)
        return record


@dataclass
class RunningRange:
    """
    Running min/max over emitted values.

    Starts from highest 0 and lowest at the largest float, so the highest
    value never drops below 0 and an untouched range is recognisable.
    """

    highest: float = 0
    lowest: float = sys.float_info.max

    def update(self, value: float) -> None:
        """Fold one value into the range."""
        if value > self.highest:
            self.highest = value
        if value < self.lowest:
            self.lowest = value

    @property
    def spread(self) -> float:
        """Distance between highest and lowest value."""
        return self.highest - self.lowest


@dataclass
class DataValueList:
    """Ordered data values plus the aggregates computed while building them."""

    values: list[DataValue] = field(default_factory=list)
    highest_value: float = 0
    lowest_value: float = 0
    value_range: float = 0
    columns: list[str] | None = None
    aggregations: dict[str, int] | None = None
    aggregation_sorted_list: list[str] | None = None

    def append(self, value: DataValue) -> None:
        """Append one record."""
        self.values.append(value)

    def publish(self, running: RunningRange) -> None:
        """Copy the running range into the list aggregates."""
        self.highest_value = running.highest
        self.lowest_value = running.lowest
        self.value_range = running.spread

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[DataValue]:
        return iter(self.values)

    @overload
    def __getitem__(self, index: int) -> DataValue: ...

    @overload
    def __getitem__(self, index: slice) -> list[DataValue]: ...

    def __getitem__(self, index: int | slice) -> DataValue | list[DataValue]:
        return self.values[index]

    def to_payload(self) -> dict[str, Any]:
        """Render values and aggregates as the renderer's JSON payload."""
        payload: dict[str, Any] = {
            "values": [value.to_dict() for value in self.values],
            "highestValue": self.highest_value,
            "lowestValue": self.lowest_value,
            "valueRange": self.value_range,
        }
        if self.columns is not None:
            payload["columns"] = self.columns
        if self.aggregations is not None:
            payload["aggregations"] = self.aggregations
        if self.aggregation_sorted_list is not None:
            payload["aggregationSortedList"] = self.aggregation_sorted_list
        return payload

    def to_frame(self, *, validate: bool = True) -> "pd.DataFrame":
        """
        Convert the values to a DataFrame, one row per record.

        Args:
            validate: Whether to validate against DataValueFrameSchema.

        Returns:
            DataFrame with snake_case columns; legend entries become
            extra columns.

        Raises:
            pandera.errors.SchemaError: If validation fails.
        """
        import pandas as pd

        from panelmap.schemas.output import FRAME_COLUMNS, DataValueFrameSchema

        rows = []
        for value in self.values:
            row = {
                "key": value.key,
                "location_name": value.location_name,
                "location_latitude": value.location_latitude,
                "location_longitude": value.location_longitude,
                "value": value.value,
                "value_formatted": value.value_formatted,
                "value_rounded": value.value_rounded,
                "is_metric_field_nan": value.is_metric_field_nan,
            }
            row.update(value.legend)
            rows.append(row)

        df = pd.DataFrame(rows, columns=None if rows else FRAME_COLUMNS)
        if validate:
            df = DataValueFrameSchema.validate(df)
        return df
