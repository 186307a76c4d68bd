"""
Result normalizer for map panels.

Each query result shape has its own entry point; all of them append
DataValue records to a caller-supplied DataValueList and keep its
highest/lowest/range aggregates current after every emitted record.

Rows that cannot be placed on the map are skipped, and missing values
are defaulted. Nothing here raises for bad data.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from panelmap.config.settings import LocationData, PanelConfig, QueryType
from panelmap.normalization.aggregation import count_legend
from panelmap.normalization.geohash import GeohashDecoder, GeoPoint, decode_geohash
from panelmap.normalization.rounding import round_half_up, round_value
from panelmap.normalization.values import (
    DataValue,
    DataValueList,
    Location,
    RunningRange,
)
from panelmap.schemas.results import (
    JsonPoint,
    PointResult,
    TableResult,
    TimeSeries,
)
from panelmap.utils.logging import get_logger

log = get_logger(__name__)

# Status metric: value comes from the State column, not the metric column
TAS_METRIC = "TAS"
TAS_ACTIVE_VALUE = 11
TAS_INACTIVE_VALUE = -1

DEFAULT_POINT_VALUE = 1
UNNAMED_LOCATION = "n/a"


def _to_number(raw: Any, default: float = 0) -> float:
    """Coerce a metric to a finite number, falling back to default."""
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int | float):
        return raw if math.isfinite(raw) else default
    if isinstance(raw, str):
        try:
            number = float(raw)
        except ValueError:
            return default
        return number if math.isfinite(number) else default
    return default


def _to_coordinate(raw: Any) -> float | None:
    """Coerce a coordinate; None when missing or unparsable."""
    if raw is None or raw == "" or isinstance(raw, bool):
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class ResultNormalizer:
    """
    Normalizes query results into DataValueList records.

    Example:
        normalizer = ResultNormalizer(config, locations=locations)
        data = normalizer.normalize(series)
        data.highest_value, data.value_range
    """

    def __init__(
        self,
        config: PanelConfig,
        locations: Iterable[Location] = (),
        decoder: GeohashDecoder = decode_geohash,
    ) -> None:
        """
        Initialize the normalizer.

        Args:
            config: Panel configuration (field mappings, precision, legend).
            locations: Locations time series aliases are matched against.
            decoder: Geohash decoder; must raise ValueError on bad input.
        """
        self.config = config
        self.decoder = decoder
        self.locations = list(locations)
        self._locations_by_key: dict[str, Location] = {}
        for location in self.locations:
            self._locations_by_key.setdefault(location.key.upper(), location)

    def find_location(self, alias: str) -> Location | None:
        """Return the first location whose key matches alias, ignoring case."""
        return self._locations_by_key.get(alias.upper())

    def normalize(self, payload: Sequence[Any]) -> DataValueList:
        """
        Normalize a query result according to the panel's location data.

        Args:
            payload: Time series, geo results, table results or JSON points,
                matching ``config.location_data``.

        Returns:
            A new DataValueList.
        """
        data = DataValueList()
        source = self.config.location_data

        if source.uses_time_series:
            self.set_values(payload, data)
        elif source is LocationData.GEOHASH:
            self.set_geohash_values(payload, data)
        elif source is LocationData.TABLE:
            self.set_table_values([self.table_handler(t) for t in payload], data)
        elif source is LocationData.JSON_RESULT:
            self.set_json_values(payload, data)

        return data

    def set_values(self, series: Sequence[TimeSeries], data: DataValueList) -> None:
        """
        Append one value per time series whose alias names a known location.

        The value is the configured series statistic. A series whose last
        value is a string becomes a zero-valued placeholder that keeps the
        string for display; placeholders do not move the value range.
        """
        if not series:
            return

        running = RunningRange()
        unmatched = 0

        for serie in series:
            location = self.find_location(serie.alias)
            if location is None:
                unmatched += 1
                log.debug("No location for series", alias=serie.alias)
                continue

            last_value = serie.last_value
            if isinstance(last_value, str):
                data_value = DataValue(
                    key=serie.alias,
                    location_name=location.name,
                    location_latitude=location.latitude,
                    location_longitude=location.longitude,
                    value=0,
                    value_formatted=last_value,
                    value_rounded=0,
                )
            else:
                value = _to_number(serie.stats.get(self.config.value_name))
                data_value = DataValue(
                    key=serie.alias,
                    location_name=location.name,
                    location_latitude=location.latitude,
                    location_longitude=location.longitude,
                    value=value,
                    value_formatted=last_value,
                    value_rounded=round_value(value, self.config.decimals),
                )
                running.update(value)

            data.append(data_value)
            data.publish(running)

        log.info(
            "Normalized time series",
            series=len(series),
            emitted=len(series) - unmatched,
            unmatched=unmatched,
        )

    def create_data_value(
        self,
        encoded_geohash: str,
        decoded_geohash: GeoPoint,
        location_name: Any,
        value: Any,
    ) -> DataValue:
        """Build a record for one decoded geohash bucket."""
        number = _to_number(value)
        return DataValue(
            key=encoded_geohash,
            location_name=location_name,
            location_latitude=decoded_geohash.latitude,
            location_longitude=decoded_geohash.longitude,
            value=number,
            value_formatted=value,
            value_rounded=round_value(number, self.config.decimals),
        )

    def set_geohash_values(
        self,
        results: Sequence[TableResult | PointResult],
        data: DataValueList,
    ) -> None:
        """
        Append one value per geohash bucket of Elasticsearch results.

        Requires ``es_geo_point`` and ``es_metric`` to be configured.
        Table results are read by column header, document results by key.
        """
        if not self.config.has_es_mapping:
            log.debug("Geohash or metric field not configured, skipping")
            return

        if not results:
            return

        geo_field = self.config.es_geo_point
        metric_field = self.config.es_metric
        name_field = self.config.es_location_name

        running = RunningRange()
        emitted = 0
        skipped = 0

        for result in results:
            datapoints = (
                self.table_handler(result)
                if isinstance(result, TableResult)
                else result.datapoints
            )
            for datapoint in datapoints:
                encoded = datapoint.get(geo_field)
                try:
                    decoded = self.decoder(encoded)
                except ValueError as e:
                    skipped += 1
                    log.debug(
                        "Skipping undecodable geohash",
                        geohash=encoded,
                        error=str(e),
                    )
                    continue

                location_name = datapoint.get(name_field) if name_field else encoded
                data_value = self.create_data_value(
                    encoded, decoded, location_name, datapoint.get(metric_field)
                )

                running.update(data_value.value)
                data.append(data_value)
                data.publish(running)
                emitted += 1

        log.info("Normalized geohash results", emitted=emitted, skipped=skipped)

    @staticmethod
    def table_handler(table: Any) -> list[dict[str, Any]]:
        """
        Turn a table result into one dict per row, keyed by column header.

        Anything that is not a table yields an empty list.
        """
        if not isinstance(table, TableResult):
            return []

        names = [column.text for column in table.columns]
        return [dict(zip(names, row)) for row in table.rows]

    def _resolve_coordinates(
        self, datapoint: Mapping[str, Any]
    ) -> tuple[Any, float | None, float | None]:
        """Return (key, latitude, longitude) for one table row."""
        options = self.config.table_query_options

        if options.query_type is QueryType.GEOHASH:
            encoded = datapoint.get(options.geohash_field)
            try:
                decoded = self.decoder(encoded)
            except ValueError:
                return encoded, None, None
            return encoded, decoded.latitude, decoded.longitude

        raw_latitude = datapoint.get(options.latitude_field)
        raw_longitude = datapoint.get(options.longitude_field)
        return (
            f"{raw_latitude}_{raw_longitude}",
            _to_coordinate(raw_latitude),
            _to_coordinate(raw_longitude),
        )

    def set_table_values(
        self,
        tables: Sequence[Sequence[Mapping[str, Any]]],
        data: DataValueList,
    ) -> None:
        """
        Append one value per located row of the first table.

        Rows come from ``table_handler``. Rows without coordinates are
        dropped. Also records the table's columns and, when a legend
        field is configured and present, the legend aggregation.
        """
        if not tables:
            return

        datapoints = tables[0]
        options = self.config.table_query_options
        legend_field = self.config.aggregation_legend_field
        legend_key = self.config.legend_key

        running = RunningRange()
        emitted: list[DataValue] = []
        dropped = 0

        for datapoint in datapoints:
            key, latitude, longitude = self._resolve_coordinates(datapoint)
            label = datapoint.get(options.label_field) if options.label_field else None

            if options.metric_field == TAS_METRIC:
                location_name = label or datapoint.get("Name")
                value = (
                    TAS_ACTIVE_VALUE
                    if datapoint.get("State") == "ACTIVE"
                    else TAS_INACTIVE_VALUE
                )
                metric_field_nan = True
            else:
                location_name = label or UNNAMED_LOCATION
                value = _to_number(datapoint.get(options.metric_field))
                metric_field_nan = False

            if latitude is None or longitude is None:
                dropped += 1
                continue

            data_value = DataValue(
                key=key,
                location_name=location_name,
                location_latitude=latitude,
                location_longitude=longitude,
                value=value,
                value_formatted=datapoint.get(options.metric_field),
                value_rounded=round_value(value, self.config.decimals),
                is_metric_field_nan=metric_field_nan,
                legend=(
                    {legend_key: datapoint.get(legend_field)} if legend_field else {}
                ),
            )

            running.update(data_value.value)
            data.append(data_value)
            data.publish(running)
            emitted.append(data_value)

        data.columns = list(datapoints[0].keys()) if datapoints else []

        if legend_field and legend_field in data.columns:
            data.aggregations, data.aggregation_sorted_list = count_legend(
                emitted, legend_key
            )
        else:
            data.aggregations = {}
            data.aggregation_sorted_list = []

        log.info(
            "Normalized table rows",
            rows=len(datapoints),
            emitted=len(emitted),
            dropped=dropped,
            legend_buckets=len(data.aggregations),
        )

    def set_json_values(self, points: Sequence[JsonPoint], data: DataValueList) -> None:
        """
        Append one value per JSON point.

        Points carry their own coordinates. A point without a value counts
        as 1, and values are rounded to the nearest integer.
        """
        if not points:
            return

        running = RunningRange()

        for point in points:
            value = _to_number(point.value, default=DEFAULT_POINT_VALUE)
            data_value = DataValue(
                key=point.key,
                location_name=point.name,
                location_latitude=point.latitude,
                location_longitude=point.longitude,
                value=value,
                value_formatted=value,
                value_rounded=round_half_up(value),
            )

            running.update(data_value.value)
            data.append(data_value)
            data.publish(running)

        log.info("Normalized JSON points", emitted=len(points))
