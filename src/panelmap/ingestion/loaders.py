"""
JSON loaders for location lists and query results.

Query result files may hold a bare list or the dashboard response
envelope ``{"data": [...]}``.
"""

import json
from pathlib import Path
from typing import Any

from panelmap.config.settings import LocationData
from panelmap.normalization.values import Location
from panelmap.schemas.results import JsonPoint, PointResult, TableResult, TimeSeries
from panelmap.utils.logging import get_logger

log = get_logger(__name__)


def _read_json(path: Path) -> Any:
    if not path.exists():
        msg = f"File not found: {path}"
        raise FileNotFoundError(msg)
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def _unwrap(payload: Any, path: Path) -> list[Any]:
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, list):
        msg = f"Expected a JSON list in {path}, got {type(payload).__name__}"
        raise ValueError(msg)
    return payload


def load_locations(path: Path) -> list[Location]:
    """
    Load the location list time series are matched against.

    Args:
        path: JSON file with ``key``, ``name``, ``latitude``, ``longitude``
            objects.

    Returns:
        Validated locations in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the payload is not a list of locations.
    """
    items = _unwrap(_read_json(path), path)
    locations = [Location.model_validate(item) for item in items]
    log.info("Loaded locations", path=str(path), n_locations=len(locations))
    return locations


def _parse_geo_result(item: Any) -> TableResult | PointResult:
    if isinstance(item, dict) and item.get("type") == "table":
        return TableResult.model_validate(item)
    return PointResult.model_validate(item)


def parse_results(items: list[Any], location_data: LocationData) -> list[Any]:
    """
    Validate raw query results into the models for a location data source.

    Args:
        items: Raw result objects.
        location_data: Panel location data source.

    Returns:
        TimeSeries, TableResult/PointResult or JsonPoint models.
    """
    if location_data.uses_time_series:
        return [TimeSeries.model_validate(item) for item in items]
    if location_data in {LocationData.GEOHASH, LocationData.TABLE}:
        return [_parse_geo_result(item) for item in items]
    return [JsonPoint.model_validate(item) for item in items]


def load_results(path: Path, location_data: LocationData) -> list[Any]:
    """
    Load a query result file for the given location data source.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the payload has the wrong shape.
    """
    items = _unwrap(_read_json(path), path)
    results = parse_results(items, location_data)
    log.info(
        "Loaded query results",
        path=str(path),
        location_data=location_data.value,
        n_results=len(results),
    )
    return results
