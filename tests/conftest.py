"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any

import pytest

from panelmap.config import PanelConfig
from panelmap.normalization.geohash import GeohashError, GeoPoint
from panelmap.normalization.values import Location
from panelmap.schemas import TableColumn, TableResult, TimeSeries

KNOWN_GEOHASHES: dict[str, GeoPoint] = {
    "u4pruydqqvj": GeoPoint(latitude=57.64911, longitude=10.40744),
    "ezs42": GeoPoint(latitude=42.605, longitude=-5.603),
    "dr5ru": GeoPoint(latitude=40.7, longitude=-74.0),
}


def fake_decoder(encoded: Any) -> GeoPoint:
    """Decode from a fixed lookup table; unknown hashes are invalid."""
    if not isinstance(encoded, str) or encoded not in KNOWN_GEOHASHES:
        msg = f"Not a geohash: {encoded!r}"
        raise GeohashError(msg)
    return KNOWN_GEOHASHES[encoded]


@pytest.fixture
def decoder() -> Any:
    """Return the deterministic test geohash decoder."""
    return fake_decoder


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def locations() -> list[Location]:
    """Create a small location list."""
    return [
        Location(key="SE", name="Sweden", latitude=60.0, longitude=18.0),
        Location(key="NO", name="Norway", latitude=62.0, longitude=10.0),
        Location(key="DK", name="Denmark", latitude=56.0, longitude=10.0),
    ]


@pytest.fixture
def sample_series() -> list[TimeSeries]:
    """Create time series whose aliases match the sample locations."""
    return [
        TimeSeries(
            alias="se",
            datapoints=[[10, 1000], [30, 2000]],
            stats={"total": 40, "current": 30, "avg": 20},
        ),
        TimeSeries(
            alias="NO",
            datapoints=[[5.555, 1000]],
            stats={"total": 5.555, "current": 5.555, "avg": 5.555},
        ),
        TimeSeries(
            alias="Dk",
            datapoints=[[2, 1000], [8, 2000]],
            stats={"total": 10, "current": 8, "avg": 5},
        ),
    ]


@pytest.fixture
def es_table_result() -> TableResult:
    """Create an Elasticsearch geohash aggregation as a table."""
    return TableResult(
        columns=[
            TableColumn(text="geohash"),
            TableColumn(text="Count"),
            TableColumn(text="city"),
        ],
        rows=[
            ["u4pruydqqvj", 12, "Aalborg"],
            ["ezs42", 3, "Leon"],
        ],
    )


@pytest.fixture
def coordinate_table() -> list[dict[str, Any]]:
    """Create table datapoints carrying explicit coordinates."""
    return [
        {"lat": 50.1, "lon": 8.6, "value": 10, "site": "Frankfurt", "status": "up"},
        {"lat": 50.2, "lon": 8.7, "value": 25, "site": "Offenbach", "status": "down"},
        {"lat": None, "lon": 8.8, "value": 99, "site": "Nowhere", "status": "up"},
        {"lat": 49.9, "lon": 8.65, "value": 4, "site": "", "status": "up"},
        {"lat": 50.0, "lon": 8.3, "value": 7, "site": "Mainz", "status": ""},
    ]


@pytest.fixture
def coordinate_config() -> PanelConfig:
    """Panel config reading lat/lon columns with a status legend."""
    return PanelConfig.model_validate(
        {
            "locationData": "table",
            "decimals": 1,
            "aggregationLegendField": "status",
            "tableQueryOptions": {
                "queryType": "coordinates",
                "latitudeField": "lat",
                "longitudeField": "lon",
                "metricField": "value",
                "labelField": "site",
            },
        }
    )
