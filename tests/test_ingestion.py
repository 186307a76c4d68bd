"""Tests for JSON loaders."""

import json
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from panelmap.config import LocationData
from panelmap.ingestion import load_locations, load_results, parse_results
from panelmap.schemas import JsonPoint, PointResult, TableResult, TimeSeries


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def write_json(path: Path, payload: Any) -> Path:
    """Write a payload as JSON and return the path."""
    path.write_text(json.dumps(payload))
    return path


class TestLoadLocations:
    """Tests for load_locations."""

    def test_load(self, temp_dir: Path) -> None:
        """Test loading a location list."""
        path = write_json(
            temp_dir / "locations.json",
            [
                {"key": "SE", "name": "Sweden", "latitude": 60, "longitude": 18},
                {"key": "NO", "name": "Norway", "latitude": 62, "longitude": 10},
            ],
        )

        locations = load_locations(path)

        assert [location.key for location in locations] == ["SE", "NO"]
        assert locations[0].latitude == 60.0

    def test_missing_file(self, temp_dir: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_locations(temp_dir / "missing.json")

    def test_not_a_list(self, temp_dir: Path) -> None:
        """Test that a non-list payload raises ValueError."""
        path = write_json(temp_dir / "locations.json", {"key": "SE"})
        with pytest.raises(ValueError, match="Expected a JSON list"):
            load_locations(path)

    def test_invalid_location(self, temp_dir: Path) -> None:
        """Test that a malformed location raises ValueError."""
        path = write_json(temp_dir / "locations.json", [{"key": "SE"}])
        with pytest.raises(ValueError):
            load_locations(path)


class TestParseResults:
    """Tests for parse_results."""

    def test_time_series(self) -> None:
        """Test parsing time series for location-list sources."""
        results = parse_results(
            [{"target": "SE", "datapoints": [[1, 1]]}], LocationData.COUNTRIES
        )
        assert isinstance(results[0], TimeSeries)

    def test_geo_results(self) -> None:
        """Test that tables and documents are told apart."""
        results = parse_results(
            [
                {"type": "table", "columns": [{"text": "geohash"}], "rows": [["ezs42"]]},
                {"type": "docs", "datapoints": [{"geohash": "ezs42"}]},
            ],
            LocationData.GEOHASH,
        )
        assert isinstance(results[0], TableResult)
        assert isinstance(results[1], PointResult)

    def test_json_points(self) -> None:
        """Test parsing JSON points."""
        results = parse_results([{"key": "a"}], LocationData.JSON_RESULT)
        assert isinstance(results[0], JsonPoint)

    def test_null_statistics(self) -> None:
        """Test that a series with null statistics is parsed, not rejected."""
        results = parse_results(
            [
                {
                    "target": "SE",
                    "datapoints": [[None, 1]],
                    "stats": {"current": None, "total": None},
                }
            ],
            LocationData.COUNTRIES,
        )
        assert results[0].stats["current"] is None

    def test_text_point_value(self) -> None:
        """Test that a JSON point with a text value is parsed, not rejected."""
        results = parse_results(
            [{"key": "a", "latitude": 1, "longitude": 2, "value": "n/a"}],
            LocationData.JSON_RESULT,
        )
        assert results[0].value == "n/a"


class TestLoadResults:
    """Tests for load_results."""

    def test_bare_list(self, temp_dir: Path) -> None:
        """Test a file holding a bare list."""
        path = write_json(temp_dir / "result.json", [{"key": "a", "value": 2}])

        results = load_results(path, LocationData.JSON_RESULT)

        assert results[0].value == 2

    def test_data_envelope(self, temp_dir: Path) -> None:
        """Test a file holding the dashboard response envelope."""
        path = write_json(
            temp_dir / "result.json",
            {"data": [{"type": "table", "columns": [], "rows": []}]},
        )

        results = load_results(path, LocationData.TABLE)

        assert isinstance(results[0], TableResult)

    def test_wrong_shape(self, temp_dir: Path) -> None:
        """Test that a scalar payload raises ValueError."""
        path = write_json(temp_dir / "result.json", 42)
        with pytest.raises(ValueError):
            load_results(path, LocationData.TABLE)
