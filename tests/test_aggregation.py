"""Tests for legend aggregation."""

import math
from typing import Any

import pytest

from panelmap.normalization.aggregation import UNKNOWN_BUCKET, bucket_name, count_legend
from panelmap.normalization.values import DataValue

LEGEND_KEY = "agg-kind"


def make_value(kind: Any) -> DataValue:
    """Build a minimal record carrying a legend value."""
    return DataValue(
        key="k",
        location_name="n",
        location_latitude=0.0,
        location_longitude=0.0,
        value=1,
        value_formatted=1,
        value_rounded=1,
        legend={LEGEND_KEY: kind},
    )


class TestCountLegend:
    """Tests for count_legend."""

    def test_sorted_by_descending_count(self) -> None:
        """Test bucket ordering by frequency."""
        values = [make_value(kind) for kind in ["a", "b", "b", "c", "b", "c"]]

        aggregations, sorted_buckets = count_legend(values, LEGEND_KEY)

        assert aggregations == {"a": 1, "b": 3, "c": 2}
        assert sorted_buckets == ["b", "c", "a"]

    def test_ties_keep_first_seen_order(self) -> None:
        """Test that equal counts keep their first appearance order."""
        values = [make_value(kind) for kind in ["x", "y", "z"]]

        _, sorted_buckets = count_legend(values, LEGEND_KEY)

        assert sorted_buckets == ["x", "y", "z"]

    def test_missing_and_blank_merge_into_unknown(self) -> None:
        """Test that None, NaN and '' share the unknown bucket."""
        values = [make_value(kind) for kind in [None, "", math.nan, "a"]]

        aggregations, sorted_buckets = count_legend(values, LEGEND_KEY)

        assert aggregations == {"a": 1, UNKNOWN_BUCKET: 3}
        assert sorted_buckets == [UNKNOWN_BUCKET, "a"]

    def test_unknown_absent_when_empty(self) -> None:
        """Test that no unknown bucket appears when every row has a value."""
        aggregations, _ = count_legend([make_value("a")], LEGEND_KEY)
        assert UNKNOWN_BUCKET not in aggregations

    def test_records_without_legend_are_unknown(self) -> None:
        """Test that records lacking the legend key count as unknown."""
        values = [make_value("a")]
        aggregations, _ = count_legend(values, "agg-other")
        assert aggregations == {UNKNOWN_BUCKET: 1}

    def test_named_buckets_sum_to_non_empty_rows(self) -> None:
        """Test that named buckets count exactly the rows with a value."""
        kinds = ["a", None, "b", "", "a", 3]
        aggregations, _ = count_legend([make_value(k) for k in kinds], LEGEND_KEY)

        named = sum(v for k, v in aggregations.items() if k != UNKNOWN_BUCKET)
        assert named == len([k for k in kinds if k not in (None, "")])

    def test_empty(self) -> None:
        """Test that no records give no buckets."""
        assert count_legend([], LEGEND_KEY) == ({}, [])


class TestBucketName:
    """Tests for bucket labels."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("up", "up"), (3, "3"), (3.0, "3"), (2.5, "2.5"), (True, "true"), (False, "false")],
    )
    def test_labels(self, value: Any, expected: str) -> None:
        """Test how legend values are labelled."""
        assert bucket_name(value) == expected
