"""
Legend aggregation over normalized table values.

Counts how often each value of the configured legend field occurs
among the emitted records, for the legend drawn beside the map.
"""

import math
from collections import Counter
from collections.abc import Iterable
from typing import Any

from panelmap.normalization.values import DataValue

UNKNOWN_BUCKET = "unknown"


def _is_blank(value: Any) -> bool:
    if value is None or value == "":
        return True
    return isinstance(value, float) and math.isnan(value)


def bucket_name(value: Any) -> str:
    """Render a legend value as the bucket label shown in the legend."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def count_legend(
    values: Iterable[DataValue],
    legend_key: str,
) -> tuple[dict[str, int], list[str]]:
    """
    Count legend values and order the buckets by frequency.

    Missing and blank legend values are merged into a single "unknown"
    bucket, which only appears when it is non-empty.

    Args:
        values: Emitted data values.
        legend_key: Record key holding the legend value ("agg-<field>").

    Returns:
        Tuple of (bucket counts, bucket labels sorted by descending count).
        Ties keep the order in which buckets were first seen.
    """
    counts: Counter[str] = Counter()
    unknown = 0

    for value in values:
        raw = value.legend.get(legend_key)
        if _is_blank(raw):
            unknown += 1
        else:
            counts[bucket_name(raw)] += 1

    aggregations = dict(counts)
    if unknown:
        aggregations[UNKNOWN_BUCKET] = aggregations.get(UNKNOWN_BUCKET, 0) + unknown

    sorted_buckets = sorted(aggregations, key=aggregations.__getitem__, reverse=True)
    return aggregations, sorted_buckets
