"""
Geohash decoding.

Bit-level decoding is delegated to pygeohash; this module only adapts
its result to the coordinates the normalizer needs.
"""

from collections.abc import Callable
from typing import Any, NamedTuple

import pygeohash


class GeohashError(ValueError):
    """Raised when a value cannot be decoded as a geohash."""


class GeoPoint(NamedTuple):
    """Decoded coordinates in WGS84 degrees."""

    latitude: float
    longitude: float


GeohashDecoder = Callable[[str], GeoPoint]


def decode_geohash(encoded: Any) -> GeoPoint:
    """
    Decode a geohash to the centre of its cell.

    Args:
        encoded: Geohash string, e.g. "u4pruydqqvj".

    Returns:
        GeoPoint with latitude and longitude.

    Raises:
        GeohashError: If the value is empty, not a string or not a geohash.
    """
    if not isinstance(encoded, str) or not encoded.strip():
        msg = f"Not a geohash: {encoded!r}"
        raise GeohashError(msg)

    try:
        latitude, longitude, *_errors = pygeohash.decode_exactly(encoded.strip())
    except (KeyError, ValueError) as e:
        msg = f"Invalid geohash {encoded!r}: {e}"
        raise GeohashError(msg) from e

    return GeoPoint(latitude=float(latitude), longitude=float(longitude))
