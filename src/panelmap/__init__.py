"""
Panelmap: query result normalization for map panels.

This package turns time series, Elasticsearch geohash aggregations,
table rows and raw JSON points into a uniform list of geolocated
data values with running value statistics.
"""

from importlib.metadata import version

__version__ = version("panelmap")

__all__ = ["__version__"]
