"""
Loading of locations and query results from JSON files.

Turns raw JSON into the typed models the normalizer accepts.
"""

from panelmap.ingestion.loaders import load_locations, load_results, parse_results

__all__ = ["load_locations", "load_results", "parse_results"]
