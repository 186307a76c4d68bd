"""
Panel configuration with typed Pydantic models.

Accepts both snake_case keys and the dashboard's camelCase panel keys.
"""

from panelmap.config.loader import load_config
from panelmap.config.settings import (
    LocationData,
    PanelConfig,
    QueryType,
    TableQueryOptions,
)

__all__ = [
    "LocationData",
    "PanelConfig",
    "QueryType",
    "TableQueryOptions",
    "load_config",
]
