"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Panel definitions may be YAML or JSON (a saved dashboard panel works as is).
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from panelmap.config.settings import PanelConfig
from panelmap.utils.logging import get_logger

log = get_logger(__name__)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML (or JSON) file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return _process_config_values(data)


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> PanelConfig:
    """
    Load panel configuration from YAML or JSON file(s).

    Settings may sit at the top level or under a ``panel`` key. A relative
    ``locations_path`` is resolved against the config file's directory.

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated PanelConfig instance.
    """
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    main_data = load_yaml(config_path)
    merged = _deep_merge(base_data, main_data)

    panel_data = merged.get("panel", merged)
    if not isinstance(panel_data, dict):
        msg = "Config 'panel' section must be a mapping"
        raise ValueError(msg)

    config = PanelConfig.model_validate(panel_data)

    if config.locations_path is not None and not config.locations_path.is_absolute():
        config = config.model_copy(
            update={"locations_path": config_path.parent / config.locations_path}
        )

    log.debug(
        "Loaded panel config",
        path=str(config_path),
        location_data=config.location_data.value,
    )
    return config
