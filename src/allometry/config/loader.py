"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance
from a sibling ``base.yaml``. Every section is optional; an empty file
yields the defaults.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from allometry.config.settings import AllometryConfig

_ENV_VAR = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<default>[^}]*))?\}")


def _expand_env(obj: Any) -> Any:
    """
    Replace ${VAR} and ${VAR:default} in every string of a parsed file.

    An unset variable without a default expands to the empty string.
    """
    if isinstance(obj, dict):
        return {key: _expand_env(value) for key, value in obj.items()}
    if isinstance(obj, str):
        return _ENV_VAR.sub(
            lambda m: os.environ.get(m["name"], m["default"] or ""), obj
        )
    return obj


def _overlay(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay override on base; nested sections are merged key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _overlay(current, value)
        merged[key] = value
    return merged


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return _expand_env(data)


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> AllometryConfig:
    """
    Load allometry configuration from YAML file(s).

    Recognized sections: ``fit``, ``normalization``, ``logging``.
    Values interpolated from the environment arrive as strings and are
    coerced by Pydantic.

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated AllometryConfig instance.
    """
    config_path = Path(config_path)

    if base_path is not None:
        base_data = load_yaml(Path(base_path))
    else:
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    main_data = load_yaml(config_path)
    merged = _overlay(base_data, main_data)

    unknown = sorted(set(merged) - set(AllometryConfig.model_fields))
    if unknown:
        msg = f"Unknown config sections: {unknown}"
        raise ValueError(msg)

    return AllometryConfig.model_validate(merged)
