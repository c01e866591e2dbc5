"""Configuration loading utilities.

This module provides functions to load the YAML configuration files
holding alert thresholds, relationship-type weight multipliers and
graph view options.
"""

import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "conf" / "pipeline.yaml"


def load_config(path: str | Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Parameters
    ----------
    path : str | Path
        Path to the YAML configuration file.

    Returns
    -------
    dict[str, Any]
        Configuration dictionary. Empty for an empty file.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    yaml.YAMLError
        If the YAML is malformed.

    Examples
    --------
    >>> cfg = load_config(DEFAULT_CONFIG_PATH)
    >>> cfg["alerts"]["redeem_min_usd"]
    250000000
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        config = yaml.safe_load(f)

    logger.debug(f"Loaded configuration from {path}")

    return config if config is not None else {}


def get_nested(config: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    Get a nested value from a configuration dictionary.

    Parameters
    ----------
    config : dict[str, Any]
        Configuration dictionary.
    *keys : str
        Sequence of keys to traverse.
    default : Any, optional
        Default value if key path doesn't exist.

    Returns
    -------
    Any
        The value at the nested key path, or default.

    Examples
    --------
    >>> cfg = {"graph": {"multipliers": {"DEAL": 1.5}}}
    >>> get_nested(cfg, "graph", "multipliers", "DEAL")
    1.5
    >>> get_nested(cfg, "graph", "view", default={})
    {}
    """
    result = config
    for key in keys:
        if isinstance(result, dict) and key in result:
            result = result[key]
        else:
            return default
    return result


def parse_multipliers(raw: Mapping[str, Any] | None) -> dict[str, float]:
    """
    Validate relationship-type weight multipliers.

    Parameters
    ----------
    raw : Mapping[str, Any] | None
        Subtype tag -> multiplier.

    Returns
    -------
    dict[str, float]
        Multipliers as floats, tags upper-cased.

    Raises
    ------
    ValueError
        If a multiplier is not a positive number.
    """
    multipliers: dict[str, float] = {}
    for tag, value in (raw or {}).items():
        try:
            factor = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Multiplier for '{tag}' is not a number: {value!r}")
        if factor <= 0:
            raise ValueError(f"Multiplier for '{tag}' must be positive, got {factor}")
        multipliers[str(tag).upper()] = factor
    return multipliers
