"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that all required fields are present. Scoring weights,
thresholds and lookup tables are code constants and are not read
from configuration.
"""

import copy
import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "global": {
        "log_level": "INFO",
    },
    "data": {
        "people": {"path": "data/people.csv", "delimiter": ","},
        "staff": {"path": "data/staff.csv", "delimiter": ","},
    },
    "suggestions": {
        "peer_top_k": 10,
        "supervisor_top_k": 5,
        "supervisor_roles": ["mentor", "counselor", "instructor"],
    },
    "pairing": {
        "large_cohort_warning": 500,
    },
    "store": {
        "path": "artifacts/assignments.json",
        "reject_concurrent_apply": False,
    },
}

VALID_ROLES = {"mentor", "counselor", "instructor", "administrator", "other"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file, layered over the defaults.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return merge_config(DEFAULT_CONFIG, config)


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge override into a copy of base.

    Args:
        base: Default values
        override: Values taking precedence

    Returns:
        New merged dictionary
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    # Check required top-level sections
    required_sections = ["global", "data", "suggestions", "pairing", "store"]

    for section in required_sections:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    log_level = str(get_config_value(config, "global.log_level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        issues.append(f"Unknown global.log_level: {log_level}")

    # Check data paths
    if "data" in config:
        data = config["data"]
        if "path" not in data.get("people", {}):
            issues.append("Missing data.people.path")
        if "path" not in data.get("staff", {}):
            issues.append("Missing data.staff.path")

    # Check suggestion limits
    for key in ["peer_top_k", "supervisor_top_k"]:
        value = get_config_value(config, f"suggestions.{key}")
        if value is not None and (not isinstance(value, int) or value < 0):
            issues.append(f"suggestions.{key} must be a non-negative integer, got {value}")

    roles = get_config_value(config, "suggestions.supervisor_roles", [])
    unknown_roles = [r for r in roles or [] if r not in VALID_ROLES]
    if unknown_roles:
        issues.append(f"Unknown supervisor roles: {unknown_roles}")

    warning_size = get_config_value(config, "pairing.large_cohort_warning")
    if warning_size is not None and (not isinstance(warning_size, int) or warning_size < 2):
        issues.append(f"pairing.large_cohort_warning must be an integer >= 2, got {warning_size}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "suggestions.peer_top_k")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
