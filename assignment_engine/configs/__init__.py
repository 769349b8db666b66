"""Configuration loading and validation."""

from .loader import DEFAULT_CONFIG, load_config, validate_config, get_config_value, merge_config

__all__ = ["DEFAULT_CONFIG", "load_config", "validate_config", "get_config_value", "merge_config"]
