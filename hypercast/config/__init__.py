"""Configuration module."""

from hypercast.config.schema import (
    Config,
    apply_env_overrides,
    get_config_path,
    load_config,
    save_config,
)

__all__ = ["Config", "apply_env_overrides", "load_config", "save_config", "get_config_path"]
