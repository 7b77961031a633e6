"""Configuration loading for praefixum."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    PraefixumConfig,
    load_config,
    resolve_descriptors_path,
    resolve_output_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "PraefixumConfig",
    "load_config",
    "resolve_descriptors_path",
    "resolve_output_dir",
]
