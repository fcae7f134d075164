"""Application configuration helpers."""

from __future__ import annotations

from .directory import DEFAULT_KEY_ATTRIBUTE, DirectoryConfig, get_directory_config
from .env import env_flag, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_KEY_ATTRIBUTE",
    "ConfigurationError",
    "DirectoryConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "get_directory_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
