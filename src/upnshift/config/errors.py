"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when run or connection settings are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when a required setting is absent or blank in the environment."""
