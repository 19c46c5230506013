"""Configuration for LeadQ CLI."""

from .settings import (
    ConfigManager,
    LoggingConfig,
    Settings,
    StorageConfig,
    WizardConfig,
    load_config,
)

__all__ = [
    "ConfigManager",
    "LoggingConfig",
    "Settings",
    "StorageConfig",
    "WizardConfig",
    "load_config",
]
