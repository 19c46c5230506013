"""Configuration management for LeadQ CLI."""

import logging
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..onboarding.storage import ONBOARDING_COMPLETE_KEY, RECORD_KEY
from ..onboarding.templates import DEFAULT_TEMPLATE, TEMPLATES

DEFAULT_CONFIG_PATH = Path.home() / ".leadq_cli" / "config.toml"


class StorageConfig(BaseModel):
    """Key-value store configuration.

    Supports three backends:
    1. 'file' - JSON file on disk (default, no server needed)
    2. 'memory' - process-local dictionary, nothing survives exit
    3. 'redis' - Redis server
    """

    backend: str = "file"
    path: str = "~/.leadq_cli/store.json"
    record_key: str = RECORD_KEY
    complete_flag_key: str = ONBOARDING_COMPLETE_KEY

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    connection_timeout: float = 5.0

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate backend is a supported option."""
        valid_backends = ["file", "memory", "redis"]
        if v not in valid_backends:
            raise ValueError(f"backend must be one of {valid_backends}, got: {v}")
        return v

    @field_validator("redis_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is within valid range."""
        if v < 1 or v > 65535:
            raise ValueError("redis_port must be between 1 and 65535")
        return v

    @field_validator("record_key", "complete_flag_key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("store keys must not be blank")
        return v


class WizardConfig(BaseModel):
    """Setup wizard behaviour."""

    skip_requires_validation: bool = Field(
        default=True,
        description="Gate the Skip action with the same checks as Continue",
    )
    default_template: str = DEFAULT_TEMPLATE
    default_communication: str = "email"

    @field_validator("default_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        if v not in TEMPLATES:
            raise ValueError(
                f"default_template must be one of {list(TEMPLATES)}, got: {v}"
            )
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown logging level: {v}")
        return level


class Settings(BaseSettings):
    """Main settings class that loads from config.toml."""

    model_config = SettingsConfigDict(
        env_prefix="LEADQ_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    wizard: WizardConfig = Field(default_factory=WizardConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages loading and saving of the application settings."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self._find_config_path()

    def _find_config_path(self) -> Path:
        """Find the config.toml file in standard locations."""
        possible_paths = [
            Path.cwd() / "config" / "config.toml",
            DEFAULT_CONFIG_PATH,
        ]
        for path in possible_paths:
            if path.exists():
                return path
        return DEFAULT_CONFIG_PATH

    def load(self) -> Settings:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return Settings()

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_data = toml.load(f)
        except (OSError, toml.TomlDecodeError) as e:
            raise ValueError(f"Error loading config file: {e}") from e

        logging.getLogger(__name__).debug(f"Loaded configuration from {self.config_path}")
        return Settings(**config_data)

    def save(self, settings: Settings) -> None:
        """Save configuration to TOML file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                toml.dump(settings.model_dump(), f)
        except OSError as e:
            raise ValueError(f"Error saving config file: {e}") from e


def load_config(config_path: Optional[Path] = None) -> Settings:
    """Load configuration from TOML file."""
    return ConfigManager(config_path).load()
