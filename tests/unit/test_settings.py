"""Unit tests for configuration loading and validation."""

import pytest
import toml
from pydantic import ValidationError

from leadq_cli.config import (
    ConfigManager,
    LoggingConfig,
    Settings,
    StorageConfig,
    WizardConfig,
    load_config,
)


class TestDefaults:
    def test_storage_defaults(self):
        storage = StorageConfig()
        assert storage.backend == "file"
        assert storage.record_key == "leadq_user_data"
        assert storage.complete_flag_key == "leadq_onboarding_complete"
        assert storage.redis_port == 6379

    def test_wizard_defaults(self):
        wizard = WizardConfig()
        assert wizard.skip_requires_validation is True
        assert wizard.default_template == "sales"
        assert wizard.default_communication == "email"

    def test_settings_sections(self):
        settings = Settings()
        assert settings.logging.level == "WARNING"
        assert settings.storage.backend == "file"


class TestValidation:
    """Test field validators reject bad values."""

    def test_invalid_backend(self):
        with pytest.raises(ValidationError, match="backend must be one of"):
            StorageConfig(backend="sqlite")

    @pytest.mark.parametrize("port", [0, 70000])
    def test_invalid_port(self, port):
        with pytest.raises(ValidationError):
            StorageConfig(redis_port=port)

    def test_blank_key(self):
        with pytest.raises(ValidationError):
            StorageConfig(record_key="  ")

    def test_unknown_template(self):
        with pytest.raises(ValidationError, match="default_template"):
            WizardConfig(default_template="crypto")

    def test_level_normalised(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


class TestEnvironment:
    def test_nested_override(self, monkeypatch):
        """Test LEADQ_<SECTION>__<FIELD> variables override defaults."""
        monkeypatch.setenv("LEADQ_STORAGE__BACKEND", "memory")
        monkeypatch.setenv("LEADQ_WIZARD__SKIP_REQUIRES_VALIDATION", "false")

        settings = Settings()

        assert settings.storage.backend == "memory"
        assert settings.wizard.skip_requires_validation is False


class TestConfigManager:
    """Test TOML load and save."""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = ConfigManager(tmp_path / "absent.toml").load()
        assert settings.storage.backend == "file"

    def test_load_file(self, config_file, tmp_path):
        settings = load_config(config_file)
        assert settings.storage.path == str(tmp_path / "store.json")
        assert settings.logging.level == "WARNING"

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "conf" / "config.toml"
        manager = ConfigManager(path)
        settings = Settings(wizard=WizardConfig(default_template="recruitment"))

        manager.save(settings)

        assert toml.load(path)["wizard"]["default_template"] == "recruitment"
        assert manager.load().wizard.default_template == "recruitment"

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[storage\nbackend = ", encoding="utf-8")
        with pytest.raises(ValueError, match="Error loading config file"):
            ConfigManager(path).load()

    def test_invalid_value_in_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[storage]\nbackend = "sqlite"\n', encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)
