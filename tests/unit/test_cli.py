"""CLI tests using click's CliRunner against a temporary file store."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from leadq_cli.cli import cli
from leadq_cli.onboarding import (
    ONBOARDING_COMPLETE_KEY,
    RECORD_KEY,
    assemble,
    serialize_record,
)
from leadq_cli.ui import captured_console


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def store_path(config_file):
    return config_file.parent / "store.json"


@pytest.fixture
def saved_setup(store_path, valid_draft, fixed_now):
    """Store file holding a completed setup."""
    record = assemble(valid_draft, now=fixed_now)
    payload = serialize_record(record)
    store_path.write_text(
        json.dumps({RECORD_KEY: payload, ONBOARDING_COMPLETE_KEY: "true"}),
        encoding="utf-8",
    )
    return payload


def invoke(runner, config_file, *args):
    """Run a command and return (result, console text)."""
    console = captured_console()
    result = runner.invoke(
        cli, ["--config", str(config_file), *args], obj={"console": console}
    )
    return result, console.file.getvalue()


class TestTemplates:
    def test_lists_all_templates(self, runner, config_file):
        result, text = invoke(runner, config_file, "templates")
        assert result.exit_code == 0
        for name in ("Standard Sales", "SaaS Subscription", "Real Estate", "Recruitment"):
            assert name in text
        assert "replaces the pipeline stages" in text


class TestStatus:
    def test_fresh_install_pending(self, runner, config_file):
        result, text = invoke(runner, config_file, "status")
        assert result.exit_code == 0
        assert "pending" in text
        assert "leadq-cli init" in text

    def test_completed(self, runner, config_file, saved_setup):
        result, text = invoke(runner, config_file, "status")
        assert result.exit_code == 0
        assert "complete" in text
        assert "pending" not in text

    def test_corrupt_store_exits_nonzero(self, runner, config_file, store_path):
        store_path.write_text("{oops", encoding="utf-8")
        result, text = invoke(runner, config_file, "status")
        assert result.exit_code == 1
        assert "Error:" in text


class TestShow:
    def test_no_record(self, runner, config_file):
        result, text = invoke(runner, config_file, "show")
        assert result.exit_code == 0
        assert "No setup record found" in text

    def test_table(self, runner, config_file, saved_setup):
        result, text = invoke(runner, config_file, "show")
        assert result.exit_code == 0
        assert "Jane Doe" in text
        assert "Acme Corp" in text
        assert "LinkedIn" in text
        assert "Technology & Software" in text

    def test_json(self, runner, config_file, saved_setup):
        result, _ = invoke(runner, config_file, "show", "--json")
        assert result.exit_code == 0
        document = json.loads(result.output)
        assert document == json.loads(saved_setup)
        assert document["completedAt"] == "2026-01-15T10:30:45.123Z"


class TestReset:
    def test_reset_with_yes(self, runner, config_file, saved_setup, store_path):
        result, text = invoke(runner, config_file, "reset", "--yes")
        assert result.exit_code == 0
        assert "Setup data cleared" in text
        assert json.loads(store_path.read_text(encoding="utf-8")) == {}

    def test_reset_cancelled(self, runner, config_file, saved_setup, store_path):
        with patch("leadq_cli.commands.setup.Confirm.ask", return_value=False):
            result, text = invoke(runner, config_file, "reset")
        assert result.exit_code == 0
        assert "Reset cancelled" in text
        assert RECORD_KEY in json.loads(store_path.read_text(encoding="utf-8"))


class TestInit:
    """Test the init command with the interactive wizard patched out."""

    @pytest.fixture
    def wizard_cls(self, valid_draft, fixed_now):
        """Patched wizard that saves a record unless ``cls.record`` is cleared."""

        def build(**kwargs):
            wizard = MagicMock()

            async def run():
                if cls.record is not None:
                    await kwargs["on_complete"]()
                return cls.record

            wizard.run = AsyncMock(side_effect=run)
            return wizard

        with patch("leadq_cli.commands.setup.OnboardingWizard", side_effect=build) as cls:
            cls.record = assemble(valid_draft, now=fixed_now)
            yield cls

    def test_marks_onboarding_complete(self, runner, config_file, store_path, wizard_cls):
        result, _ = invoke(runner, config_file, "init")

        assert result.exit_code == 0
        wizard_cls.assert_called_once()
        stored = json.loads(store_path.read_text(encoding="utf-8"))
        assert stored[ONBOARDING_COMPLETE_KEY] == "true"

    def test_abandoned_wizard_leaves_flag_unset(self, runner, config_file, store_path, wizard_cls):
        wizard_cls.record = None

        result, _ = invoke(runner, config_file, "init")

        assert result.exit_code == 0
        assert not store_path.exists()

    def test_skipped_when_complete(self, runner, config_file, saved_setup, wizard_cls):
        result, text = invoke(runner, config_file, "init")

        assert result.exit_code == 0
        assert "already been completed" in text
        wizard_cls.assert_not_called()

    def test_force_reruns(self, runner, config_file, saved_setup, wizard_cls):
        result, _ = invoke(runner, config_file, "init", "--force")
        assert result.exit_code == 0
        wizard_cls.assert_called_once()


def test_bad_config_file(runner, tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[storage\n", encoding="utf-8")
    result = runner.invoke(cli, ["--config", str(path), "status"], obj={})
    assert result.exit_code != 0
    assert "Error loading config file" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"], obj={})
    assert result.exit_code == 0
    assert "1.0.0" in result.output
