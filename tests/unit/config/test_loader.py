"""
Unit Tests for Settings Loading

Tests environment parsing, .env files, caching and validation failures.
"""

import pytest

from budget_alerts.config import (
    BudgetSettings,
    Environment,
    LogFormat,
    ProvisionerBackend,
    get_settings,
    load_settings,
    reload_settings,
)
from budget_alerts.errors import ConfigurationError


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_defaults(self, clean_env):
        """Test settings with no budget variables set."""
        settings = load_settings()

        assert settings.environment == Environment.TEST
        assert settings.stack_id == "budget-alerts"
        assert settings.monthly_budget is None
        assert settings.subscribers == []
        assert settings.currency == "USD"
        assert settings.log_format == LogFormat.JSON
        assert settings.provisioner.backend == ProvisionerBackend.MEMORY

    def test_reads_environment(self, clean_env):
        """Test parsing of every budget variable."""
        clean_env.setenv("BUDGET_STACK_ID", "prod-account")
        clean_env.setenv("MONTHLY_BUDGET", "250")
        clean_env.setenv("BUDGET_DEFAULT_TOPIC", "billing")
        clean_env.setenv("BUDGET_SUBSCRIBERS", "a@example.com, b@example.com,,")
        clean_env.setenv("BUDGET_CURRENCY", "eur")
        clean_env.setenv("AWS_ACCOUNT_ID", "111122223333")

        settings = load_settings()

        assert settings.stack_id == "prod-account"
        assert settings.monthly_budget == 250
        assert settings.default_topic == "billing"
        assert settings.subscribers == ["a@example.com", "b@example.com"]
        assert settings.currency == "EUR"
        assert settings.provisioner.account_id == "111122223333"

    def test_reads_env_file(self, clean_env, tmp_path):
        """Test loading variables from a .env file."""
        env_file = tmp_path / "budget.env"
        env_file.write_text("MONTHLY_BUDGET=900\nBUDGET_DEFAULT_TOPIC=from-file\n")

        settings = load_settings(env_file=str(env_file))

        assert settings.monthly_budget == 900
        assert settings.default_topic == "from-file"

    def test_missing_explicit_env_file(self, clean_env, tmp_path):
        """Test that an explicit but missing .env file is an error."""
        with pytest.raises(ConfigurationError):
            load_settings(env_file=str(tmp_path / "missing.env"))

    @pytest.mark.parametrize(
        "name,value",
        [
            ("MONTHLY_BUDGET", "0"),
            ("MONTHLY_BUDGET", "12.5"),
            ("BUDGET_CURRENCY", "dollars"),
            ("PROVISIONER_BACKEND", "terraform"),
            ("AWS_ACCOUNT_ID", "12345"),
        ],
    )
    def test_invalid_values(self, clean_env, name, value):
        """Test that invalid variables raise ConfigurationError."""
        clean_env.setenv(name, value)

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

        assert exc_info.value.details["validation_errors"]

    def test_template_backend_requires_path(self, clean_env):
        """Test the template_path cross-field check."""
        clean_env.setenv("PROVISIONER_BACKEND", "template")

        with pytest.raises(ConfigurationError):
            load_settings()

    def test_cached_until_reload(self, clean_env):
        """Test the settings singleton."""
        clean_env.setenv("MONTHLY_BUDGET", "100")
        first = load_settings()
        clean_env.setenv("MONTHLY_BUDGET", "200")

        assert get_settings() is first
        assert reload_settings().monthly_budget == 200


class TestBudgetSettings:
    """Tests for the settings schema."""

    def test_monthly_budget_must_be_positive(self):
        """Test the monthly_budget bound."""
        with pytest.raises(ValueError):
            BudgetSettings(monthly_budget=-1)
