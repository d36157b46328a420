"""
Budget Alerts — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import Generator

import pytest

from budget_alerts.budgets import AlertCondition, BudgetConfig, Subscriber, Tag, TimeUnit
from budget_alerts.config import reset_settings
from budget_alerts.provisioning import MemoryProvisioner
from budget_alerts.scope import Stack

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"

SETTINGS_ENV_VARS = (
    "LOG_FORMAT",
    "BUDGET_STACK_ID",
    "MONTHLY_BUDGET",
    "BUDGET_DEFAULT_TOPIC",
    "BUDGET_SUBSCRIBERS",
    "BUDGET_CURRENCY",
    "PROVISIONER_BACKEND",
    "TEMPLATE_PATH",
    "AWS_ACCOUNT_ID",
    "AWS_REGION",
)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings singleton after each test to prevent state leakage."""
    yield
    reset_settings()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[pytest.MonkeyPatch, None, None]:
    """
    Remove settings variables and run from an empty directory (no .env).

    The whole environment is restored afterwards, including variables
    that load_dotenv() set behind monkeypatch's back.
    """
    saved = dict(os.environ)
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    yield monkeypatch

    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture
def provisioner() -> MemoryProvisioner:
    """Fresh memory provisioner for each test."""
    return MemoryProvisioner(account_id="111122223333", region="eu-west-1")


@pytest.fixture
def stack(provisioner: MemoryProvisioner) -> Stack:
    """Stack backed by the memory provisioner."""
    return Stack("test-stack", provisioner)


@pytest.fixture
def sample_config() -> BudgetConfig:
    """A tagged monthly budget with two email subscribers."""
    return BudgetConfig(
        limit=100,
        period=TimeUnit.MONTHLY,
        alert_condition=AlertCondition(threshold=80),
        subscribers=[Subscriber.email("alert@example.com"), Subscriber.email("finance@example.com")],
        tags=[Tag(key="team", value="platform"), Tag(key="env", value="prod")],
    )
