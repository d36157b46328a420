"""
Integration Tests for a Budget Stack

Loads settings from the environment, builds a stack with the template
backend, derives the budget family and inspects the written template.
"""

import json

import pytest

from budget_alerts import AccountBudgetStrategy, Stack
from budget_alerts.config import load_settings
from budget_alerts.provisioning import ResourceType, TemplateFileProvisioner


@pytest.fixture
def template(clean_env, tmp_path) -> dict:
    """Synthesize the stack described by the environment and return the template."""
    template_path = tmp_path / "cdk.out" / "budgets.json"
    clean_env.setenv("BUDGET_STACK_ID", "mocked-stack")
    clean_env.setenv("MONTHLY_BUDGET", "100")
    clean_env.setenv("BUDGET_DEFAULT_TOPIC", "mocked-topic")
    clean_env.setenv("BUDGET_SUBSCRIBERS", "alert@example.com,billing@example.com")
    clean_env.setenv("PROVISIONER_BACKEND", "template")
    clean_env.setenv("TEMPLATE_PATH", str(template_path))

    settings = load_settings()
    stack = Stack.from_settings(settings)
    strategy = AccountBudgetStrategy.from_settings(stack, settings)
    strategy.create_alerts()

    assert isinstance(stack.provisioner, TemplateFileProvisioner)
    stack.provisioner.flush()
    return json.loads(template_path.read_text())


def resources_of(template: dict, resource_type: ResourceType) -> list[dict]:
    return [r["Properties"] for r in template["Resources"].values() if r["Type"] == resource_type.value]


class TestBudgetStack:
    """End-to-end checks on the synthesized template."""

    def test_resource_counts(self, template):
        """Test that seven budgets and one topic are synthesized."""
        assert len(resources_of(template, ResourceType.BUDGET)) == 7
        assert len(resources_of(template, ResourceType.TOPIC)) == 1

    def test_daily_and_monthly_budgets(self, template):
        """Test that daily and monthly budgets exist."""
        units = [b["Budget"]["TimeUnit"] for b in resources_of(template, ResourceType.BUDGET)]

        assert "DAILY" in units
        assert "MONTHLY" in units

    def test_budget_names_are_stack_scoped(self, template):
        """Test that budget names carry the stack id."""
        names = [b["Budget"]["BudgetName"] for b in resources_of(template, ResourceType.BUDGET)]

        assert all(name.startswith("mocked-stack_") for name in names)
        assert len(set(names)) == 7

    def test_budgets_notify_topic(self, template):
        """Test that every budget routes its alerts through the topic."""
        for budget in resources_of(template, ResourceType.BUDGET):
            subscribers = budget["NotificationsWithSubscribers"][0]["Subscribers"]
            assert subscribers == [
                {"SubscriptionType": "SNS", "Address": "arn:aws:sns:us-east-1:123456789012:mocked-topic"}
            ]

    def test_topic_fans_out_to_subscribers(self, template):
        """Test the topic subscriptions."""
        (topic,) = resources_of(template, ResourceType.TOPIC)

        assert [s["Endpoint"] for s in topic["Subscription"]] == ["alert@example.com", "billing@example.com"]
