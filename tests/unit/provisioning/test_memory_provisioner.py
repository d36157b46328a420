"""
Unit Tests for Memory Provisioner

Tests resource recording, removal and template rendering.
"""

import pytest

from budget_alerts.budgets import AlertCondition, BudgetConfig, TimeUnit
from budget_alerts.errors import ProvisioningError
from budget_alerts.provisioning import (
    MemoryProvisioner,
    ResourceType,
    TopicSubscription,
)


class TestMemoryProvisioner:
    """Test suite for MemoryProvisioner."""

    def test_initialization(self):
        """Test provisioner initialization with custom parameters."""
        provisioner = MemoryProvisioner(account_id="999988887777", region="ap-south-1")

        assert provisioner.account_id == "999988887777"
        assert provisioner.region == "ap-south-1"
        assert provisioner.resource_count() == 0

    def test_create_budget(self, provisioner, sample_config):
        """Test that a budget is rendered with template property names."""
        reference = provisioner.create_budget("monthly", sample_config.to_definition("s_monthly"))

        assert reference.logical_id == "monthly"
        assert reference.resource_type == ResourceType.BUDGET
        assert provisioner.get("monthly").properties == {
            "Budget": {
                "BudgetName": "s_monthly",
                "BudgetType": "COST",
                "TimeUnit": "MONTHLY",
                "BudgetLimit": {"Amount": 100, "Unit": "USD"},
                "CostFilters": {"TagKeyValue": ["user:team$platform", "user:env$prod"]},
            },
            "NotificationsWithSubscribers": [
                {
                    "Notification": {
                        "ComparisonOperator": "GREATER_THAN",
                        "NotificationType": "ACTUAL",
                        "Threshold": 80,
                        "ThresholdType": "PERCENTAGE",
                    },
                    "Subscribers": [
                        {"SubscriptionType": "EMAIL", "Address": "alert@example.com"},
                        {"SubscriptionType": "EMAIL", "Address": "finance@example.com"},
                    ],
                }
            ],
        }

    def test_untagged_budget_has_no_cost_filters(self, provisioner):
        """Test that CostFilters is omitted for untagged budgets."""
        config = BudgetConfig(limit=3, period=TimeUnit.DAILY, alert_condition=AlertCondition(threshold=100))

        provisioner.create_budget("daily", config.to_definition("s_daily"))

        assert "CostFilters" not in provisioner.get("daily").properties["Budget"]

    def test_create_topic(self, provisioner):
        """Test topic ARN and subscriptions."""
        reference = provisioner.create_topic(
            "alerts_topic",
            "alerts",
            [TopicSubscription(protocol="email", endpoint="ops@example.com")],
        )

        assert reference.arn == "arn:aws:sns:eu-west-1:111122223333:alerts"
        assert reference.resource_type == ResourceType.TOPIC
        assert provisioner.resource_count(ResourceType.TOPIC) == 1
        assert provisioner.resource_count(ResourceType.BUDGET) == 0

    def test_duplicate_logical_id(self, provisioner):
        """Test that a logical id can only be used once."""
        provisioner.create_topic("t", "alerts", [])

        with pytest.raises(ProvisioningError):
            provisioner.create_topic("t", "alerts", [])

    def test_remove(self, provisioner):
        """Test removing resources."""
        provisioner.create_topic("t", "alerts", [])

        assert provisioner.remove("t") is True
        assert provisioner.remove("t") is False
        assert provisioner.resource_count() == 0

    def test_to_template(self, provisioner, sample_config):
        """Test the rendered template document, in creation order."""
        provisioner.create_topic("t", "alerts", [])
        provisioner.create_budget("monthly", sample_config.to_definition("s_monthly"))

        template = provisioner.to_template()

        assert template["AWSTemplateFormatVersion"] == "2010-09-09"
        assert list(template["Resources"]) == ["t", "monthly"]
        assert template["Resources"]["t"]["Type"] == "AWS::SNS::Topic"
        assert template["Resources"]["monthly"]["Type"] == "AWS::Budgets::Budget"
