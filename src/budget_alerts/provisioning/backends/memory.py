"""
Budget Alerts — Memory Provisioner

In-process provisioner that records every resource it is asked to create
and renders them as a CloudFormation-style template.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ...budgets.config import BudgetDefinition
from ...errors import ProvisioningError
from ..interface import (
    ProvisionerInterface,
    ResourceReference,
    ResourceType,
    TopicReference,
    TopicSubscription,
)

logger = logging.getLogger(__name__)

TEMPLATE_FORMAT_VERSION = "2010-09-09"


@dataclass(frozen=True)
class RecordedResource:
    """A resource held by the memory provisioner, in template casing."""

    logical_id: str
    resource_type: ResourceType
    properties: dict[str, Any]

    def to_template(self) -> dict[str, Any]:
        return {"Type": self.resource_type.value, "Properties": self.properties}


def render_budget(definition: BudgetDefinition) -> dict[str, Any]:
    """Render a budget record with CloudFormation property names."""
    budget: dict[str, Any] = {
        "BudgetName": definition.budget_name,
        "BudgetType": definition.budget_type,
        "TimeUnit": definition.period.value,
        "BudgetLimit": {
            "Amount": definition.limit_amount,
            "Unit": definition.limit_unit,
        },
    }
    # Untagged budgets apply scope-wide: no filter at all
    if definition.cost_filters:
        budget["CostFilters"] = {key: list(values) for key, values in definition.cost_filters.items()}

    return {
        "Budget": budget,
        "NotificationsWithSubscribers": [
            {
                "Notification": {
                    "ComparisonOperator": rule.comparison_operator.value,
                    "NotificationType": rule.notification_type.value,
                    "Threshold": rule.threshold,
                    "ThresholdType": rule.threshold_type.value,
                },
                "Subscribers": [
                    {"SubscriptionType": s.subscription_type.value, "Address": s.address}
                    for s in rule.subscribers
                ],
            }
            for rule in definition.notifications_with_subscribers
        ],
    }


def render_topic(topic_name: str, subscriptions: list[TopicSubscription]) -> dict[str, Any]:
    """Render a topic with CloudFormation property names."""
    return {
        "TopicName": topic_name,
        "Subscription": [{"Protocol": s.protocol, "Endpoint": s.endpoint} for s in subscriptions],
    }


class MemoryProvisioner(ProvisionerInterface):
    """
    Recording provisioner.

    Features:
    - Keeps resources in creation order
    - Rejects duplicate logical ids
    - Renders the recorded resources as a template
    """

    def __init__(self, account_id: str = "123456789012", region: str = "us-east-1"):
        """
        Initialize memory provisioner.

        Args:
            account_id: Account id used when building topic ARNs
            region: Region used when building topic ARNs
        """
        self.account_id = account_id
        self.region = region
        self._resources: dict[str, RecordedResource] = {}

    def _record(self, logical_id: str, resource_type: ResourceType, properties: dict[str, Any]) -> None:
        if logical_id in self._resources:
            raise ProvisioningError(f"Resource already exists: {logical_id}", logical_id=logical_id)
        self._resources[logical_id] = RecordedResource(logical_id, resource_type, properties)
        logger.debug(
            "Recorded %s '%s'",
            resource_type.value,
            logical_id,
            extra={"logical_id": logical_id, "resource_type": resource_type.value},
        )

    def create_budget(self, logical_id: str, definition: BudgetDefinition) -> ResourceReference:
        self._record(logical_id, ResourceType.BUDGET, render_budget(definition))
        return ResourceReference(logical_id=logical_id, resource_type=ResourceType.BUDGET)

    def create_topic(
        self,
        logical_id: str,
        topic_name: str,
        subscriptions: list[TopicSubscription],
    ) -> TopicReference:
        self._record(logical_id, ResourceType.TOPIC, render_topic(topic_name, subscriptions))
        return TopicReference(
            logical_id=logical_id,
            topic_name=topic_name,
            arn=f"arn:aws:sns:{self.region}:{self.account_id}:{topic_name}",
        )

    def remove(self, logical_id: str) -> bool:
        removed = self._resources.pop(logical_id, None)
        if removed is not None:
            logger.debug("Removed resource '%s'", logical_id, extra={"logical_id": logical_id})
        return removed is not None

    def resource_count(self, resource_type: ResourceType | None = None) -> int:
        if resource_type is None:
            return len(self._resources)
        return sum(1 for r in self._resources.values() if r.resource_type == resource_type)

    def resources(self, resource_type: ResourceType | None = None) -> list[RecordedResource]:
        """List recorded resources in creation order, optionally of one type."""
        return [r for r in self._resources.values() if resource_type is None or r.resource_type == resource_type]

    def get(self, logical_id: str) -> RecordedResource | None:
        return self._resources.get(logical_id)

    def to_template(self) -> dict[str, Any]:
        """Render all recorded resources as a template document."""
        return {
            "AWSTemplateFormatVersion": TEMPLATE_FORMAT_VERSION,
            "Resources": {logical_id: r.to_template() for logical_id, r in self._resources.items()},
        }
