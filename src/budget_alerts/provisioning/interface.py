"""
Budget Alerts — Provisioner Interface

Defines the abstract interface that all provisioning backends must implement.
A provisioner turns declarative budget and topic definitions into resources.
"""

from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..budgets.config import BudgetDefinition


class ResourceType(str, Enum):
    """Resource types produced by the provisioners."""

    BUDGET = "AWS::Budgets::Budget"
    TOPIC = "AWS::SNS::Topic"


class TopicSubscription(BaseModel):
    """A single endpoint subscribed to a notification topic."""

    model_config = ConfigDict(frozen=True)

    protocol: str = Field(..., description="Delivery protocol (email, https, sqs, lambda, ...)")
    endpoint: str = Field(..., min_length=1, description="Endpoint address or ARN")


class ResourceReference(BaseModel):
    """Handle to a provisioned resource."""

    model_config = ConfigDict(frozen=True)

    logical_id: str
    resource_type: ResourceType


class TopicReference(ResourceReference):
    """Handle to a provisioned topic, usable as an SNS budget subscriber."""

    resource_type: ResourceType = ResourceType.TOPIC
    topic_name: str
    arn: str


class ProvisionerInterface(ABC):
    """
    Abstract base class for provisioning backends.

    Backends are synchronous. Any failure may be raised as-is; the owning
    scope wraps it into a ProvisioningError.
    """

    @abstractmethod
    def create_budget(self, logical_id: str, definition: BudgetDefinition) -> ResourceReference:
        """
        Provision one budget.

        Args:
            logical_id: Identifier unique within the provisioner
            definition: Budget record to provision

        Returns:
            Reference to the provisioned budget
        """

    @abstractmethod
    def create_topic(
        self,
        logical_id: str,
        topic_name: str,
        subscriptions: list[TopicSubscription],
    ) -> TopicReference:
        """
        Provision a notification topic with its subscriptions.

        Args:
            logical_id: Identifier unique within the provisioner
            topic_name: Topic name
            subscriptions: Endpoints subscribed to the topic

        Returns:
            Reference to the provisioned topic
        """

    @abstractmethod
    def remove(self, logical_id: str) -> bool:
        """
        Remove a previously provisioned resource.

        Returns:
            True if the resource existed and was removed
        """

    @abstractmethod
    def resource_count(self, resource_type: ResourceType | None = None) -> int:
        """Count provisioned resources, optionally of one type."""
