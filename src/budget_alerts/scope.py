"""
Budget Alerts — Owning Scope

A Stack is the single owning context of budgets and strategies: it holds the
provisioner, the billing currency, and a registry of children by id.
Every call into the provisioner goes through the Stack so backend failures
surface uniformly as ProvisioningError.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from .budgets.config import BudgetDefinition
from .config import BudgetSettings, get_settings
from .errors import BudgetAlertsError, ProvisioningError, ScopeResolutionError, ValidationError
from .observability import stack_context
from .provisioning import (
    ProvisionerInterface,
    ResourceReference,
    TopicReference,
    TopicSubscription,
    create_provisioner,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Stack:
    """
    Owning scope for budgets.

    Children are registered under ids that are unique within the stack.
    Budgets hold only a weak reference back to their stack.
    """

    def __init__(self, stack_id: str, provisioner: ProvisionerInterface, currency: str = "USD"):
        """
        Initialize a stack.

        Args:
            stack_id: Identifier of the owning context (account, application, ...)
            provisioner: Backend that materializes resources
            currency: Currency code for every budget limit in this stack
        """
        if not stack_id:
            raise ValidationError("stack_id must be a non-empty string")
        self.stack_id = stack_id
        self.provisioner = provisioner
        self.currency = currency
        self._children: dict[str, Any] = {}

    @classmethod
    def from_settings(
        cls,
        settings: BudgetSettings | None = None,
        provisioner: ProvisionerInterface | None = None,
    ) -> Stack:
        """Build a stack (and, unless given, its provisioner) from settings."""
        settings = settings or get_settings()
        return cls(
            stack_id=settings.stack_id,
            provisioner=provisioner or create_provisioner(settings.provisioner),
            currency=settings.currency,
        )

    def __repr__(self) -> str:
        return f"Stack(stack_id={self.stack_id!r}, children={len(self._children)})"

    @property
    def children(self) -> list[Any]:
        return list(self._children.values())

    def find(self, child_id: str) -> Any | None:
        return self._children.get(child_id)

    def register(self, child_id: str, child: Any) -> None:
        """
        Attach a child to this stack.

        Raises:
            ScopeResolutionError: If the id is empty or already taken
        """
        if not child_id:
            raise ScopeResolutionError("child id must be a non-empty string", details={"stack_id": self.stack_id})
        if child_id in self._children:
            raise ScopeResolutionError(
                f"There is already a child named '{child_id}' in stack '{self.stack_id}'",
                details={"stack_id": self.stack_id, "child_id": child_id},
            )
        self._children[child_id] = child

    def unregister(self, child_id: str) -> bool:
        return self._children.pop(child_id, None) is not None

    def qualified_name(self, child_id: str) -> str:
        return f"{self.stack_id}_{child_id}"

    def _provision(self, logical_id: str, action: Callable[[], R]) -> R:
        with stack_context(self.stack_id):
            try:
                return action()
            except BudgetAlertsError:
                raise
            except Exception as e:
                logger.error(
                    "Provisioning of '%s' failed: %s",
                    logical_id,
                    e,
                    extra={"logical_id": logical_id, "error": str(e)},
                    exc_info=True,
                )
                raise ProvisioningError(
                    f"Failed to provision '{logical_id}': {e}",
                    logical_id=logical_id,
                    details={"stack_id": self.stack_id},
                ) from e

    def create_budget(self, logical_id: str, definition: BudgetDefinition) -> ResourceReference:
        reference = self._provision(logical_id, lambda: self.provisioner.create_budget(logical_id, definition))
        logger.info(
            "Provisioned %s budget '%s' (limit %s %s)",
            definition.period.value,
            logical_id,
            definition.limit_amount,
            definition.limit_unit,
            extra={"logical_id": logical_id, "period": definition.period.value},
        )
        return reference

    def create_topic(
        self,
        logical_id: str,
        topic_name: str,
        subscriptions: list[TopicSubscription],
    ) -> TopicReference:
        reference = self._provision(
            logical_id,
            lambda: self.provisioner.create_topic(logical_id, topic_name, subscriptions),
        )
        logger.info(
            "Provisioned topic '%s' with %d subscription(s)",
            topic_name,
            len(subscriptions),
            extra={"logical_id": logical_id, "topic_arn": reference.arn},
        )
        return reference

    def remove_resource(self, logical_id: str) -> bool:
        return self._provision(logical_id, lambda: self.provisioner.remove(logical_id))
