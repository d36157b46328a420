"""
Provisioned Budget

A Budget is a BudgetConfig attached to an owning Stack. Creating one
registers it in the stack and provisions exactly one budget resource;
validation always happens before that.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Mapping
from typing import Any

from ..errors import ScopeResolutionError
from ..provisioning import ResourceReference
from ..scope import Stack
from .config import BudgetConfig, BudgetDefinition, BudgetOverrides

logger = logging.getLogger(__name__)


class Budget:
    """
    A budget provisioned in a stack.

    The stack is held through a weak reference: the budget can find its
    owner to create derived budgets, but never keeps it alive.
    """

    def __init__(
        self,
        scope: Stack | None,
        budget_id: str,
        config: BudgetConfig | Mapping[str, Any],
    ):
        """
        Validate, register and provision a budget.

        Args:
            scope: Owning stack
            budget_id: Identifier unique within the stack
            config: BudgetConfig, or the keyword arguments for one

        Raises:
            ValidationError: If the configuration is invalid (nothing is provisioned)
            ScopeResolutionError: If scope is missing or budget_id is taken
            ProvisioningError: If the provisioner fails (the id is released again)
        """
        if scope is None:
            raise ScopeResolutionError(
                f"Budget '{budget_id}' must be created inside a stack",
                details={"budget_id": budget_id},
            )
        if not isinstance(config, BudgetConfig):
            config = BudgetConfig(**dict(config))

        self.budget_id = budget_id
        self.config = config
        self.definition: BudgetDefinition = config.to_definition(scope.qualified_name(budget_id), scope.currency)
        self._scope_ref: weakref.ReferenceType[Stack] = weakref.ref(scope)

        scope.register(budget_id, self)
        try:
            self.resource: ResourceReference = scope.create_budget(budget_id, self.definition)
        except Exception:
            scope.unregister(budget_id)
            raise

    def __repr__(self) -> str:
        return (
            f"Budget(budget_id={self.budget_id!r}, period={self.config.period.value}, "
            f"limit={self.config.limit}, threshold={self.config.alert_condition.threshold})"
        )

    @property
    def budget_name(self) -> str:
        return self.definition.budget_name

    @property
    def scope(self) -> Stack | None:
        """The owning stack, or None if it no longer exists."""
        return self._scope_ref()

    def _resolve_scope(self) -> Stack:
        scope = self._scope_ref()
        if scope is None:
            raise ScopeResolutionError(
                f"Cannot find the stack of budget '{self.budget_id}' to make a clone",
                details={"budget_id": self.budget_id},
            )
        return scope

    def derive_with(
        self,
        budget_id: str,
        overrides: BudgetOverrides | Mapping[str, Any] | None = None,
    ) -> Budget:
        """
        Create a copy of this budget in the same stack with the provided changes.

        Args:
            budget_id: Identifier of the new budget, unique within the stack
            overrides: Fields to change; everything unset comes from this budget

        Returns:
            The newly provisioned Budget

        Raises:
            ScopeResolutionError: If the owning stack cannot be resolved
        """
        scope = self._resolve_scope()
        config = self.config.derive_with(overrides)
        logger.debug(
            "Deriving budget '%s' from '%s'",
            budget_id,
            self.budget_id,
            extra={"budget_id": budget_id, "source_budget_id": self.budget_id},
        )
        return Budget(scope, budget_id, config)

    def destroy(self) -> None:
        """
        Remove the provisioned resource and detach from the stack, if it still exists.

        The budget is detached even when the provisioner fails to remove it.

        Raises:
            ProvisioningError: If the provisioner cannot remove the resource
        """
        scope = self._scope_ref()
        if scope is None:
            return
        try:
            scope.remove_resource(self.budget_id)
        finally:
            scope.unregister(self.budget_id)
