"""
Budget Alerts — Cost Budget Derivation

Derives daily, monthly, quarterly and yearly cost budgets with alert
thresholds from a single monthly figure, and clones budget configurations
with selective overrides.
"""

__version__ = "1.0.0"

from .errors import (
    BudgetAlertsError,
    ConfigurationError,
    ProvisioningError,
    ScopeResolutionError,
    ValidationError,
)
from .budgets import (
    AccountBudgetStrategy,
    AlertCondition,
    Budget,
    BudgetConfig,
    BudgetOverrides,
    DerivedBudgetSet,
    TimeUnit,
)
from .provisioning import MemoryProvisioner, ResourceType, create_provisioner
from .scope import Stack

__all__ = [
    # Errors
    "BudgetAlertsError",
    "ConfigurationError",
    "ProvisioningError",
    "ScopeResolutionError",
    "ValidationError",
    # Budgets
    "AccountBudgetStrategy",
    "AlertCondition",
    "Budget",
    "BudgetConfig",
    "BudgetOverrides",
    "DerivedBudgetSet",
    "TimeUnit",
    # Provisioning
    "MemoryProvisioner",
    "ResourceType",
    "create_provisioner",
    "Stack",
]
