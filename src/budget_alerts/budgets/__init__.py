"""
Budget Module

Budget configuration values, provisioned budgets, and the strategy that
derives a family of budgets from one monthly figure.

Public API:
    - BudgetConfig: Immutable budget configuration with derive_with()
    - BudgetOverrides / AlertConditionOverrides: Partial changes for derive_with()
    - Budget: A BudgetConfig provisioned inside a Stack
    - AccountBudgetStrategy: Monthly budget -> daily/monthly/quarterly/yearly budgets
    - DerivedBudgetSet: Result of AccountBudgetStrategy.create_alerts()

Usage:
    >>> from budget_alerts import Stack, MemoryProvisioner
    >>> from budget_alerts.budgets import AccountBudgetStrategy
    >>>
    >>> stack = Stack("prod-account", MemoryProvisioner())
    >>> strategy = AccountBudgetStrategy(
    ...     stack,
    ...     monthly_budget=100,
    ...     default_topic="budget-alerts",
    ...     subscribers=["ops@example.com"],
    ... )
    >>> budgets = strategy.create_alerts()
    >>>
    >>> # Clone a budget with a higher limit, same stack
    >>> monthly = budgets.by_period(TimeUnit.MONTHLY)[0]
    >>> bigger = monthly.derive_with("monthly_bigger", {"limit": 200})
"""

from .config import (
    AlertCondition,
    AlertConditionOverrides,
    BudgetConfig,
    BudgetDefinition,
    BudgetOverrides,
    ComparisonOperator,
    NotificationType,
    NotificationWithSubscribers,
    Subscriber,
    SubscriptionType,
    Tag,
    ThresholdType,
    TimeUnit,
)
from .budget import Budget
from .strategy import (
    DEFAULT_ALERT_POLICY,
    AccountBudgetStrategy,
    AlertPolicy,
    DerivedBudgetSet,
    topic_subscription,
)

__all__ = [
    # Configuration
    "AlertCondition",
    "AlertConditionOverrides",
    "BudgetConfig",
    "BudgetDefinition",
    "BudgetOverrides",
    "NotificationWithSubscribers",
    "Subscriber",
    "Tag",
    # Enums
    "ComparisonOperator",
    "NotificationType",
    "SubscriptionType",
    "ThresholdType",
    "TimeUnit",
    # Provisioned budgets
    "Budget",
    # Strategy
    "AccountBudgetStrategy",
    "AlertPolicy",
    "DEFAULT_ALERT_POLICY",
    "DerivedBudgetSet",
    "topic_subscription",
]
