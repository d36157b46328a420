"""
Account Budget Strategy

Derives a family of daily, monthly, quarterly and yearly budgets from a
single monthly figure and provisions them, all notifying through one shared
topic.

Usage:
    >>> stack = Stack("prod-account", MemoryProvisioner())
    >>> strategy = AccountBudgetStrategy(
    ...     stack,
    ...     monthly_budget=100,
    ...     default_topic="budget-alerts",
    ...     subscribers=["ops@example.com"],
    ... )
    >>> strategy.daily_budget, strategy.quarterly_budget, strategy.yearly_budget
    (3, 300, 1095)
    >>> budgets = strategy.create_alerts()
    >>> len(budgets)
    7
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from ..config import BudgetSettings
from ..errors import BudgetAlertsError, ConfigurationError, ValidationError, require_positive_int
from ..observability import stack_context
from ..provisioning import TopicReference, TopicSubscription
from ..scope import Stack
from .budget import Budget
from .config import (
    AlertCondition,
    AlertConditionOverrides,
    BudgetConfig,
    BudgetOverrides,
    ComparisonOperator,
    NotificationType,
    Subscriber,
    Tag,
    TimeUnit,
)

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30
MONTHS_PER_QUARTER = 3
# Hundredths of the monthly budget per year: 100/month -> 1095/year
YEARLY_HUNDREDTHS = 1095


@dataclass(frozen=True)
class AlertPolicy:
    """One row of the derivation policy: which budget to create and when it alerts."""

    period: TimeUnit
    threshold: float
    comparison_operator: ComparisonOperator = ComparisonOperator.GREATER_THAN
    notification_type: NotificationType = NotificationType.ACTUAL

    @property
    def budget_id(self) -> str:
        """
        Identifier of the budget this row creates, e.g. monthly_80pct_actual.

        Every column takes part, so distinct rows never share an id. The
        default operator is left out of the id.
        """
        threshold = f"{self.threshold:g}".replace(".", "_")
        budget_id = f"{self.period.value.lower()}_{threshold}pct_{self.notification_type.value.lower()}"
        if self.comparison_operator != ComparisonOperator.GREATER_THAN:
            budget_id += f"_{self.comparison_operator.value.lower()}"
        return budget_id


# This project's chosen policy: it covers every derived amount and both
# notification types, rather than only daily and monthly budgets.
DEFAULT_ALERT_POLICY: tuple[AlertPolicy, ...] = (
    AlertPolicy(TimeUnit.DAILY, 100),
    AlertPolicy(TimeUnit.MONTHLY, 50),
    AlertPolicy(TimeUnit.MONTHLY, 80),
    AlertPolicy(TimeUnit.MONTHLY, 100),
    AlertPolicy(TimeUnit.MONTHLY, 100, notification_type=NotificationType.FORECASTED),
    AlertPolicy(TimeUnit.QUARTERLY, 100),
    AlertPolicy(TimeUnit.ANNUALLY, 100),
)


def topic_subscription(endpoint: str) -> TopicSubscription:
    """
    Infer the delivery protocol of a topic subscriber endpoint.

    Raises:
        ValidationError: If the endpoint is neither an email, a URL nor an ARN
    """
    if endpoint.startswith(("https://", "http://")):
        return TopicSubscription(protocol=endpoint.split(":", 1)[0], endpoint=endpoint)
    if endpoint.startswith("arn:"):
        parts = endpoint.split(":")
        if len(parts) < 6 or not parts[2]:
            raise ValidationError(f"Malformed subscriber ARN: {endpoint!r}", details={"endpoint": endpoint})
        return TopicSubscription(protocol=parts[2], endpoint=endpoint)
    if "@" in endpoint:
        return TopicSubscription(protocol="email", endpoint=endpoint)
    raise ValidationError(
        f"Unsupported subscriber endpoint: {endpoint!r}",
        details={"endpoint": endpoint, "supported": ["email", "https", "arn"]},
    )


@dataclass(frozen=True)
class DerivedBudgetSet:
    """The budgets provisioned by one strategy invocation."""

    topic: TopicReference
    budgets: tuple[Budget, ...]

    def __iter__(self) -> Iterator[Budget]:
        return iter(self.budgets)

    def __len__(self) -> int:
        return len(self.budgets)

    def by_period(self, period: TimeUnit) -> list[Budget]:
        return [b for b in self.budgets if b.config.period == period]

    @property
    def periods(self) -> set[TimeUnit]:
        return {b.config.period for b in self.budgets}


class AccountBudgetStrategy:
    """
    Expands one monthly budget into a policy-driven family of budgets.

    Derived amounts are computed once at construction. The shared topic is
    also created at construction, after the inputs are validated and before
    any budget exists.
    """

    def __init__(
        self,
        scope: Stack,
        monthly_budget: int,
        default_topic: str,
        subscribers: Sequence[str] = (),
        tags: Sequence[Tag] = (),
        policy: Sequence[AlertPolicy] = DEFAULT_ALERT_POLICY,
    ):
        """
        Initialize the strategy.

        Args:
            scope: Owning stack; the strategy is not reused across stacks
            monthly_budget: Monthly budget in whole currency units
            default_topic: Name of the shared notification topic
            subscribers: Endpoints subscribed to the shared topic
            tags: Cost-allocation tags applied to every derived budget
            policy: Rows of (period, threshold, operator, notification type)

        Raises:
            ValidationError: If monthly_budget, a subscriber or the policy is invalid
        """
        self._monthly_budget = require_positive_int(monthly_budget, "monthly_budget")
        if not default_topic:
            raise ValidationError("default_topic must be a non-empty topic name")
        if not policy:
            raise ValidationError("policy must contain at least one row")
        ids = [row.budget_id for row in policy]
        if len(set(ids)) != len(ids):
            raise ValidationError("policy rows must be unique", details={"budget_ids": ids})

        self.scope = scope
        self.default_topic = default_topic
        self.subscribers = tuple(subscribers)
        self.tags = tuple(tags)
        self.policy = tuple(policy)
        subscriptions = [topic_subscription(s) for s in self.subscribers]

        self._daily_budget = self._monthly_budget // DAYS_PER_MONTH
        self._quarterly_budget = self._monthly_budget * MONTHS_PER_QUARTER
        self._yearly_budget = self._monthly_budget * YEARLY_HUNDREDTHS // 100
        self._derived: DerivedBudgetSet | None = None

        self.topic = scope.create_topic(f"{default_topic}_topic", default_topic, subscriptions)

    @classmethod
    def from_settings(cls, scope: Stack, settings: BudgetSettings) -> AccountBudgetStrategy:
        """
        Build a strategy from loaded settings.

        Raises:
            ConfigurationError: If MONTHLY_BUDGET is not configured
        """
        if settings.monthly_budget is None:
            raise ConfigurationError(
                "MONTHLY_BUDGET must be set to derive budgets",
                details={"env": "MONTHLY_BUDGET"},
            )
        return cls(
            scope,
            monthly_budget=settings.monthly_budget,
            default_topic=settings.default_topic,
            subscribers=settings.subscribers,
        )

    @property
    def monthly_budget(self) -> int:
        return self._monthly_budget

    @property
    def daily_budget(self) -> int:
        """Monthly budget / 30, rounded down."""
        return self._daily_budget

    @property
    def quarterly_budget(self) -> int:
        """Three months of spend."""
        return self._quarterly_budget

    @property
    def yearly_budget(self) -> int:
        """Monthly budget * 10.95, rounded down."""
        return self._yearly_budget

    def limit_for(self, period: TimeUnit) -> int:
        """
        Budget limit used for a period.

        A monthly budget under 30 has a daily budget of 0; daily rows then
        use a limit of 1 so the limit stays strictly positive.
        """
        limits = {
            TimeUnit.DAILY: max(self._daily_budget, 1),
            TimeUnit.MONTHLY: self._monthly_budget,
            TimeUnit.QUARTERLY: self._quarterly_budget,
            TimeUnit.ANNUALLY: self._yearly_budget,
        }
        return limits[period]

    def _derive_configs(self) -> list[tuple[str, BudgetConfig]]:
        base = BudgetConfig(
            limit=self.limit_for(TimeUnit.DAILY),
            period=TimeUnit.DAILY,
            alert_condition=AlertCondition(threshold=100),
            subscribers=(Subscriber.sns(self.topic.arn),),
            tags=self.tags,
        )
        configs = []
        for row in self.policy:
            config = base.derive_with(
                BudgetOverrides(
                    limit=self.limit_for(row.period),
                    period=row.period,
                    alert_condition=AlertConditionOverrides(
                        comparison_operator=row.comparison_operator,
                        notification_type=row.notification_type,
                        threshold=row.threshold,
                    ),
                )
            )
            configs.append((row.budget_id, config))
        return configs

    def create_alerts(self) -> DerivedBudgetSet:
        """
        Derive and provision one budget per policy row.

        Every config is built and validated before the first budget is
        provisioned. If provisioning fails part way, the budgets created by
        this call are removed again and the error is re-raised.

        Returns:
            The derived budget set (the same set on repeated calls)
        """
        if self._derived is not None:
            return self._derived

        with stack_context(self.scope.stack_id):
            configs = self._derive_configs()
            logger.debug(
                "Derived %d budget(s) from monthly budget %d",
                len(configs),
                self._monthly_budget,
                extra={
                    "monthly_budget": self._monthly_budget,
                    "daily_budget": self._daily_budget,
                    "quarterly_budget": self._quarterly_budget,
                    "yearly_budget": self._yearly_budget,
                },
            )

            created: list[Budget] = []
            try:
                for budget_id, config in configs:
                    created.append(Budget(self.scope, budget_id, config))
            except Exception:
                logger.error(
                    "Budget derivation aborted after %d of %d budget(s), rolling back",
                    len(created),
                    len(configs),
                    extra={"created_budgets": [b.budget_id for b in created]},
                )
                for budget in reversed(created):
                    try:
                        budget.destroy()
                    except BudgetAlertsError:
                        logger.error(
                            "Rollback could not remove budget '%s'",
                            budget.budget_id,
                            extra={"budget_id": budget.budget_id},
                            exc_info=True,
                        )
                raise

            self._derived = DerivedBudgetSet(topic=self.topic, budgets=tuple(created))
            logger.info(
                "Provisioned %d budget(s) notifying topic '%s'",
                len(created),
                self.default_topic,
                extra={"budgets": len(created), "topic_arn": self.topic.arn},
            )
            return self._derived
