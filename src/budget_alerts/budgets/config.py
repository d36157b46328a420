"""
Budget Configuration Models

Typed, immutable configuration for a single cost budget: limit, period,
alert condition, subscribers and cost-allocation tags.

BudgetConfig is a pure value object. It validates and merges but never
provisions anything; see budget.py for the provisioning side.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError, require_positive_int

T = TypeVar("T")

TAG_FILTER_KEY = "TagKeyValue"


class TimeUnit(str, Enum):
    """Budget periods, using the provider's wire values."""

    DAILY = "DAILY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUALLY = "ANNUALLY"
    YEARLY = "ANNUALLY"


class ComparisonOperator(str, Enum):
    """How spend is compared with the threshold."""

    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    EQUAL_TO = "EQUAL_TO"


class NotificationType(str, Enum):
    """Whether an alert fires on actual or forecasted spend."""

    ACTUAL = "ACTUAL"
    FORECASTED = "FORECASTED"


class ThresholdType(str, Enum):
    """Whether a threshold is a percentage of the limit or an absolute amount."""

    PERCENTAGE = "PERCENTAGE"
    ABSOLUTE_VALUE = "ABSOLUTE_VALUE"


class SubscriptionType(str, Enum):
    """Notification endpoint kinds accepted by a budget."""

    EMAIL = "EMAIL"
    SNS = "SNS"


def _wrap_pydantic_error(model: str, error: PydanticValidationError) -> ValidationError:
    return ValidationError(
        f"Invalid {model}: {error.error_count()} validation error(s)",
        details={"model": model, "validation_errors": error.errors(include_url=False)},
    )


def _coalesce(override: T | None, original: T) -> T:
    return original if override is None else override


class Tag(BaseModel):
    """A cost-allocation tag used to scope a budget."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Tag key")
    value: str = Field(..., description="Tag value")

    def to_filter(self) -> str:
        return f"user:{self.key}${self.value}"


class Subscriber(BaseModel):
    """A notification endpoint attached directly to a budget."""

    model_config = ConfigDict(frozen=True)

    subscription_type: SubscriptionType = Field(..., description="Endpoint kind")
    address: str = Field(..., min_length=1, description="Email address or topic ARN")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str, info: Any) -> str:
        """Reject addresses that cannot belong to the declared endpoint kind."""
        kind = info.data.get("subscription_type")
        if kind == SubscriptionType.EMAIL and "@" not in v:
            raise ValueError(f"email subscriber must contain '@', got {v!r}")
        if kind == SubscriptionType.SNS and not v.startswith("arn:"):
            raise ValueError(f"SNS subscriber must be a topic ARN, got {v!r}")
        return v

    @classmethod
    def email(cls, address: str) -> "Subscriber":
        return cls(subscription_type=SubscriptionType.EMAIL, address=address)

    @classmethod
    def sns(cls, topic_arn: str) -> "Subscriber":
        return cls(subscription_type=SubscriptionType.SNS, address=topic_arn)

    @classmethod
    def from_endpoint(cls, endpoint: str) -> "Subscriber":
        """Build a subscriber from a bare endpoint string (email address or topic ARN)."""
        if endpoint.startswith("arn:"):
            return cls.sns(endpoint)
        return cls.email(endpoint)


class AlertCondition(BaseModel):
    """When a budget notifies its subscribers."""

    model_config = ConfigDict(frozen=True)

    comparison_operator: ComparisonOperator = Field(default=ComparisonOperator.GREATER_THAN)
    notification_type: NotificationType = Field(default=NotificationType.ACTUAL)
    threshold: float = Field(..., ge=0.0, description="Threshold, interpreted per threshold_type")
    threshold_type: ThresholdType = Field(default=ThresholdType.PERCENTAGE)


class NotificationWithSubscribers(BaseModel):
    """One notification rule of a provisioning record."""

    model_config = ConfigDict(frozen=True)

    comparison_operator: ComparisonOperator
    notification_type: NotificationType
    threshold: float
    threshold_type: ThresholdType
    subscribers: tuple[Subscriber, ...]


class BudgetDefinition(BaseModel):
    """The record handed to the provisioning collaborator."""

    model_config = ConfigDict(frozen=True)

    budget_name: str
    budget_type: str = "COST"
    period: TimeUnit
    limit_amount: int
    limit_unit: str
    cost_filters: dict[str, list[str]] = Field(default_factory=dict)
    notifications_with_subscribers: tuple[NotificationWithSubscribers, ...]


class BudgetConfig(BaseModel):
    """
    Configuration of a single cost budget.

    Construction fails with budget_alerts.errors.ValidationError if the
    limit is not a strictly positive integer or any other field is invalid.
    """

    model_config = ConfigDict(frozen=True)

    limit: int = Field(..., description="Budget limit in whole currency units")
    period: TimeUnit = Field(..., description="Budget time unit")
    alert_condition: AlertCondition
    subscribers: tuple[Subscriber, ...] = Field(default=())
    tags: tuple[Tag, ...] = Field(default=())

    @model_validator(mode="wrap")
    @classmethod
    def wrap_errors(cls, data: Any, handler: Any) -> "BudgetConfig":
        """Raise the package ValidationError from every construction path."""
        try:
            return handler(data)
        except PydanticValidationError as e:
            raise _wrap_pydantic_error("BudgetConfig", e) from e

    @field_validator("limit", mode="before")
    @classmethod
    def validate_limit(cls, v: Any) -> int:
        return require_positive_int(v, "limit")

    @field_validator("subscribers", mode="before")
    @classmethod
    def coerce_subscribers(cls, v: Any) -> Any:
        """Accept bare endpoint strings alongside Subscriber instances."""
        if isinstance(v, (list, tuple)):
            return tuple(Subscriber.from_endpoint(s) if isinstance(s, str) else s for s in v)
        return v

    def cost_filters(self) -> dict[str, list[str]]:
        """
        Project the tags into the provider's cost-filter shape.

        Returns:
            {"TagKeyValue": ["user:<key>$<value>", ...]}, or {} when untagged
        """
        if not self.tags:
            return {}
        return {TAG_FILTER_KEY: [tag.to_filter() for tag in self.tags]}

    def derive_with(self, overrides: "BudgetOverrides | Mapping[str, Any] | None" = None) -> "BudgetConfig":
        """
        Create a copy with the provided changes.

        Each field comes from overrides when set, otherwise from this config.
        The alert condition is merged one level deep, sub-field by sub-field.

        Args:
            overrides: BudgetOverrides, an equivalent mapping, or None

        Returns:
            New, validated BudgetConfig (this instance is untouched)
        """
        changes = BudgetOverrides.coerce(overrides)
        alert = changes.alert_condition or AlertConditionOverrides()
        current = self.alert_condition

        return BudgetConfig(
            limit=_coalesce(changes.limit, self.limit),
            period=_coalesce(changes.period, self.period),
            subscribers=_coalesce(changes.subscribers, self.subscribers),
            tags=_coalesce(changes.tags, self.tags),
            alert_condition=AlertCondition(
                comparison_operator=_coalesce(alert.comparison_operator, current.comparison_operator),
                notification_type=_coalesce(alert.notification_type, current.notification_type),
                threshold=_coalesce(alert.threshold, current.threshold),
                threshold_type=_coalesce(alert.threshold_type, current.threshold_type),
            ),
        )

    def to_definition(self, budget_name: str, currency: str = "USD") -> BudgetDefinition:
        """Build the provisioning record for this budget."""
        condition = self.alert_condition
        return BudgetDefinition(
            budget_name=budget_name,
            period=self.period,
            limit_amount=self.limit,
            limit_unit=currency,
            cost_filters=self.cost_filters(),
            notifications_with_subscribers=(
                NotificationWithSubscribers(
                    comparison_operator=condition.comparison_operator,
                    notification_type=condition.notification_type,
                    threshold=condition.threshold,
                    threshold_type=condition.threshold_type,
                    subscribers=self.subscribers,
                ),
            ),
        )


class AlertConditionOverrides(BaseModel):
    """Optional mirror of AlertCondition; None means keep the original value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    comparison_operator: ComparisonOperator | None = None
    notification_type: NotificationType | None = None
    threshold: float | None = Field(default=None, ge=0.0)
    threshold_type: ThresholdType | None = None


class BudgetOverrides(BaseModel):
    """Optional mirror of BudgetConfig; None means keep the original value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    limit: int | None = None
    period: TimeUnit | None = None
    alert_condition: AlertConditionOverrides | None = None
    subscribers: tuple[Subscriber, ...] | None = None
    tags: tuple[Tag, ...] | None = None

    @field_validator("limit", mode="before")
    @classmethod
    def validate_limit(cls, v: Any) -> int | None:
        if v is None:
            return None
        return require_positive_int(v, "limit")

    @field_validator("subscribers", mode="before")
    @classmethod
    def coerce_subscribers(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return tuple(Subscriber.from_endpoint(s) if isinstance(s, str) else s for s in v)
        return v

    @classmethod
    def coerce(cls, overrides: "BudgetOverrides | Mapping[str, Any] | None") -> "BudgetOverrides":
        """Normalize the accepted override forms into a BudgetOverrides."""
        if overrides is None:
            return cls()
        if isinstance(overrides, cls):
            return overrides
        if isinstance(overrides, Mapping):
            try:
                return cls.model_validate(dict(overrides))
            except PydanticValidationError as e:
                raise _wrap_pydantic_error("BudgetOverrides", e) from e
        raise ValidationError(
            f"Overrides must be a BudgetOverrides or a mapping, got {type(overrides).__name__}",
            details={"type": type(overrides).__name__},
        )
