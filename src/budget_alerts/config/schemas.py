"""
Budget Alerts — Configuration Schemas

Defines typed settings models using Pydantic for validation and type safety.
All settings come from environment variables and are validated at load time.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    TEXT = "text"


class ProvisionerBackend(str, Enum):
    """Supported provisioner backends."""

    MEMORY = "memory"
    TEMPLATE = "template"


class ProvisionerSettings(BaseModel):
    """Provisioner configuration."""

    backend: ProvisionerBackend = Field(default=ProvisionerBackend.MEMORY, description="Provisioner backend")
    template_path: str | None = Field(default=None, description="Output path (template backend only)")
    account_id: str = Field(default="123456789012", pattern=r"^\d{12}$", description="Account id for ARNs")
    region: str = Field(default="us-east-1", min_length=1, description="Region for ARNs")

    @field_validator("template_path")
    @classmethod
    def validate_template_path(cls, v: str | None, info) -> str | None:  # type: ignore[no-untyped-def]
        """Ensure template_path is provided when backend is template."""
        backend = info.data.get("backend")
        if backend == ProvisionerBackend.TEMPLATE and not v:
            raise ValueError("template_path is required when provisioner backend is 'template'")
        return v


class BudgetSettings(BaseModel):
    """Top-level settings for a budget stack."""

    environment: Environment = Field(default=Environment.DEVELOPMENT)
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: LogFormat = Field(default=LogFormat.JSON)

    stack_id: str = Field(default="budget-alerts", min_length=1, description="Owning stack identifier")
    monthly_budget: int | None = Field(default=None, gt=0, description="Monthly budget in whole currency units")
    default_topic: str = Field(default="budget-alerts", min_length=1, description="Shared notification topic name")
    subscribers: list[str] = Field(default_factory=list, description="Endpoints subscribed to the topic")
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$", description="ISO 4217 currency code")

    provisioner: ProvisionerSettings = Field(default_factory=ProvisionerSettings)

    model_config = ConfigDict(use_enum_values=False)
