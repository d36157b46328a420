"""
Budget Alerts — Configuration Loader

Loads and validates settings from environment variables and .env files.
Provides a singleton settings instance.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import BudgetSettings

logger = logging.getLogger(__name__)

_settings_instance: BudgetSettings | None = None


def _split_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _settings_from_env() -> dict[str, Any]:
    provisioner: dict[str, Any] = {
        "backend": os.getenv("PROVISIONER_BACKEND", "memory"),
        "template_path": os.getenv("TEMPLATE_PATH"),
        "region": os.getenv("AWS_REGION", "us-east-1"),
    }
    if os.getenv("AWS_ACCOUNT_ID"):
        provisioner["account_id"] = os.getenv("AWS_ACCOUNT_ID")

    return {
        "environment": os.getenv("ENVIRONMENT", "development"),
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "log_format": os.getenv("LOG_FORMAT", "json").lower(),
        "stack_id": os.getenv("BUDGET_STACK_ID", "budget-alerts"),
        "monthly_budget": os.getenv("MONTHLY_BUDGET") or None,
        "default_topic": os.getenv("BUDGET_DEFAULT_TOPIC", "budget-alerts"),
        "subscribers": _split_list(os.getenv("BUDGET_SUBSCRIBERS")),
        "currency": os.getenv("BUDGET_CURRENCY", "USD").upper(),
        "provisioner": provisioner,
    }


def load_settings(
    env_file: str | None = None,
    reload: bool = False,
) -> BudgetSettings:
    """
    Load settings from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in working directory)
        reload: Force reload even if settings already loaded

    Returns:
        Validated BudgetSettings instance

    Raises:
        ConfigurationError: If settings are invalid
    """
    global _settings_instance

    if _settings_instance is not None and not reload:
        return _settings_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info("Loading environment from %s", env_path)
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                "Failed to load .env file from %s: %s",
                env_path,
                e,
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    elif env_file:
        raise ConfigurationError(
            f"Environment file not found: {env_path}",
            details={"path": str(env_path)},
        )
    else:
        logger.debug("No .env file found, using environment variables only")

    settings_dict = _settings_from_env()

    try:
        _settings_instance = BudgetSettings(**settings_dict)
    except ValidationError as e:
        logger.error(
            "Settings validation failed: %s",
            e,
            extra={"validation_errors": e.errors(include_url=False)},
        )
        raise ConfigurationError(
            "Settings validation failed. Check your environment variables.",
            details={"validation_errors": e.errors(include_url=False)},
        ) from e

    logger.info(
        "Settings loaded (environment: %s)",
        _settings_instance.environment.value,
        extra={
            "environment": _settings_instance.environment.value,
            "provisioner_backend": _settings_instance.provisioner.backend.value,
        },
    )
    return _settings_instance


def get_settings() -> BudgetSettings:
    """
    Get the current settings instance, loading it on first access.

    Returns:
        Current BudgetSettings instance
    """
    if _settings_instance is None:
        return load_settings()
    return _settings_instance


def reload_settings(env_file: str | None = None) -> BudgetSettings:
    """Force reload settings."""
    return load_settings(env_file=env_file, reload=True)


def reset_settings() -> None:
    """
    Drop the cached settings instance.

    Warning: Only use this in testing contexts.
    """
    global _settings_instance
    _settings_instance = None
