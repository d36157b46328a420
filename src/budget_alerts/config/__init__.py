"""
Budget Alerts — Configuration Module

Provides typed settings loading and validation.
"""

from .loader import get_settings, load_settings, reload_settings, reset_settings
from .schemas import (
    BudgetSettings,
    Environment,
    LogFormat,
    LogLevel,
    ProvisionerBackend,
    ProvisionerSettings,
)

__all__ = [
    # Loader functions
    "load_settings",
    "get_settings",
    "reload_settings",
    "reset_settings",
    # Main settings
    "BudgetSettings",
    # Enums
    "Environment",
    "LogFormat",
    "LogLevel",
    "ProvisionerBackend",
    # Settings sections
    "ProvisionerSettings",
]
