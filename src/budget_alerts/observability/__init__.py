"""
Budget Alerts — Observability Module

Structured logging for the runtime.

Usage:
    from budget_alerts.observability import configure_logging, stack_context

    configure_logging("DEBUG")
    with stack_context("prod-account"):
        ...
"""

from .formatter import JSONFormatter, configure_logging, get_stack_id, stack_context

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "get_stack_id",
    "stack_context",
]
