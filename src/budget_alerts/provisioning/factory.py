"""
Budget Alerts — Provisioner Factory

Creates provisioner instances based on settings.

Examples:
    from budget_alerts.provisioning.factory import create_provisioner

    # Uses env-configured backend (memory by default)
    provisioner = create_provisioner()

    # Or explicitly supply settings (e.g., for tests)
    from budget_alerts.config import ProvisionerSettings, ProvisionerBackend
    cfg = ProvisionerSettings(backend=ProvisionerBackend.TEMPLATE, template_path="out/budgets.json")
    provisioner = create_provisioner(cfg)
"""

from __future__ import annotations

import logging

from ..config import ProvisionerBackend, ProvisionerSettings, get_settings
from ..errors import ConfigurationError
from .backends.memory import MemoryProvisioner
from .backends.template import TemplateFileProvisioner
from .interface import ProvisionerInterface

logger = logging.getLogger(__name__)


def create_provisioner(config: ProvisionerSettings | None = None) -> ProvisionerInterface:
    """
    Create a provisioner backend instance.

    Args:
        config: Provisioner settings (uses global settings if not provided)

    Returns:
        Configured provisioner

    Raises:
        ConfigurationError: If the backend is unknown or misconfigured
    """
    if config is None:
        config = get_settings().provisioner

    logger.info(
        "Creating provisioner with backend: %s",
        config.backend.value,
        extra={"backend": config.backend.value},
    )

    if config.backend == ProvisionerBackend.MEMORY:
        return MemoryProvisioner(account_id=config.account_id, region=config.region)

    if config.backend == ProvisionerBackend.TEMPLATE:
        if not config.template_path:
            raise ConfigurationError(
                "TEMPLATE_PATH must be set when PROVISIONER_BACKEND=template",
                details={"env": "TEMPLATE_PATH", "backend": "template"},
            )
        return TemplateFileProvisioner(
            template_path=config.template_path,
            account_id=config.account_id,
            region=config.region,
        )

    raise ConfigurationError(
        f"Unknown provisioner backend: {config.backend}",
        details={"backend": str(config.backend), "supported": [b.value for b in ProvisionerBackend]},
    )
