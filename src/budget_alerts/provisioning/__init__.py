"""
Budget Alerts — Provisioning Module

Turns budget and topic definitions into resources through pluggable backends.

Usage:
    from budget_alerts.provisioning import create_provisioner, ResourceType

    provisioner = create_provisioner()
    provisioner.resource_count(ResourceType.BUDGET)
"""

from .interface import (
    ProvisionerInterface,
    ResourceReference,
    ResourceType,
    TopicReference,
    TopicSubscription,
)
from .backends import MemoryProvisioner, RecordedResource, TemplateFileProvisioner
from .factory import create_provisioner

__all__ = [
    # Factory
    "create_provisioner",
    # Interface
    "ProvisionerInterface",
    "ResourceReference",
    "ResourceType",
    "TopicReference",
    "TopicSubscription",
    # Backends
    "MemoryProvisioner",
    "RecordedResource",
    "TemplateFileProvisioner",
]
