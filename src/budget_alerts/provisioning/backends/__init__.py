"""
Budget Alerts — Provisioner Backends

Exports available provisioner backend implementations.
"""

from .memory import MemoryProvisioner, RecordedResource
from .template import TemplateFileProvisioner

__all__ = [
    "MemoryProvisioner",
    "RecordedResource",
    "TemplateFileProvisioner",
]
