"""
Budget Alerts — Template File Provisioner

Memory provisioner that also writes the rendered template to a JSON file.
"""

import json
import logging
from pathlib import Path

from ...errors import ProvisioningError
from .memory import MemoryProvisioner

logger = logging.getLogger(__name__)


class TemplateFileProvisioner(MemoryProvisioner):
    """Records resources in memory and writes them out on flush()."""

    def __init__(
        self,
        template_path: str | Path,
        account_id: str = "123456789012",
        region: str = "us-east-1",
    ):
        """
        Initialize template file provisioner.

        Args:
            template_path: Destination of the JSON template
            account_id: Account id used when building topic ARNs
            region: Region used when building topic ARNs
        """
        super().__init__(account_id=account_id, region=region)
        self.template_path = Path(template_path)

    def flush(self) -> Path:
        """
        Write the current template to template_path.

        Returns:
            Path of the written template

        Raises:
            ProvisioningError: If the file cannot be written
        """
        try:
            self.template_path.parent.mkdir(parents=True, exist_ok=True)
            self.template_path.write_text(json.dumps(self.to_template(), indent=2, sort_keys=True) + "\n")
        except OSError as e:
            logger.error(
                "Failed to write template to %s: %s",
                self.template_path,
                e,
                extra={"path": str(self.template_path), "error": str(e)},
                exc_info=True,
            )
            raise ProvisioningError(
                f"Failed to write template: {e}",
                details={"path": str(self.template_path)},
            ) from e

        logger.info(
            "Wrote template with %d resource(s) to %s",
            self.resource_count(),
            self.template_path,
            extra={"path": str(self.template_path), "resources": self.resource_count()},
        )
        return self.template_path
