"""
Scanner plugin interface for vulnerability providers.

Defines the contract for vulnerability scanning providers so the scan
pipeline does not depend on one scanner CLI.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence

from core.models import VulnerabilityCount


class VulnerabilityProvider(ABC):
    """
    Abstract base class for vulnerability scanners producing SARIF reports.
    """

    @abstractmethod
    def name(self) -> str:
        """
        Return the provider name.

        Returns:
            Provider identifier (e.g., "trivy")
        """
        pass

    @abstractmethod
    def scan(
        self,
        image: str,
        output_path: Path,
        severities: Sequence[str],
        timeout: str,
    ) -> VulnerabilityCount:
        """
        Scan an image and write a SARIF report.

        Args:
            image: Image reference to scan
            output_path: Where to write the SARIF report
            severities: Severities to report (e.g. ["CRITICAL", "HIGH"])
            timeout: Scanner wait budget (e.g. "10m0s")

        Returns:
            VulnerabilityCount with severity breakdown

        Raises:
            ScanException: If scan fails
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check whether the scanner binary can be run.

        Returns:
            True if the scanner responded to a version check
        """
        pass

    def version(self) -> Optional[str]:
        """
        Scanner version for log lines.

        Returns:
            Version string, or None when the provider does not report one
        """
        return None


__all__ = [
    "VulnerabilityProvider",
]
