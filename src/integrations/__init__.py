"""Integrations with external scanners and services."""

from integrations.code_scanning import CodeScanningClient
from integrations.trivy_provider import TrivyProvider

__all__ = [
    "CodeScanningClient",
    "TrivyProvider",
]
