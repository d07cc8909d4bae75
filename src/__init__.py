"""
Image Sync - Container Image Mirroring and Scanning Tool

Mirror pinned container images from Docker Hub into GitHub Container Registry
and scan built images for vulnerabilities.
"""

__version__ = "1.0.0"

from core.models import (
    ImageSyncRecord,
    SyncResult,
    FilterResult,
    VulnerabilityCount,
)

__all__ = [
    "ImageSyncRecord",
    "SyncResult",
    "FilterResult",
    "VulnerabilityCount",
]
