"""Core logic for image discovery, registry filtering, syncing and scanning."""

from core.models import (
    ImageSyncRecord,
    FilterResult,
    SyncResult,
    SyncStage,
    ScanReport,
    VulnerabilityCount,
    SeverityLevel,
)

__all__ = [
    "ImageSyncRecord",
    "FilterResult",
    "SyncResult",
    "SyncStage",
    "ScanReport",
    "VulnerabilityCount",
    "SeverityLevel",
]
