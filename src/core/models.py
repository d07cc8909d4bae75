"""
Domain models for image synchronization and vulnerability scanning.

This module defines the core data structures used throughout the application.
All models are immutable (frozen dataclasses) to prevent accidental mutation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional

from constants import REQUIRED_RECORD_FIELDS


class SyncStage(str, Enum):
    """Steps of one image sync, in execution order."""

    VALIDATE = "validate"
    PULL = "pull"
    TAG = "tag"
    PUSH = "push"
    DONE = "done"


class SeverityLevel(str, Enum):
    """Vulnerability severity levels as reported by Trivy."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def ordered_levels(cls) -> list[str]:
        """Return severity levels in display order."""
        return [
            cls.CRITICAL.value,
            cls.HIGH.value,
            cls.MEDIUM.value,
            cls.LOW.value,
            cls.UNKNOWN.value,
        ]


@dataclass(frozen=True)
class ImageSyncRecord:
    """
    One image to mirror from the source registry into the destination registry.

    Attributes:
        source_repository: Source repository (e.g. "library/nginx")
        source_tag: Source tag, kept for logging
        source_digest: Manifest digest the pull is pinned to
        destination_package: Package name under the destination owner
        destination_tag: Tag to publish in the destination registry
    """

    source_repository: str
    source_tag: str
    source_digest: str
    destination_package: str
    destination_tag: str

    @property
    def source_reference(self) -> str:
        """Human readable `repo:tag` reference."""
        return f"{self.source_repository}:{self.source_tag}"

    @property
    def source_reference_by_digest(self) -> str:
        """Pinned `repo@digest` reference used for the pull."""
        return f"{self.source_repository}@{self.source_digest}"

    def destination_reference(self, registry: str, owner: str) -> str:
        """Full destination reference `registry/owner/package:tag`."""
        return f"{registry}/{owner.lower()}/{self.destination_package}:{self.destination_tag}"

    def to_dict(self) -> dict[str, str]:
        """Convert to the definition-file keys used in platform matrices."""
        return {
            "dockerhub_repository": self.source_repository,
            "dockerhub_tag": self.source_tag,
            "dockerhub_digest": self.source_digest,
            "ghcr_package_name": self.destination_package,
            "ghcr_tag": self.destination_tag,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["ImageSyncRecord"]:
        """
        Create a record from a definition mapping.

        Returns:
            The record, or None when any required field is missing or empty
        """
        if not isinstance(data, Mapping):
            return None
        values = {}
        for key in REQUIRED_RECORD_FIELDS:
            value = data.get(key)
            if value is None:
                return None
            value = str(value).strip()
            if not value:
                return None
            values[key] = value
        return cls(
            source_repository=values["dockerhub_repository"],
            source_tag=values["dockerhub_tag"],
            source_digest=values["dockerhub_digest"],
            destination_package=values["ghcr_package_name"],
            destination_tag=values["ghcr_tag"],
        )

    def __str__(self) -> str:
        return f"{self.source_reference} -> {self.destination_package}:{self.destination_tag}"


@dataclass(frozen=True)
class FilterResult:
    """
    Outcome of checking the destination registry for existing tags.

    Attributes:
        to_sync: Records whose destination tag is missing
        skipped: Destination references that already exist
    """

    to_sync: list[ImageSyncRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SyncResult:
    """
    Result of syncing a single record.

    Attributes:
        record: The record that was processed
        destination: Full destination reference
        successful: Whether the image was pushed
        stage: Stage reached (DONE on success, the failing stage otherwise)
        attempts: Attempts used by the failing (or last) retried operation
        error_message: Error details if the sync failed
        error_type: Error category from error classification
    """

    record: ImageSyncRecord
    destination: str
    successful: bool
    stage: SyncStage = SyncStage.DONE
    attempts: int = 0
    error_message: Optional[str] = None
    error_type: Optional[str] = None


@dataclass(frozen=True)
class VulnerabilityCount:
    """
    Vulnerability counts broken down by severity level.

    Attributes:
        total: Total number of findings
        critical: Number of critical findings
        high: Number of high severity findings
        medium: Number of medium severity findings
        low: Number of low severity findings
        unknown: Number of findings without a recognized severity
    """

    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    unknown: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for serialization."""
        return {
            "total": self.total,
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "unknown": self.unknown,
        }

    @classmethod
    def from_dict(cls, data: dict[str, int]) -> "VulnerabilityCount":
        """Create from dictionary."""
        return cls(
            total=data.get("total", 0),
            critical=data.get("critical", 0),
            high=data.get("high", 0),
            medium=data.get("medium", 0),
            low=data.get("low", 0),
            unknown=data.get("unknown", 0),
        )


@dataclass(frozen=True)
class ScanReport:
    """
    Result of the vulnerability scan workflow.

    Attributes:
        image: Image reference that was scanned
        sarif_path: Path of the SARIF report on disk
        vulnerabilities: Findings by severity
        scan_timestamp: When the scan finished
        upload_id: Ingestion id returned by the upload endpoint (if uploaded)
    """

    image: str
    sarif_path: str
    vulnerabilities: VulnerabilityCount
    scan_timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    upload_id: Optional[str] = None
