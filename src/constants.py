"""
Centralized configuration constants for Image Sync.

This module provides a single source of truth for configuration values
that are used across multiple modules, making them easier to update
and maintain.
"""

# ============================================================================
# Registry Configuration
# ============================================================================

DEFAULT_DESTINATION_REGISTRY = "ghcr.io"
"""Registry that images are mirrored into."""

DEFAULT_SOURCE_REGISTRY = "docker.io"
"""Registry assumed for source repositories without a registry prefix."""

# ============================================================================
# Image Definitions
# ============================================================================

DEFAULT_DEFINITIONS_DIR = "docker-image-sync-definitions"
"""Directory scanned for image sync definition files."""

DEFINITION_FILE_SUFFIXES = (".yml", ".yaml")
"""File suffixes treated as image sync definition files."""

REQUIRED_RECORD_FIELDS = (
    "dockerhub_repository",
    "dockerhub_tag",
    "dockerhub_digest",
    "ghcr_package_name",
    "ghcr_tag",
)
"""Definition keys that must all be present for a record to be actionable."""

EMPTY_MATRIX = '{"include":[]}'
"""Matrix emitted when there is nothing to sync."""

# ============================================================================
# Retry Budget
# ============================================================================

DEFAULT_MAX_ATTEMPTS = 4
"""Hard ceiling on pull/push attempts per record."""

DEFAULT_RETRY_WAIT_TIMES = (30, 60, 300)
"""Seconds to wait after each failed attempt; the last value repeats."""

# ============================================================================
# Concurrency
# ============================================================================

DEFAULT_MAX_WORKERS = 2
"""Default number of parallel sync workers for local runs (one record each)."""

# ============================================================================
# Vulnerability Scanning
# ============================================================================

DEFAULT_SCAN_SEVERITIES = ("CRITICAL", "HIGH")
"""Severities reported by the vulnerability scan."""

DEFAULT_SCAN_TIMEOUT = "10m0s"
"""Wait budget passed to Trivy for one image scan."""

DEFAULT_SARIF_OUTPUT = "trivy-results.sarif"
"""Default path of the SARIF report written by the scan."""

DEFAULT_SCAN_IMAGE_NAME = "docker.io/my-organization/my-app"
"""Image name used when building the image to scan (tagged with the commit sha)."""

# ============================================================================
# Timeouts (in seconds)
# ============================================================================

VERSION_CHECK_TIMEOUT = 5
"""Timeout for tool version checks (5 seconds)."""

MANIFEST_INSPECT_TIMEOUT = 30
"""Timeout for registry manifest lookups (30 seconds)."""

DOCKER_PULL_TIMEOUT = 600
"""Timeout for one image pull attempt (10 minutes)."""

DOCKER_PUSH_TIMEOUT = 600
"""Timeout for one image push attempt (10 minutes)."""

DOCKER_BUILD_TIMEOUT = 1800
"""Timeout for building the image to scan (30 minutes)."""

CLI_SUBPROCESS_TIMEOUT = 60
"""Timeout for general CLI subprocess operations (1 minute)."""

API_REQUEST_TIMEOUT = 30
"""Timeout for general API requests (30 seconds)."""

# ============================================================================
# External Service URLs
# ============================================================================

GITHUB_API_URL = "https://api.github.com"
"""Base URL for the GitHub REST API (code scanning uploads)."""
