"""
Trivy vulnerability scanner provider implementation.

Implements the VulnerabilityProvider interface for Aqua Security Trivy,
writing findings as SARIF for upload to code scanning.
"""

import json
import logging
import re
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from constants import DEFAULT_SCAN_SEVERITIES, DEFAULT_SCAN_TIMEOUT, VERSION_CHECK_TIMEOUT
from core.exceptions import ScanException
from core.models import SeverityLevel, VulnerabilityCount
from core.scanner_interface import VulnerabilityProvider

logger = logging.getLogger(__name__)

# Trivy accepts Go durations; the subprocess gets the same budget plus headroom.
DURATION_RE = re.compile(r"(\d+(?:\.\d+)?)(h|m|s)")
DURATION_UNITS = {"h": 3600, "m": 60, "s": 1}
SUBPROCESS_HEADROOM_SECONDS = 60

SARIF_LEVEL_TO_SEVERITY = {
    "error": SeverityLevel.HIGH.value,
    "warning": SeverityLevel.MEDIUM.value,
    "note": SeverityLevel.LOW.value,
}


def duration_to_seconds(duration: str) -> int:
    """
    Convert a Go style duration ("10m0s", "1h", "90s") to seconds.

    Raises:
        ValueError: If the duration cannot be parsed
    """
    parts = DURATION_RE.findall(duration or "")
    if not parts or "".join(n + u for n, u in parts) != duration:
        raise ValueError(f"Invalid duration: {duration}")
    return int(sum(float(n) * DURATION_UNITS[u] for n, u in parts))


class TrivyProvider(VulnerabilityProvider):
    """
    Trivy vulnerability scanner provider.

    Runs `trivy image` against a local or remote image reference.
    """

    def name(self) -> str:
        """Return provider name."""
        return "trivy"

    def is_available(self) -> bool:
        """Check if Trivy is available."""
        try:
            result = subprocess.run(
                ["trivy", "--version"],
                capture_output=True,
                timeout=VERSION_CHECK_TIMEOUT,
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def version(self) -> Optional[str]:
        """Get Trivy version."""
        try:
            result = subprocess.run(
                ["trivy", "--version"],
                capture_output=True,
                text=True,
                timeout=VERSION_CHECK_TIMEOUT,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return None

        if result.returncode != 0:
            return None
        for line in result.stdout.strip().split("\n"):
            if line.startswith("Version:"):
                return line.split(":", 1)[1].strip()
        return None

    def build_command(
        self,
        image: str,
        output_path: Path,
        severities: Sequence[str] = DEFAULT_SCAN_SEVERITIES,
        timeout: str = DEFAULT_SCAN_TIMEOUT,
    ) -> list[str]:
        """Build the `trivy image` command line."""
        return [
            "trivy",
            "image",
            "--format", "sarif",
            "--output", str(output_path),
            "--severity", ",".join(severities),
            "--timeout", timeout,
            image,
        ]

    def scan(
        self,
        image: str,
        output_path: Path,
        severities: Sequence[str] = DEFAULT_SCAN_SEVERITIES,
        timeout: str = DEFAULT_SCAN_TIMEOUT,
    ) -> VulnerabilityCount:
        """
        Scan an image with Trivy and write a SARIF report.

        Raises:
            ScanException: If scan fails or the report is unreadable
        """
        try:
            budget = duration_to_seconds(timeout) + SUBPROCESS_HEADROOM_SECONDS
        except ValueError as e:
            raise ScanException(image, str(e)) from e

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        cmd = self.build_command(image, output_path, severities, timeout)
        logger.info(f"🔍 Scanning {image} (severity: {','.join(severities)}, timeout: {timeout})")

        try:
            subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=budget,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            error_msg = f"Trivy command failed with exit code {e.returncode}"
            if e.stderr:
                error_msg += f"\nStderr: {e.stderr.strip()}"
            raise ScanException(image, error_msg) from e
        except subprocess.TimeoutExpired as e:
            raise ScanException(image, f"Trivy scan timed out after {timeout}") from e
        except FileNotFoundError as e:
            raise ScanException(image, "trivy is required but not found in PATH") from e

        try:
            document = json.loads(output_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ScanException(image, f"Invalid SARIF output: {e}") from e

        counts = parse_sarif(document, image)
        logger.info(
            f"✓ {image} - {counts.total} findings "
            f"(C:{counts.critical} H:{counts.high} M:{counts.medium} L:{counts.low})"
        )
        return counts


def _rule_severities(run: dict) -> dict[str, str]:
    """Map rule id to severity using the rule's tags."""
    severities = {}
    rules = run.get("tool", {}).get("driver", {}).get("rules", []) or []
    known = set(SeverityLevel.ordered_levels())
    for rule in rules:
        if not isinstance(rule, dict):
            continue
        tags = rule.get("properties", {}).get("tags", []) or []
        for tag in tags:
            if isinstance(tag, str) and tag.upper() in known:
                severities[rule.get("id", "")] = tag.upper()
                break
    return severities


def parse_sarif(document: dict, image_name: str = "") -> VulnerabilityCount:
    """
    Count SARIF results by severity.

    Severity comes from the rule tags Trivy writes ("CRITICAL", "HIGH", ...);
    results whose rule has no severity tag fall back to the SARIF level.

    Args:
        document: Parsed SARIF document
        image_name: Image name for logging

    Returns:
        VulnerabilityCount with severity breakdown
    """
    counts = {level: 0 for level in SeverityLevel.ordered_levels()}

    runs = document.get("runs", []) if isinstance(document, dict) else []
    if not isinstance(runs, list):
        logger.warning(f"Unexpected SARIF runs format for {image_name}: {type(runs)}")
        runs = []

    for run in runs:
        rule_severities = _rule_severities(run)
        for result in run.get("results", []) or []:
            if not isinstance(result, dict):
                logger.warning(f"Malformed SARIF result in {image_name}, skipping")
                continue
            severity = rule_severities.get(result.get("ruleId", ""))
            if severity is None:
                severity = SARIF_LEVEL_TO_SEVERITY.get(result.get("level", ""), SeverityLevel.UNKNOWN.value)
            counts[severity] += 1

    return VulnerabilityCount(
        total=sum(counts.values()),
        critical=counts[SeverityLevel.CRITICAL.value],
        high=counts[SeverityLevel.HIGH.value],
        medium=counts[SeverityLevel.MEDIUM.value],
        low=counts[SeverityLevel.LOW.value],
        unknown=counts[SeverityLevel.UNKNOWN.value],
    )


__all__ = ["TrivyProvider", "parse_sarif", "duration_to_seconds"]
