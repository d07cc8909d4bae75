"""
Orchestrates the Image Sync workflows behind each CLI command.
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional

from common import GitHubContext, write_github_outputs
from constants import EMPTY_MATRIX
from core.definitions import discover_records
from core.exceptions import ConfigurationException, RegistryException
from core.matrix import matrix_to_json, parse_matrix
from core.models import ImageSyncRecord, ScanReport, SyncResult
from core.registry_filter import filter_existing_images
from core.retry import RetryPolicy
from core.scan_pipeline import ScanPipeline
from core.syncer import ImageSyncer
from integrations.code_scanning import CodeScanningClient
from integrations.trivy_provider import TrivyProvider
from utils.docker_utils import DockerClient
from utils.logging_helpers import log_error_section, log_info_header
from utils.validation import validate_positive_number

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """
    Runs one Image Sync command from parsed command-line arguments.
    """

    def __init__(self, args, context: Optional[GitHubContext] = None, docker_client: Optional[DockerClient] = None):
        """
        Initialize the orchestrator.

        Args:
            args: Parsed arguments from argparse
            context: GitHub Actions context (read from the environment if omitted)
            docker_client: Container engine client (detected lazily if omitted)
        """
        self.args = args
        self.context = context or GitHubContext.from_env()
        self._docker_client = docker_client

    @property
    def docker_client(self) -> DockerClient:
        if self._docker_client is None:
            try:
                self._docker_client = DockerClient()
            except RuntimeError as e:
                raise ConfigurationException(f"Docker/Podman not available: {e}") from e
        return self._docker_client

    @property
    def owner(self) -> str:
        owner = getattr(self.args, "owner", None) or self.context.owner
        if not owner:
            raise ConfigurationException(
                "Destination owner is required (--owner or GITHUB_REPOSITORY_OWNER)"
            )
        return owner.lower()

    def _retry_policy(self) -> RetryPolicy:
        validate_positive_number(self.args.max_attempts, "max_attempts", min_value=1)
        return RetryPolicy.from_string(self.args.max_attempts, self.args.retry_waits)

    def _login_if_requested(self) -> None:
        if not getattr(self.args, "login", False):
            return
        self.context.require("actor", "token")
        registry = self.args.registry
        logger.info(f"Logging in to {registry} as {self.context.actor}")
        result = self.docker_client.login(registry, self.context.actor, self.context.token)
        if not result.success:
            raise RegistryException(registry, "log in to", result.stderr.strip())

    def _new_syncer(self) -> ImageSyncer:
        return ImageSyncer(
            self.docker_client,
            owner=self.owner,
            registry=self.args.registry,
            retry_policy=self._retry_policy(),
            platform=self.args.platform,
        )

    # ------------------------------------------------------------------
    # matrix
    # ------------------------------------------------------------------

    def run_matrix(self) -> int:
        """Discover definitions and publish the raw matrix output."""
        records = discover_records(self.args.definitions_dir)
        matrix_json = matrix_to_json(records)

        if matrix_json == EMPTY_MATRIX:
            logger.warning("⚠️ WARNING: No valid image definitions found.")
            logger.warning("Setting matrix to empty include.")
        else:
            logger.info("✓ Raw Matrix JSON generated.")

        log_info_header("Raw Matrix Output (before filtering):", logger=logger)
        logger.info(json.dumps(json.loads(matrix_json), indent=2))

        write_github_outputs({"matrix": matrix_json}, self.context.output_file)
        return 0

    # ------------------------------------------------------------------
    # filter
    # ------------------------------------------------------------------

    def run_filter(self) -> int:
        """Drop records whose destination tag exists and publish the filtered matrix."""
        matrix_json = self.args.matrix or os.environ.get("RAW_MATRIX_JSON", "")
        records = parse_matrix(matrix_json)
        owner = self.owner
        self._login_if_requested()

        result = filter_existing_images(records, self.docker_client, self.args.registry, owner)

        if not result.to_sync:
            logger.warning("⚠️ No images to synchronize. Output 'filtered_matrix' will not be set.")
            return 0

        logger.info("📋 Images to be Synchronized (raw list):")
        logger.info(json.dumps([r.to_dict() for r in result.to_sync], indent=2))

        write_github_outputs({"filtered_matrix": matrix_to_json(result.to_sync)}, self.context.output_file)
        logger.info("✓ Filtered matrix generated and saved to output.")
        return 0

    # ------------------------------------------------------------------
    # sync-image
    # ------------------------------------------------------------------

    def record_from_args(self) -> ImageSyncRecord:
        """Build the single record for `sync-image` from options or env."""
        record = ImageSyncRecord.from_dict({
            "dockerhub_repository": self.args.source_repository,
            "dockerhub_tag": self.args.source_tag,
            "dockerhub_digest": self.args.source_digest,
            "ghcr_package_name": self.args.package,
            "ghcr_tag": self.args.tag,
        })
        if record is None:
            raise ConfigurationException(
                "sync-image needs --source-repository, --source-tag, --source-digest, "
                "--package and --tag (or DH_REPO, DH_TAG, DH_DIGEST, GHCR_PKG, GHCR_TAG)"
            )
        return record

    def run_sync_image(self) -> int:
        """Sync exactly one record (one platform worker)."""
        record = self.record_from_args()
        syncer = self._new_syncer()
        self._login_if_requested()

        result = syncer.sync_record(record)
        self._report_failures([result])
        return 0 if result.successful else 1

    # ------------------------------------------------------------------
    # sync
    # ------------------------------------------------------------------

    def run_sync(self) -> int:
        """Discover, filter and sync every record locally with a worker pool."""
        validate_positive_number(self.args.max_workers, "max_workers", min_value=1)
        records = discover_records(self.args.definitions_dir)
        if not records:
            logger.warning("⚠️ No valid image definitions found.")
            return 0

        syncer = self._new_syncer()
        self._login_if_requested()

        if self.args.no_filter:
            to_sync = records
        else:
            to_sync = filter_existing_images(
                records, self.docker_client, self.args.registry, self.owner
            ).to_sync

        if self.args.dry_run:
            for record in to_sync:
                logger.info(f"Would sync: {record}")
            return 0

        results = syncer.sync_records(to_sync, max_workers=self.args.max_workers)
        self._report_failures(results)
        return 0 if all(r.successful for r in results) else 1

    def _report_failures(self, results: list[SyncResult]) -> None:
        failed = [r for r in results if not r.successful]
        if not failed:
            return
        log_error_section(
            f"{len(failed)} image(s) failed to synchronize.",
            [
                f"{r.destination}: {r.stage.value} failed"
                f"{f' after {r.attempts} attempts' if r.attempts else ''} ({r.error_type})"
                for r in failed
            ],
            logger=logger,
        )

    # ------------------------------------------------------------------
    # scan
    # ------------------------------------------------------------------

    def run_scan(self) -> int:
        """Build the image, scan it with Trivy and upload the SARIF report."""
        sha = self.args.sha or self.context.sha
        if not sha:
            raise ConfigurationException("Commit sha is required (--sha or GITHUB_SHA)")

        provider = TrivyProvider()
        if not provider.is_available():
            raise ConfigurationException("trivy is required but not found in PATH")
        logger.info(f"Using trivy {provider.version() or '(unknown version)'}")

        uploader = None
        if not self.args.no_upload:
            repository = self.args.repository or self.context.repository
            uploader = CodeScanningClient(repository, self.context.token)

        pipeline = ScanPipeline(self.docker_client, provider, uploader)
        report: ScanReport = pipeline.run(
            image_name=self.args.image_name,
            commit_sha=sha,
            output_path=Path(self.args.output),
            context=self.args.context,
            dockerfile=self.args.dockerfile,
            ref=self.args.ref or self.context.ref,
            severities=[s.strip().upper() for s in self.args.severity.split(",") if s.strip()],
            timeout=self.args.timeout,
            build=not self.args.no_build,
        )

        counts = report.vulnerabilities
        logger.info("=" * 60)
        logger.info(f"Scan report: {report.sarif_path}")
        logger.info(
            f"Findings: {counts.total} (Critical: {counts.critical}, High: {counts.high}, "
            f"Medium: {counts.medium}, Low: {counts.low})"
        )
        if report.upload_id:
            logger.info(f"Uploaded to code scanning (id: {report.upload_id})")
        return 0
