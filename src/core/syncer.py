"""
Image synchronization engine.

Mirrors one record at a time: pull the pinned source digest, tag it with the
destination reference, push. Pulls and pushes retry on failure; a failed
record never affects the others.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional

from constants import DEFAULT_DESTINATION_REGISTRY, DEFAULT_MAX_WORKERS
from core.error_classification import ClassifiedError, ErrorCategory, ErrorClassifier
from core.exceptions import RetryExhaustedException, ValidationException
from core.models import ImageSyncRecord, SyncResult, SyncStage
from core.retry import RetryPolicy, run_with_retry
from utils.docker_utils import DockerClient, extract_registry
from utils.logging_helpers import log_info_header
from utils.validation import (
    validate_destination_reference,
    validate_digest,
    validate_image_reference,
)

logger = logging.getLogger(__name__)


class ImageSyncer:
    """
    Pull, tag and push images from a source registry into a destination registry.
    """

    def __init__(
        self,
        docker_client: DockerClient,
        owner: str,
        registry: str = DEFAULT_DESTINATION_REGISTRY,
        retry_policy: Optional[RetryPolicy] = None,
        platform: Optional[str] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """
        Initialize the syncer.

        Args:
            docker_client: Docker/Podman client
            owner: Destination owner/org (lowercased in references)
            registry: Destination registry hostname
            retry_policy: Retry budget for pulls and pushes
            platform: Optional platform to pull (e.g. "linux/amd64")
            sleep: Sleep function for retry waits (tests pass a no-op)
        """
        self.docker = docker_client
        self.owner = owner.lower()
        self.registry = registry
        self.retry_policy = retry_policy or RetryPolicy()
        self.platform = platform
        self._retry_kwargs = {"sleep": sleep} if sleep else {}

    def sync_record(self, record: ImageSyncRecord) -> SyncResult:
        """
        Sync one record. Stages run strictly in order; the first fatal
        error ends processing of this record.

        Args:
            record: Record to mirror

        Returns:
            SyncResult describing the outcome
        """
        destination = record.destination_reference(self.registry, self.owner)
        source = record.source_reference_by_digest
        self._log_record(record, destination)

        try:
            validate_digest(record.source_digest, "source_digest")
            validate_image_reference(source, "source")
            validate_destination_reference(destination, self.registry)
        except ValidationException as e:
            logger.error(f"✗ ERROR: {e}")
            return self._failure(record, destination, SyncStage.VALIDATE, str(e), 0)

        stage = SyncStage.PULL
        try:
            # Pull
            logger.info(f"⬇️ PULL: Attempting to download image: {source}")
            try:
                pull_attempts = run_with_retry(
                    lambda: self.docker.pull_image(source, self.platform),
                    f"{self.docker.runtime} pull {source}",
                    self.retry_policy,
                    **self._retry_kwargs,
                )
            except RetryExhaustedException as e:
                logger.error(f"✗ FATAL ERROR: Pull failed for {source} after all attempts.")
                return self._failure(record, destination, stage, e.last_error, e.attempts)
            logger.info("✓ PULL: Download complete.")

            # Tag
            stage = SyncStage.TAG
            logger.info(f"🏷️ TAG: Tagging image as {destination}")
            tag_result = self.docker.tag_image(source, destination)
            if not tag_result.success:
                logger.error(f"✗ ERROR: Tagging failed for {destination}")
                return self._failure(
                    record, destination, stage, tag_result.stderr.strip(), pull_attempts
                )
            logger.info("✓ TAG: Tagging complete.")

            # Push
            stage = SyncStage.PUSH
            logger.info(f"⬆️ PUSH: Attempting to upload image: {destination}")
            try:
                push_attempts = run_with_retry(
                    lambda: self.docker.push_image(destination),
                    f"{self.docker.runtime} push {destination}",
                    self.retry_policy,
                    **self._retry_kwargs,
                )
            except RetryExhaustedException as e:
                logger.error(f"✗ FATAL ERROR: Push failed for {destination} after all attempts.")
                return self._failure(record, destination, stage, e.last_error, e.attempts)
            logger.info("✓ PUSH: Upload complete.")
        except Exception as e:
            logger.error(f"✗ Unexpected error during {stage.value} of {destination}: {e}")
            return SyncResult(
                record=record,
                destination=destination,
                successful=False,
                stage=stage,
                error_message=str(e),
                error_type=ErrorCategory.UNKNOWN.value,
            )

        logger.info(f"🎉 Success: Image {record.source_reference} synchronized as {destination}")
        return SyncResult(
            record=record,
            destination=destination,
            successful=True,
            stage=SyncStage.DONE,
            attempts=push_attempts,
        )

    def sync_records(
        self,
        records: list[ImageSyncRecord],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> list[SyncResult]:
        """
        Sync records in parallel, one isolated worker per record.

        Args:
            records: Records to mirror
            max_workers: Maximum concurrent workers

        Returns:
            One SyncResult per record, in completion order
        """
        if not records:
            logger.info("No images to synchronize.")
            return []

        logger.info(f"Syncing {len(records)} images with {max_workers} workers")

        results: list[SyncResult] = []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_record = {
                executor.submit(self.sync_record, record): record
                for record in records
            }

            for i, future in enumerate(as_completed(future_to_record), 1):
                record = future_to_record[future]
                try:
                    result = future.result()
                except Exception as e:
                    logger.error(f"Unexpected error syncing {record}: {e}")
                    result = SyncResult(
                        record=record,
                        destination=record.destination_reference(self.registry, self.owner),
                        successful=False,
                        stage=SyncStage.VALIDATE,
                        error_message=str(e),
                        error_type=ErrorCategory.UNKNOWN.value,
                    )
                results.append(result)
                logger.info(f"Progress: {i}/{len(records)} images completed")

        succeeded = [r for r in results if r.successful]
        failed = [r for r in results if not r.successful]
        logger.info(f"Sync complete: {len(succeeded)} succeeded, {len(failed)} failed")
        self._display_failure_summary(failed)

        return results

    def _failure(
        self,
        record: ImageSyncRecord,
        destination: str,
        stage: SyncStage,
        message: str,
        attempts: int,
    ) -> SyncResult:
        if stage == SyncStage.VALIDATE:
            error_type = "invalid"
        else:
            error_type = ErrorClassifier.classify(message).category.value
        return SyncResult(
            record=record,
            destination=destination,
            successful=False,
            stage=stage,
            attempts=attempts,
            error_message=message,
            error_type=error_type,
        )

    def _log_record(self, record: ImageSyncRecord, destination: str) -> None:
        log_info_header("Syncing Image:", logger=logger)
        logger.info(f"  Source Repo:        {record.source_repository}")
        logger.info(f"  Source Tag:         {record.source_tag}")
        logger.info(f"  Source Digest:      {record.source_digest}")
        logger.info(f"  Package Name:       {record.destination_package}")
        logger.info(f"  Destination Tag:    {record.destination_tag}")
        logger.info(f"  Target Image:       {destination}")

    def _display_failure_summary(self, failed: list[SyncResult]) -> None:
        """Display categorized summary of all failures."""
        if not failed:
            return

        categories: dict[str, list[SyncResult]] = {}
        for result in failed:
            categories.setdefault(result.error_type or ErrorCategory.UNKNOWN.value, []).append(result)

        summary_parts = []

        invalid = categories.pop("invalid", [])
        if invalid:
            images = "\n    ".join(r.destination for r in invalid)
            summary_parts.append(
                f"Invalid definitions ({len(invalid)} images):\n    {images}\n"
                f"  → Fix the definition file entries"
            )

        auth = categories.get(ErrorCategory.AUTH.value, [])
        if auth:
            registries = sorted({
                extract_registry(r.destination if r.stage == SyncStage.PUSH else r.record.source_reference_by_digest)
                for r in auth
            })
            registry_list = "\n    ".join(registries)
            summary_parts.append(
                f"Authentication required ({len(auth)} images):\n"
                f"  Registries:\n    {registry_list}\n"
                f"  → Run: docker login <registry>"
            )

        for category in ErrorCategory:
            if category == ErrorCategory.AUTH:
                continue
            items = categories.get(category.value, [])
            if not items:
                continue
            hint = ClassifiedError(category, items[0].error_message or "").hint
            images = "\n    ".join(f"{r.destination} ({r.stage.value})" for r in items)
            summary_parts.append(
                f"{category.value} ({len(items)} images):\n    {images}\n  → {hint}"
            )

        if summary_parts:
            summary = "\n\n".join(summary_parts)
            logger.warning(f"\nFailure Summary:\n{summary}")
