"""
Destination registry existence check.

Drops records whose destination tag is already published so only missing
images are synced.
"""

import logging

from core.models import FilterResult, ImageSyncRecord
from utils.docker_utils import DockerClient
from utils.logging_helpers import log_item_list

logger = logging.getLogger(__name__)


def filter_existing_images(
    records: list[ImageSyncRecord],
    docker_client: DockerClient,
    registry: str,
    owner: str,
) -> FilterResult:
    """
    Split records into those to sync and those already present.

    A failed manifest lookup counts as "missing": the image is synced
    and the push decides.

    Args:
        records: Candidate records
        docker_client: Client used for `manifest inspect`
        registry: Destination registry hostname
        owner: Destination owner (lowercased for the reference)

    Returns:
        FilterResult with records to sync and skipped destination references
    """
    logger.info(f"ℹ️ Filtering images already present in {registry}/{owner.lower()}/...")

    to_sync: list[ImageSyncRecord] = []
    skipped: list[str] = []

    for record in records:
        destination = record.destination_reference(registry, owner)
        logger.info(f"🔎 Checking: {destination}")

        if docker_client.manifest_exists(destination):
            logger.info(f"✓ Exists! Skipping: {destination} (Source: {record.source_reference})")
            skipped.append(destination)
        else:
            logger.info(f"ℹ️ Missing! Will sync: {destination} (Source: {record.source_reference})")
            to_sync.append(record)

    log_item_list(
        f"📋 Skipped Images (already in {registry}):",
        skipped,
        logger=logger,
        empty_message=f"✓ No images were skipped (none found in {registry}).",
    )
    return FilterResult(to_sync=to_sync, skipped=skipped)
