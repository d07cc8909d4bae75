"""
Vulnerability scan workflow: build an image, scan it, upload the findings.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from constants import DEFAULT_SCAN_SEVERITIES, DEFAULT_SCAN_TIMEOUT
from core.exceptions import ScanException
from core.models import ScanReport
from core.scanner_interface import VulnerabilityProvider
from integrations.code_scanning import CodeScanningClient
from utils.docker_utils import DockerClient
from utils.validation import validate_image_reference

logger = logging.getLogger(__name__)


class ScanPipeline:
    """
    Build -> scan -> upload, strictly in that order.
    """

    def __init__(
        self,
        docker_client: DockerClient,
        provider: VulnerabilityProvider,
        uploader: Optional[CodeScanningClient] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            docker_client: Docker/Podman client used to build the image
            provider: Vulnerability scanner
            uploader: Code scanning client; None skips the upload
        """
        self.docker = docker_client
        self.provider = provider
        self.uploader = uploader

    def run(
        self,
        image_name: str,
        commit_sha: str,
        output_path: Path,
        context: str = ".",
        dockerfile: Optional[str] = None,
        ref: str = "",
        severities: Sequence[str] = DEFAULT_SCAN_SEVERITIES,
        timeout: str = DEFAULT_SCAN_TIMEOUT,
        build: bool = True,
    ) -> ScanReport:
        """
        Run the scan workflow.

        Args:
            image_name: Image name without tag; the commit sha is used as tag
            commit_sha: Commit being scanned
            output_path: SARIF report path
            context: Build context directory
            dockerfile: Optional Dockerfile path
            ref: Git ref reported with the upload
            severities: Severities to report
            timeout: Scanner wait budget
            build: Build the image first (False scans an existing image)

        Returns:
            ScanReport

        Raises:
            ScanException: If the build or scan fails
            IntegrationException: If the upload fails
        """
        image = validate_image_reference(f"{image_name}:{commit_sha}", "image")

        if build:
            logger.info(f"Building {image} from {dockerfile or Path(context) / 'Dockerfile'}")
            result = self.docker.build_image(image, context=context, dockerfile=dockerfile)
            if not result.success:
                raise ScanException(image, f"image build failed: {result.stderr.strip()}")
            logger.info(f"✓ Built {image}")

        vulnerabilities = self.provider.scan(image, Path(output_path), severities, timeout)

        upload_id = None
        if self.uploader:
            upload_id = self.uploader.upload_sarif(
                Path(output_path),
                commit_sha=commit_sha,
                ref=ref,
                tool_name=self.provider.name(),
            )
        else:
            logger.info("Skipping upload of scan results")

        return ScanReport(
            image=image,
            sarif_path=str(output_path),
            vulnerabilities=vulnerabilities,
            upload_id=upload_id,
        )
