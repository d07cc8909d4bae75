"""
Pytest fixtures and configuration for Image Sync tests.

Provides shared fixtures and test utilities across the test suite.
"""

import pytest
from unittest.mock import Mock

from core.models import ImageSyncRecord
from utils.docker_utils import CommandResult, DockerClient

NGINX_DIGEST = "sha256:" + "a" * 64
REDIS_DIGEST = "sha256:" + "b" * 64


@pytest.fixture
def nginx_record():
    """Sample complete image sync record."""
    return ImageSyncRecord(
        source_repository="library/nginx",
        source_tag="1.25",
        source_digest=NGINX_DIGEST,
        destination_package="nginx",
        destination_tag="1.25",
    )


@pytest.fixture
def redis_record():
    """Second sample record with a different destination."""
    return ImageSyncRecord(
        source_repository="library/redis",
        source_tag="7.2",
        source_digest=REDIS_DIGEST,
        destination_package="redis",
        destination_tag="7.2-alpine",
    )


@pytest.fixture
def nginx_definition():
    """Definition-file mapping for the nginx record."""
    return {
        "dockerhub_repository": "library/nginx",
        "dockerhub_tag": "1.25",
        "dockerhub_digest": NGINX_DIGEST,
        "ghcr_package_name": "nginx",
        "ghcr_tag": "1.25",
    }


@pytest.fixture
def mock_docker_client():
    """DockerClient mock whose commands all succeed."""
    client = Mock(spec=DockerClient)
    client.runtime = "docker"
    client.pull_image.return_value = CommandResult(success=True)
    client.tag_image.return_value = CommandResult(success=True)
    client.push_image.return_value = CommandResult(success=True)
    client.build_image.return_value = CommandResult(success=True)
    client.login.return_value = CommandResult(success=True)
    client.manifest_exists.return_value = False
    return client


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested waits."""
    return Mock(return_value=None)


@pytest.fixture
def definitions_dir(tmp_path):
    """Temporary definitions directory with two files."""
    root = tmp_path / "docker-image-sync-definitions"
    (root / "web").mkdir(parents=True)
    (root / "web" / "nginx.yml").write_text(
        "- dockerhub_repository: library/nginx\n"
        "  dockerhub_tag: '1.25'\n"
        f"  dockerhub_digest: {NGINX_DIGEST}\n"
        "  ghcr_package_name: nginx\n"
        "  ghcr_tag: '1.25'\n"
        "- dockerhub_repository: library/nginx\n"
        "  dockerhub_tag: '1.24'\n"
        "  ghcr_package_name: nginx\n"
        "  ghcr_tag: '1.24'\n"
    )
    (root / "redis.yaml").write_text(
        "dockerhub_repository: library/redis\n"
        "dockerhub_tag: '7.2'\n"
        f"dockerhub_digest: {REDIS_DIGEST}\n"
        "ghcr_package_name: redis\n"
        "ghcr_tag: 7.2-alpine\n"
    )
    (root / "README.md").write_text("not a definition\n")
    return root
