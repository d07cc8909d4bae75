"""
Docker/Podman utility functions for image operations.

Provides a unified interface for pulling, tagging, pushing and inspecting
container images, supporting both Docker and Podman automatically.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from constants import (
    CLI_SUBPROCESS_TIMEOUT,
    DEFAULT_SOURCE_REGISTRY,
    DOCKER_BUILD_TIMEOUT,
    DOCKER_PULL_TIMEOUT,
    DOCKER_PUSH_TIMEOUT,
    MANIFEST_INSPECT_TIMEOUT,
    VERSION_CHECK_TIMEOUT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one container engine command."""

    success: bool
    stdout: str = ""
    stderr: str = ""


class DockerClient:
    """
    Unified client for Docker/Podman operations.

    Automatically detects available container runtime (docker or podman)
    and provides a consistent interface for image operations.
    """

    def __init__(self, runtime: Optional[str] = None):
        """
        Initialize Docker client and detect available runtime.

        Args:
            runtime: Force a runtime binary instead of auto-detecting one
        """
        self.runtime = runtime or self._detect_runtime()
        if not self.runtime:
            raise RuntimeError("Neither docker nor podman found in PATH")
        logger.debug(f"Using container runtime: {self.runtime}")

    def _detect_runtime(self) -> Optional[str]:
        """Detect available container runtime."""
        for cmd in ["docker", "podman"]:
            try:
                result = subprocess.run(
                    [cmd, "--version"],
                    capture_output=True,
                    timeout=VERSION_CHECK_TIMEOUT,
                )
                if result.returncode == 0:
                    return cmd
            except (subprocess.TimeoutExpired, FileNotFoundError):
                continue
        return None

    def _run(
        self,
        args: Sequence[str],
        timeout: int,
        input_text: Optional[str] = None,
    ) -> CommandResult:
        """
        Run one runtime command.

        Timeouts and a missing binary are reported as failed results so
        callers can retry or classify them like any other failure.
        """
        cmd = [self.runtime, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                input=input_text,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(success=False, stderr="timeout")
        except FileNotFoundError as e:
            return CommandResult(success=False, stderr=str(e))

        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    def manifest_exists(self, image: str) -> bool:
        """
        Check if an image manifest exists in the remote registry.

        Args:
            image: Image reference to check

        Returns:
            True if the manifest exists, False otherwise (including errors)
        """
        result = self._run(["manifest", "inspect", image], timeout=MANIFEST_INSPECT_TIMEOUT)
        return result.success

    def pull_image(self, image: str, platform: Optional[str] = None) -> CommandResult:
        """
        Pull an image from its registry.

        Args:
            image: Image reference (tag or digest) to pull
            platform: Optional platform specification (e.g. "linux/amd64")
        """
        args = ["pull"]
        if platform:
            args.extend(["--platform", platform])
        args.append(image)
        result = self._run(args, timeout=DOCKER_PULL_TIMEOUT)

        # Docker refuses to re-pull an image already present with this digest
        if not result.success and "cannot overwrite digest" in result.stderr.lower():
            logger.debug(f"Image {image} already present locally (digest exists)")
            return CommandResult(success=True, stdout=result.stdout)
        return result

    def tag_image(self, source: str, target: str) -> CommandResult:
        """Tag a local image with a new reference."""
        return self._run(["tag", source, target], timeout=CLI_SUBPROCESS_TIMEOUT)

    def push_image(self, image: str) -> CommandResult:
        """Push a local image reference to its registry."""
        return self._run(["push", image], timeout=DOCKER_PUSH_TIMEOUT)

    def build_image(
        self,
        tag: str,
        context: str = ".",
        dockerfile: Optional[str] = None,
    ) -> CommandResult:
        """
        Build an image from a Dockerfile.

        Args:
            tag: Reference to tag the built image with
            context: Build context directory
            dockerfile: Dockerfile path (defaults to <context>/Dockerfile)
        """
        args = ["build", "-t", tag]
        if dockerfile:
            args.extend(["-f", dockerfile])
        args.append(context)
        return self._run(args, timeout=DOCKER_BUILD_TIMEOUT)

    def login(self, registry: str, username: str, password: str) -> CommandResult:
        """
        Log in to a registry, passing the password on stdin.

        Args:
            registry: Registry hostname (e.g. "ghcr.io")
            username: Registry user
            password: Password or token
        """
        return self._run(
            ["login", registry, "--username", username, "--password-stdin"],
            timeout=CLI_SUBPROCESS_TIMEOUT,
            input_text=password,
        )


def extract_registry(image: str) -> str:
    """
    Extract registry hostname from image reference.

    Args:
        image: Full image reference (e.g., registry.example.com/repo/image:tag)

    Returns:
        Registry hostname or "docker.io" for Docker Hub images
    """
    # Remove digest if present
    if "@" in image:
        image = image.split("@")[0]

    if "/" not in image:
        return DEFAULT_SOURCE_REGISTRY

    # If first part has . or : or is localhost, it's a registry
    first_part = image.split("/")[0]
    if "." in first_part or ":" in first_part or first_part == "localhost":
        return first_part

    return DEFAULT_SOURCE_REGISTRY
