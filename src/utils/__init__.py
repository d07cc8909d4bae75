"""Utility modules for container engine operations, validation and logging."""

from utils.docker_utils import CommandResult, DockerClient

__all__ = [
    "CommandResult",
    "DockerClient",
]
