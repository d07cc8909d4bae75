"""
Common classes shared across the Image Sync application.

Reads the GitHub Actions run context from the environment and writes step
outputs for later jobs.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.exceptions import ConfigurationException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitHubContext:
    """
    GitHub Actions run context.

    Attributes:
        owner: Repository owner (images are published under its lowercase form)
        repository: `owner/name` of the repository
        sha: Commit sha of the run
        ref: Git ref of the run
        actor: User that triggered the run (registry login user)
        token: Token for registry login and API calls
        output_file: Path of the step output file (GITHUB_OUTPUT)
    """

    owner: str = ""
    repository: str = ""
    sha: str = ""
    ref: str = ""
    actor: str = ""
    token: str = ""
    output_file: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GitHubContext":
        """Build the context from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            owner=env.get("GITHUB_REPOSITORY_OWNER", ""),
            repository=env.get("GITHUB_REPOSITORY", ""),
            sha=env.get("GITHUB_SHA", ""),
            ref=env.get("GITHUB_REF", ""),
            actor=env.get("GITHUB_ACTOR", ""),
            token=env.get("GITHUB_TOKEN", ""),
            output_file=env.get("GITHUB_OUTPUT", ""),
        )

    def require(self, *fields: str) -> None:
        """
        Raise if any of the named fields is empty.

        Raises:
            ConfigurationException: Listing the missing environment variables
        """
        env_names = {
            "owner": "GITHUB_REPOSITORY_OWNER",
            "repository": "GITHUB_REPOSITORY",
            "sha": "GITHUB_SHA",
            "ref": "GITHUB_REF",
            "actor": "GITHUB_ACTOR",
            "token": "GITHUB_TOKEN",
            "output_file": "GITHUB_OUTPUT",
        }
        missing = [env_names.get(f, f) for f in fields if not getattr(self, f)]
        if missing:
            raise ConfigurationException(
                f"Missing required environment variables or options: {', '.join(missing)}"
            )


def escape_output_value(value: str) -> str:
    """Escape a value so it fits on one `name=value` output line."""
    return value.replace("%", "%25").replace("\n", "%0A").replace("\r", "%0D")


def write_github_outputs(values: Mapping[str, str], output_file: Optional[str] = None) -> None:
    """
    Write step outputs for GitHub Actions.

    When no output file is configured (local runs) the values are logged
    instead so the command still shows its result.

    Args:
        values: Output names and values
        output_file: Path of the GITHUB_OUTPUT file
    """
    if not output_file:
        for key, value in values.items():
            logger.info(f"{key}={value}")
        return

    try:
        with open(output_file, "a", encoding="utf-8") as handle:
            for key, value in values.items():
                handle.write(f"{key}={escape_output_value(value)}\n")
    except OSError as e:
        raise ConfigurationException(f"Failed to write step outputs to {output_file}: {e}") from e
    logger.debug(f"Wrote outputs {', '.join(values)} to {output_file}")
